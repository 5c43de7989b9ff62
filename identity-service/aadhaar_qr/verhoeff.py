"""
Verhoeff checksum for 12-digit Aadhaar numbers.

UIDAI appends a Verhoeff check digit, so a full number that fails the
checksum was mistyped or invented.
"""

from typing import List

# Dihedral group D5 multiplication
MULTIPLICATION_TABLE = [
    [0, 1, 2, 3, 4, 5, 6, 7, 8, 9],
    [1, 2, 3, 4, 0, 6, 7, 8, 9, 5],
    [2, 3, 4, 0, 1, 7, 8, 9, 5, 6],
    [3, 4, 0, 1, 2, 8, 9, 5, 6, 7],
    [4, 0, 1, 2, 3, 9, 5, 6, 7, 8],
    [5, 9, 8, 7, 6, 0, 4, 3, 2, 1],
    [6, 5, 9, 8, 7, 1, 0, 4, 3, 2],
    [7, 6, 5, 9, 8, 2, 1, 0, 4, 3],
    [8, 7, 6, 5, 9, 3, 2, 1, 0, 4],
    [9, 8, 7, 6, 5, 4, 3, 2, 1, 0],
]

PERMUTATION_TABLE = [
    [0, 1, 2, 3, 4, 5, 6, 7, 8, 9],
    [1, 5, 7, 6, 2, 8, 3, 0, 9, 4],
    [5, 8, 0, 3, 7, 9, 6, 1, 4, 2],
    [8, 9, 1, 6, 0, 4, 3, 5, 2, 7],
    [9, 4, 5, 3, 1, 2, 6, 8, 7, 0],
    [4, 2, 8, 6, 5, 7, 3, 9, 0, 1],
    [2, 7, 9, 3, 8, 0, 6, 4, 1, 5],
    [7, 0, 4, 6, 9, 1, 3, 2, 5, 8],
]

INVERSE_TABLE = [0, 4, 3, 2, 1, 5, 6, 7, 8, 9]


def _checksum(digits: List[int]) -> int:
    checksum = 0
    for i, digit in enumerate(reversed(digits)):
        checksum = MULTIPLICATION_TABLE[checksum][PERMUTATION_TABLE[i % 8][digit]]
    return checksum


def is_valid(number: str) -> bool:
    """True if the digit string carries a correct Verhoeff check digit."""
    if not number or not (number.isascii() and number.isdigit()):
        return False
    return _checksum([int(d) for d in number]) == 0


def check_digit(number: str) -> str:
    """Check digit to append to ``number`` (digits only)."""
    digits = [int(d) for d in number] + [0]
    return str(INVERSE_TABLE[_checksum(digits)])
