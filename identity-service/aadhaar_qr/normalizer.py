"""
Field normalization shared by both QR decoders.
"""

import re
from typing import Optional

GENDER_MAP = {
    "M": "Male",
    "F": "Female",
    "T": "Transgender",
}

TRAILING_FOUR_DIGITS = re.compile(r"(\d{4})$")
YEAR_PATTERN = re.compile(r"\b(\d{4})\b")


def normalize_gender(gender: Optional[str]) -> Optional[str]:
    """Expand single-letter gender codes; other values pass through."""
    if gender is None:
        return None
    gender = gender.strip()
    return GENDER_MAP.get(gender, gender)


def last_four_digits(value: Optional[str]) -> Optional[str]:
    """Trailing four digits of a reference id or uid, if it ends in digits."""
    if not value:
        return None
    match = TRAILING_FOUR_DIGITS.search(value.strip())
    return match.group(1) if match else None


def year_from_dob(dob: Optional[str]) -> Optional[str]:
    """Pull the 4-digit year out of DD-MM-YYYY, DD/MM/YYYY or YYYY-MM-DD."""
    if not dob:
        return None
    match = YEAR_PATTERN.search(dob.replace("/", "-"))
    return match.group(1) if match else None
