"""
Secure QR Decoder for Aadhaar Cards

The Secure QR is one very large decimal integer. Converted back to bytes
it holds a compressed stream of UTF-8 fields separated by byte 255.
The field order is not documented and varies between issuers, so the
layout is recovered by anchoring on the gender field:

    ... RefId, Name, DOB, Gender, CareOf, District, Landmark, House, ...

Name and DOB sit just before the gender marker and the address fields
follow it at fixed offsets (see FIELD_LAYOUT).
"""

import re
import gzip
import zlib
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .config import get_settings
from .errors import DecompressionFailed, EmptyPayload, InvalidEncoding
from .models import IdentityRecord, PayloadKind
from .normalizer import last_four_digits, normalize_gender

logger = logging.getLogger(__name__)

DELIMITER = 255

GENDER_MARKERS = ("M", "F", "Male", "Female", "Transgender")

# Used when no gender marker is found (best effort only)
DEFAULT_NAME_INDEX = 3

# Name and DOB precede the gender marker
NAME_OFFSET_FROM_GENDER = 2

# Offset from the name index -> record field
FIELD_LAYOUT: Dict[int, str] = {
    0: "name",
    1: "date_of_birth",
    2: "gender",
    3: "care_of",
    4: "district",
    5: "landmark",
    6: "house",
    7: "locality",
    8: "postcode",
    9: "post_office",
    10: "state",
    11: "street",
    12: "sub_district",
    13: "village",
}

POSTCODE_PATTERN = re.compile(r"^\d{6}$", re.ASCII)
NUMERIC_PATTERN = re.compile(r"^[0-9]+$")


def _raw_inflate(data: bytes) -> bytes:
    return zlib.decompress(data, -zlib.MAX_WBITS)


# (name, leading bytes to skip, decompressor), tried in order
DECOMPRESSION_STRATEGIES: List[Tuple[str, int, Callable[[bytes], bytes]]] = [
    ("zlib", 0, zlib.decompress),
    ("raw-deflate", 0, _raw_inflate),
    ("gzip", 0, gzip.decompress),
    ("zlib-skip-2", 2, zlib.decompress),
    ("raw-deflate-skip-2", 2, _raw_inflate),
]


def numeric_to_bytes(numeric_string: str) -> bytes:
    """Big-endian, minimal-length bytes of a decimal string."""
    if not isinstance(numeric_string, str) or not NUMERIC_PATTERN.match(numeric_string.strip()):
        raise InvalidEncoding("Secure QR payload is not an unsigned decimal integer")
    big_int = int(numeric_string.strip())

    byte_length = (big_int.bit_length() + 7) // 8
    return big_int.to_bytes(byte_length, byteorder="big")


def decompress(buffer: bytes, strict: bool = False) -> Tuple[bytes, str]:
    """
    Run the decompression cascade.

    Returns the decompressed bytes and the name of the strategy that
    worked, or the untouched buffer and "none" when every strategy fails
    and strict is off.
    """
    for name, skip, decompressor in DECOMPRESSION_STRATEGIES:
        try:
            result = decompressor(buffer[skip:])
        except (zlib.error, OSError, EOFError):
            logger.debug(f"Decompression strategy {name} failed")
            continue
        logger.info(f"Decompressed with {name}, length: {len(result)}")
        return result, name

    if strict:
        raise DecompressionFailed("No decompression strategy could inflate the Secure QR payload")

    logger.warning("All decompression methods failed, using raw buffer")
    return buffer, "none"


def tokenize(buffer: bytes) -> List[str]:
    """Split on the 255 delimiter, decode, trim and drop empty tokens."""
    tokens = []
    for chunk in buffer.split(bytes([DELIMITER])):
        token = chunk.decode("utf-8", errors="replace").strip()
        if token:
            tokens.append(token)
    return tokens


def find_gender_anchor(tokens: List[str]) -> Optional[int]:
    for index, token in enumerate(tokens):
        if token in GENDER_MARKERS:
            return index
    return None


def resolve_name_index(tokens: List[str]) -> int:
    anchor = find_gender_anchor(tokens)
    if anchor is not None and anchor >= NAME_OFFSET_FROM_GENDER:
        return anchor - NAME_OFFSET_FROM_GENDER
    return DEFAULT_NAME_INDEX


def map_fields(tokens: List[str], name_index: int) -> Dict[str, Optional[str]]:
    """Apply FIELD_LAYOUT at name_index; offsets past the end are absent."""
    mapped = {}
    for offset, field_name in FIELD_LAYOUT.items():
        position = name_index + offset
        mapped[field_name] = tokens[position] if 0 <= position < len(tokens) else None
    return mapped


def find_postcode(tokens: List[str]) -> Optional[str]:
    for token in tokens:
        if POSTCODE_PATTERN.match(token):
            return token
    return None


class SecureQRDecoder:
    """
    Decodes the numeric Secure QR format into an IdentityRecord.

    Signature bytes and the embedded photo are not extracted.
    """

    def __init__(self, strict_decompression: Optional[bool] = None):
        self._strict = strict_decompression

    @property
    def strict_decompression(self) -> bool:
        if self._strict is None:
            return get_settings().strict_decompression
        return self._strict

    def decode(self, numeric_string: str) -> IdentityRecord:
        buffer = numeric_to_bytes(numeric_string)
        logger.info(f"Secure QR buffer length: {len(buffer)}")

        decompressed, strategy = decompress(buffer, strict=self.strict_decompression)
        tokens = tokenize(decompressed)
        logger.info(f"Secure QR tokens found: {len(tokens)} (strategy={strategy})")

        if not tokens:
            raise EmptyPayload("Secure QR payload contains no fields")

        name_index = resolve_name_index(tokens)
        fields = map_fields(tokens, name_index)

        # A 6-digit token is a more reliable postcode than the positional guess
        postcode = find_postcode(tokens)
        if postcode:
            fields["postcode"] = postcode

        reference_id = tokens[1] if len(tokens) > 1 else tokens[0]
        fields["gender"] = normalize_gender(fields["gender"])

        return IdentityRecord.from_fields(
            fields,
            reference_id=reference_id,
            uid_last_four=last_four_digits(reference_id),
            has_photo=False,
            payload_kind=PayloadKind.NUMERIC_SECURE,
        )


# Singleton instance
secure_qr_decoder = SecureQRDecoder()
