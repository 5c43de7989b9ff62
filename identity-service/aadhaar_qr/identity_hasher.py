"""
Identity Normalizer & Hasher

- Deduplication fingerprint: SHA-256 over name|dob|gender|uid_last_four|postcode
  so the same person is recognised across accounts without storing the
  identifier itself.
- Identifier hash: salted SHA-256 of a full 12-digit number, for callers
  that obtain the number out of band.
- Reference id: non-secret correlation string generated per decode.
"""

import re
import time
import hashlib
import logging
import secrets
from typing import Any, Mapping, Optional, Union

from .config import get_settings
from .errors import InvalidIdentifierFormat
from .models import IdentityRecord
from . import verhoeff

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[0-9]{12}$")
WHITESPACE = re.compile(r"\s+")
BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Record attribute -> camelCase key used by the web layer
FINGERPRINT_KEYS = (
    ("name", "name"),
    ("date_of_birth", "dateOfBirth"),
    ("gender", "gender"),
    ("uid_last_four", "uidLastFour"),
    ("postcode", "postcode"),
)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, remainder = divmod(value, 36)
        out.append(BASE36_DIGITS[remainder])
    return "".join(reversed(out))


def _clean_identifier(number: str) -> str:
    if not isinstance(number, str):
        raise InvalidIdentifierFormat("Aadhaar number must be a string")
    return WHITESPACE.sub("", number)


class IdentityHasher:
    """
    One-way digests and reference ids for decoded identities.
    """

    def composite_key(self, record: Union[IdentityRecord, Mapping[str, Any]]) -> str:
        values = {}
        for attribute, key in FINGERPRINT_KEYS:
            if isinstance(record, IdentityRecord):
                value = getattr(record, attribute)
            elif isinstance(record, Mapping):
                value = record.get(key, record.get(attribute))
            else:
                raise TypeError(f"Unsupported record type: {type(record)}")
            values[attribute] = str(value).strip() if value is not None else ""

        # DOB is compared as written; everything else ignores case
        return "|".join([
            values["name"].lower(),
            values["date_of_birth"],
            values["gender"].lower(),
            values["uid_last_four"].lower(),
            values["postcode"].lower(),
        ])

    def fingerprint(self, record: Union[IdentityRecord, Mapping[str, Any]]) -> str:
        """Deterministic deduplication fingerprint (64 hex chars)."""
        composite = self.composite_key(record)
        return hashlib.sha256(composite.encode("utf-8")).hexdigest()

    def hash_identifier(self, number: str, salt: Optional[str] = None) -> str:
        """
        Salted SHA-256 of a full 12-digit Aadhaar number.

        Args:
            number: Aadhaar number, whitespace is ignored
            salt: Salt to use; defaults to AADHAAR_HASH_SALT when None or empty

        Raises:
            InvalidIdentifierFormat: not exactly 12 digits after stripping whitespace
            ConfigurationError: no non-empty salt given and none configured
        """
        clean = _clean_identifier(number)
        if not IDENTIFIER_PATTERN.match(clean):
            raise InvalidIdentifierFormat("Invalid Aadhaar number format: expected 12 digits")

        # An empty salt counts as no salt
        if not salt:
            salt = get_settings().require_salt()

        return hashlib.sha256((clean + salt).encode("utf-8")).hexdigest()

    def is_valid_identifier(self, number: str, checksum: bool = True) -> bool:
        """12-digit format check, plus the Verhoeff check digit when checksum is set."""
        try:
            clean = _clean_identifier(number)
        except InvalidIdentifierFormat:
            return False
        if not IDENTIFIER_PATTERN.match(clean):
            return False
        if checksum and not verhoeff.is_valid(clean):
            logger.debug("Aadhaar number failed Verhoeff checksum")
            return False
        return True

    def generate_reference_id(self, uid_last_four: Optional[str] = None) -> str:
        """PREFIX-<last4|XXXX>-<base36 ms timestamp>-<8 random hex>, upper-cased."""
        prefix = get_settings().reference_prefix
        timestamp = _to_base36(int(time.time() * 1000))
        entropy = secrets.token_hex(4)
        return f"{prefix}-{uid_last_four or 'XXXX'}-{timestamp}-{entropy}".upper()


# Singleton instance
identity_hasher = IdentityHasher()
