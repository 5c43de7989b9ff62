"""Aadhaar identity QR decoding and deduplication hashing."""

from .models import (
    ClassifiedPayload,
    IdentityRecord,
    PayloadKind,
    VerificationResult,
    VERIFICATION_NOTICE
)
from .errors import (
    IdentityQRError,
    ImageUnreadable,
    NoQrFound,
    UnsupportedPayloadFormat,
    InvalidEncoding,
    EmptyPayload,
    DecompressionFailed,
    MalformedDocument,
    InvalidIdentifierFormat,
    ConfigurationError
)
from .verifier import (
    IdentityQRVerifier,
    verify_identity_qr,
    compute_fingerprint,
    hash_full_identifier,
    is_valid_identifier
)

__version__ = "1.0.0"
__all__ = [
    "IdentityQRVerifier",
    "verify_identity_qr",
    "compute_fingerprint",
    "hash_full_identifier",
    "is_valid_identifier",
    "ClassifiedPayload",
    "IdentityRecord",
    "PayloadKind",
    "VerificationResult",
    "VERIFICATION_NOTICE",
    "IdentityQRError",
    "ImageUnreadable",
    "NoQrFound",
    "UnsupportedPayloadFormat",
    "InvalidEncoding",
    "EmptyPayload",
    "DecompressionFailed",
    "MalformedDocument",
    "InvalidIdentifierFormat",
    "ConfigurationError"
]
