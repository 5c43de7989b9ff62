"""
Data Models for Aadhaar QR Decoding

Dataclasses and enums shared by the reader, decoders, hasher and verifier.
"""

import base64
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any
from enum import Enum
from datetime import datetime


class PayloadKind(Enum):
    """Wire format of a decoded QR payload"""
    XML = "xml"
    NUMERIC_SECURE = "numeric-secure"
    DEFLATED_XML = "base64-deflated-xml"
    UNKNOWN = "unknown"


@dataclass
class ClassifiedPayload:
    """A QR payload tagged with its format, ready for the matching decoder"""
    kind: PayloadKind
    data: str


@dataclass
class IdentityRecord:
    """Normalized identity fields decoded from either QR format"""
    name: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None  # Male / Female / Transgender / raw value
    year_of_birth: Optional[str] = None
    care_of: Optional[str] = None
    house: Optional[str] = None
    street: Optional[str] = None
    landmark: Optional[str] = None
    locality: Optional[str] = None
    village: Optional[str] = None
    district: Optional[str] = None
    sub_district: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    post_office: Optional[str] = None
    uid_last_four: Optional[str] = None  # never the full number
    reference_id: Optional[str] = None
    mobile_last_four: Optional[str] = None
    email_masked: Optional[str] = None
    has_photo: bool = False
    photo_bytes: Optional[bytes] = field(default=None, repr=False)
    payload_kind: PayloadKind = PayloadKind.UNKNOWN

    @classmethod
    def from_fields(cls, values: Dict[str, Any], **extra) -> "IdentityRecord":
        """Build a record from a field map, storing empty strings as None."""
        known = {f.name for f in fields(cls)}
        cleaned = {}
        for key, value in {**values, **extra}.items():
            if key not in known:
                continue
            if isinstance(value, str):
                value = value.strip() or None
            cleaned[key] = value
        return cls(**cleaned)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "name": self.name,
            "uidLastFour": self.uid_last_four,
            "gender": self.gender,
            "dateOfBirth": self.date_of_birth,
            "yearOfBirth": self.year_of_birth,
            "referenceId": self.reference_id,
            "address": {
                "careOf": self.care_of,
                "house": self.house,
                "street": self.street,
                "landmark": self.landmark,
                "locality": self.locality,
                "village": self.village,
                "district": self.district,
                "subDistrict": self.sub_district,
                "state": self.state,
                "postcode": self.postcode,
                "postOffice": self.post_office,
            },
            "mobileLastFour": self.mobile_last_four,
            "emailMasked": self.email_masked,
            "hasPhoto": self.has_photo,
            "photoBase64": (
                base64.b64encode(self.photo_bytes).decode("ascii")
                if self.photo_bytes else None
            ),
            "payloadKind": self.payload_kind.value,
        }


VERIFICATION_NOTICE = (
    "verified=true means the QR payload was decoded into identity fields. "
    "The embedded digital signature is NOT checked against UIDAI's public "
    "key, so this is not cryptographic proof of authenticity."
)


@dataclass
class VerificationResult:
    """Outcome of one image -> identity record verification run"""
    success: bool = False
    verified: bool = False
    reference_id: Optional[str] = None
    record: Optional[IdentityRecord] = None
    payload_kind: Optional[PayloadKind] = None

    # Failure details
    error_code: Optional[str] = None
    error: Optional[str] = None

    processing_time_ms: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    verification_notice: str = VERIFICATION_NOTICE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            "success": self.success,
            "verified": self.verified,
            "referenceId": self.reference_id,
            "payloadKind": self.payload_kind.value if self.payload_kind else None,
            "processingTimeMs": self.processing_time_ms,
            "timestamp": self.timestamp,
            "verificationNotice": self.verification_notice,
        }

        if self.success and self.record:
            result["data"] = self.record.to_dict()
        else:
            result["errorCode"] = self.error_code
            result["error"] = self.error

        return result
