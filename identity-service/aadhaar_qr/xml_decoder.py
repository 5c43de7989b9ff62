"""
Legacy XML QR Decoder

Older Aadhaar letters and cards carry an XML document whose root element
(PrintLetterBarcodeData, QRData, PrintLetterQr, ...) holds the identity
fields as attributes. Some issuers use single-letter attribute names.
"""

import base64
import binascii
import logging
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Tuple

from .errors import MalformedDocument
from .models import IdentityRecord, PayloadKind
from .normalizer import last_four_digits, normalize_gender, year_from_dob

logger = logging.getLogger(__name__)

# Record field -> attribute names, first present wins
ATTRIBUTE_ALIASES: Dict[str, Tuple[str, ...]] = {
    "uid": ("uid", "u"),
    "name": ("name", "n"),
    "gender": ("gender", "g"),
    "date_of_birth": ("dob", "d"),
    "year_of_birth": ("yob",),
    "care_of": ("co",),
    "house": ("house", "h"),
    "street": ("street", "s"),
    "landmark": ("lm",),
    "locality": ("loc", "l"),
    "village": ("vtc",),
    "district": ("dist",),
    "sub_district": ("subdist",),
    "state": ("state", "st"),
    "postcode": ("pc",),
    "post_office": ("po",),
    "mobile": ("m",),
    "email": ("e",),
    "photo": ("i", "photo"),
}


class XMLQRDecoder:
    """
    Parses attribute-bearing Aadhaar XML into an IdentityRecord.
    """

    def decode(self, text: str, payload_kind: PayloadKind = PayloadKind.XML) -> IdentityRecord:
        try:
            root = ET.fromstring(text.strip())
        except ET.ParseError as e:
            raise MalformedDocument(f"Failed to parse Aadhaar XML: {e}") from e

        attrs = self._attributes(root)
        logger.info(f"Parsed XML root <{root.tag}> with {len(attrs)} attributes")

        values = {name: self._lookup(attrs, aliases) for name, aliases in ATTRIBUTE_ALIASES.items()}

        # Only the trailing digits of uid ever leave this function
        uid = values.pop("uid")
        photo_bytes = self._decode_photo(values.pop("photo"))
        mobile = values.pop("mobile")
        email = values.pop("email")

        values["gender"] = normalize_gender(values["gender"])
        if not values["year_of_birth"]:
            values["year_of_birth"] = year_from_dob(values["date_of_birth"])

        return IdentityRecord.from_fields(
            values,
            uid_last_four=last_four_digits(uid),
            mobile_last_four=last_four_digits(mobile),
            email_masked=email,
            has_photo=photo_bytes is not None,
            photo_bytes=photo_bytes,
            payload_kind=payload_kind,
        )

    def _attributes(self, root: ET.Element) -> Dict[str, str]:
        if root.attrib:
            return dict(root.attrib)
        # Wrapped documents: <QRData><PrintLetterBarcodeData .../></QRData>
        for child in root:
            if child.attrib:
                return dict(child.attrib)
        return {}

    def _lookup(self, attrs: Dict[str, str], aliases: Tuple[str, ...]) -> Optional[str]:
        for alias in aliases:
            value = attrs.get(alias)
            if value is not None and value.strip():
                return value.strip()
        return None

    def _decode_photo(self, photo: Optional[str]) -> Optional[bytes]:
        if not photo:
            return None
        try:
            return base64.b64decode(photo, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Photo attribute is not valid base64, ignoring it")
            return None


# Singleton instance
xml_qr_decoder = XMLQRDecoder()
