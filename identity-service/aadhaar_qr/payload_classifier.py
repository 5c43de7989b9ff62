"""
Payload Classifier

Tags a raw QR payload with its wire format. The check order matters:
a digits-only payload is also valid base64, so the numeric check must
run before the base64 attempt.
"""

import re
import zlib
import base64
import binascii
import logging
from typing import Union

from .models import ClassifiedPayload, PayloadKind

logger = logging.getLogger(__name__)

DIGITS_PATTERN = re.compile(r"^\d+$", re.ASCII)


class PayloadClassifier:
    """
    Classifies QR payloads as plain XML, numeric Secure QR,
    base64+deflate XML, or unknown.
    """

    def classify(self, raw: Union[str, bytes]) -> ClassifiedPayload:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")

        # 1. Plain XML (older printed letters)
        if raw.startswith("<"):
            return ClassifiedPayload(PayloadKind.XML, raw)

        # 2. Secure QR: one very large decimal integer
        stripped = raw.strip()
        if DIGITS_PATTERN.match(stripped):
            logger.info(f"Detected numeric Secure QR payload, {len(stripped)} digits")
            return ClassifiedPayload(PayloadKind.NUMERIC_SECURE, stripped)

        # 3. Base64 of zlib-compressed XML
        inflated = self._inflate_base64(raw)
        if inflated is not None and inflated.startswith("<"):
            logger.info("Detected base64 deflated XML payload")
            return ClassifiedPayload(PayloadKind.DEFLATED_XML, inflated)

        logger.info("Unknown payload format, passing through unchanged")
        return ClassifiedPayload(PayloadKind.UNKNOWN, raw)

    def _inflate_base64(self, text: str):
        try:
            compressed = base64.b64decode(text)
            return zlib.decompress(compressed).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError, zlib.error):
            return None


# Singleton instance
payload_classifier = PayloadClassifier()
