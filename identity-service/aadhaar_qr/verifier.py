import time
import logging
from typing import Optional, Union

from .errors import IdentityQRError, MalformedDocument, UnsupportedPayloadFormat
from .identity_hasher import identity_hasher
from .models import IdentityRecord, PayloadKind, VerificationResult
from .normalizer import year_from_dob
from .payload_classifier import payload_classifier
from .qr_reader import qr_reader
from .secure_qr import secure_qr_decoder
from .xml_decoder import xml_qr_decoder

logger = logging.getLogger(__name__)


class IdentityQRVerifier:

    def verify(self, image_bytes: bytes) -> VerificationResult:
        start_time = time.time()
        result = VerificationResult()

        try:
            # Step 1: Read the QR payload
            logger.info("Step 1: QR Code Detection")
            raw_payload = qr_reader.decode(image_bytes)

            # Step 2: Classify the payload
            logger.info("Step 2: Payload Classification")
            classified = payload_classifier.classify(raw_payload)
            result.payload_kind = classified.kind
            logger.info(f"Payload classified as {classified.kind.value}")

            # Step 3: Decode with the matching decoder
            logger.info("Step 3: Field Decoding")
            record = self._decode(classified.kind, classified.data)

            # Step 4: Normalize
            logger.info("Step 4: Normalization")
            self._normalize(record)

        except IdentityQRError as e:
            logger.warning(f"Verification failed [{e.code}]: {e}")
            result.error_code = e.code
            result.error = str(e)
            result.processing_time_ms = round((time.time() - start_time) * 1000, 2)
            return result

        result.success = True
        # Fields were decoded; the signature is not checked
        result.verified = True
        result.record = record
        result.reference_id = identity_hasher.generate_reference_id(record.uid_last_four)
        result.processing_time_ms = round((time.time() - start_time) * 1000, 2)

        logger.info(f"Verification complete: kind={result.payload_kind.value}, "
                    f"fields={self._count_fields(record)}")
        return result

    def _decode(self, kind: PayloadKind, data: str) -> IdentityRecord:
        if kind == PayloadKind.NUMERIC_SECURE:
            return secure_qr_decoder.decode(data)

        if kind in (PayloadKind.XML, PayloadKind.DEFLATED_XML):
            return xml_qr_decoder.decode(data, payload_kind=kind)

        # Unknown payloads get one best-effort XML parse
        try:
            return xml_qr_decoder.decode(data, payload_kind=PayloadKind.UNKNOWN)
        except MalformedDocument as e:
            raise UnsupportedPayloadFormat("Unable to parse QR data format") from e

    def _normalize(self, record: IdentityRecord) -> None:
        if not record.year_of_birth:
            record.year_of_birth = year_from_dob(record.date_of_birth)

    def _count_fields(self, record: IdentityRecord) -> int:
        values = vars(record).values()
        return sum(1 for value in values if isinstance(value, str) and value)


# Singleton instance and convenience functions
identity_qr_verifier = IdentityQRVerifier()


def verify_identity_qr(image_bytes: bytes) -> VerificationResult:
    return identity_qr_verifier.verify(image_bytes)


def compute_fingerprint(record: Union[IdentityRecord, dict]) -> str:
    return identity_hasher.fingerprint(record)


def hash_full_identifier(number: str, salt: Optional[str] = None) -> str:
    return identity_hasher.hash_identifier(number, salt)


def is_valid_identifier(number: str, checksum: bool = True) -> bool:
    return identity_hasher.is_valid_identifier(number, checksum)
