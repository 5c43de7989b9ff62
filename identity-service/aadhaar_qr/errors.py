"""
Error taxonomy for the QR decoding pipeline.

Every failure a caller can act on is an IdentityQRError with a stable
``code``. Missing optional identity fields are never errors.
"""


class IdentityQRError(Exception):
    """Base class for recoverable decoding failures"""
    code = "IDENTITY_QR_ERROR"


class ImageUnreadable(IdentityQRError):
    code = "IMAGE_UNREADABLE"


class NoQrFound(IdentityQRError):
    code = "NO_QR_FOUND"


class UnsupportedPayloadFormat(IdentityQRError):
    code = "UNSUPPORTED_PAYLOAD_FORMAT"


class InvalidEncoding(IdentityQRError):
    code = "INVALID_ENCODING"


class EmptyPayload(IdentityQRError):
    code = "EMPTY_PAYLOAD"


class DecompressionFailed(IdentityQRError):
    """Raised only when strict decompression is enabled"""
    code = "DECOMPRESSION_FAILED"


class MalformedDocument(IdentityQRError):
    code = "MALFORMED_DOCUMENT"


class InvalidIdentifierFormat(IdentityQRError):
    code = "INVALID_IDENTIFIER_FORMAT"


class ConfigurationError(IdentityQRError):
    """Required configuration (e.g. the identifier salt) is missing"""
    code = "CONFIGURATION_ERROR"
