"""
Shared fixtures and payload builders.

Secure QR payloads are built the same way the issuer does it: fields
joined with byte 255, compressed, then rendered as one decimal integer.
"""

import zlib
import base64

import cv2
import numpy as np
import pytest

from aadhaar_qr.config import reset_settings


SAMPLE_TOKENS = [
    "V2",
    "REF4321",
    "Jane Doe",
    "1990-01-01",
    "F",
    "W/O John Doe",
    "Pune",
    "Near Temple",
    "12B",
    "Kothrud",
    "411038",
    "Kothrud PO",
    "Maharashtra",
    "MG Road",
    "Haveli",
    "Pune City",
]

SAMPLE_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<PrintLetterBarcodeData uid="123456789012" name="Jane Doe" gender="F" '
    'yob="1990" co="W/O John Doe" house="12B" street="MG Road" lm="Near Temple" '
    'loc="Kothrud" vtc="Pune City" po="Kothrud PO" dist="Pune" subdist="Haveli" '
    'state="Maharashtra" pc="411038" dob="01/01/1990"/>'
)


def join_tokens(tokens):
    return b"\xff".join(token.encode("utf-8") for token in tokens)


def to_numeric(buffer: bytes) -> str:
    return str(int.from_bytes(buffer, "big"))


def raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def encode_secure(tokens, compress=zlib.compress, prefix: bytes = b"") -> str:
    """Compress delimiter-joined tokens and render them as a decimal string."""
    return to_numeric(prefix + compress(join_tokens(tokens)))


def deflate_base64(text: str) -> str:
    return base64.b64encode(zlib.compress(text.encode("utf-8"))).decode("ascii")


def png_bytes(image: np.ndarray) -> bytes:
    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return encoded.tobytes()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from an environment without service settings."""
    for name in (
        "AADHAAR_HASH_SALT",
        "AADHAAR_QR_STRICT_DECOMPRESSION",
        "AADHAAR_REFERENCE_PREFIX",
        "APP_ENV",
        "MAX_UPLOAD_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def blank_png() -> bytes:
    return png_bytes(np.full((200, 200, 3), 255, dtype=np.uint8))


@pytest.fixture
def secure_payload() -> str:
    return encode_secure(SAMPLE_TOKENS)
