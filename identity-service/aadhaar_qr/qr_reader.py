"""
QR Payload Reader

Locates and decodes a single QR symbol in an uploaded image. The first
attempt runs on the colour image; if nothing is found the same image is
converted to grayscale and scanned exactly once more.
"""

import io
import logging

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageUnreadable, NoQrFound

logger = logging.getLogger(__name__)


class QRReader:
    """
    Reads the raw payload of an identity QR code from image bytes.
    """

    def decode(self, image_bytes: bytes) -> str:
        """
        Decode the QR payload from an encoded image.

        Args:
            image_bytes: Encoded image file contents (PNG, JPEG, ...)

        Returns:
            Decoded payload text

        Raises:
            ImageUnreadable: the bytes are not a decodable image
            NoQrFound: no QR symbol found on either attempt
        """
        image = self._load_image(image_bytes)
        # Detector instances are not shared between calls or threads
        detector = cv2.QRCodeDetector()
        height, width = image.shape[:2]
        logger.info(f"Image loaded: {width}x{height}")

        data = self._attempt(detector, image)
        if data:
            logger.info(f"QR decoded on first attempt, payload length: {len(data)}")
            return data

        logger.info("First attempt failed, trying grayscale")
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        data = self._attempt(detector, cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR))
        if data:
            logger.info(f"QR decoded on grayscale attempt, payload length: {len(data)}")
            return data

        logger.warning("No QR code found after grayscale retry")
        raise NoQrFound(
            "No QR code found in the image. Please ensure the QR code is clear and well-lit."
        )

    def _attempt(self, detector, image: np.ndarray) -> str:
        try:
            data, _, _ = detector.detectAndDecode(image)
        except cv2.error as e:
            logger.warning(f"OpenCV detection failed: {e}")
            return ""
        return data or ""

    def _load_image(self, image_bytes: bytes) -> np.ndarray:
        """Decode image bytes to a 3-channel BGR grid, falling back to Pillow."""
        if not image_bytes:
            raise ImageUnreadable("Empty image buffer")

        nparr = np.frombuffer(image_bytes, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if image is not None:
            return image

        # Formats OpenCV was built without (GIF, some WebP/TIFF variants)
        try:
            pil_img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ImageUnreadable(f"Could not decode image bytes: {e}") from e

        logger.info("Image decoded with Pillow fallback")
        return cv2.cvtColor(np.array(pil_img), cv2.COLOR_RGB2BGR)


# Singleton instance
qr_reader = QRReader()
