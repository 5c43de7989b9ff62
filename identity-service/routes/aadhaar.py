from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging
from datetime import datetime
from typing import Optional

from aadhaar_qr import verify_identity_qr, compute_fingerprint, VERIFICATION_NOTICE
from aadhaar_qr.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/aadhaar", tags=["Aadhaar QR Verification"])

ALLOWED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp', '.bmp', '.tif', '.tiff')


class FingerprintRequest(BaseModel):
    name: Optional[str] = None
    dateOfBirth: Optional[str] = None
    gender: Optional[str] = None
    uidLastFour: Optional[str] = None
    postcode: Optional[str] = None


def _is_image_upload(file: UploadFile) -> bool:
    if file.content_type and file.content_type.startswith('image/'):
        return True
    filename = (file.filename or '').lower()
    return filename.endswith(ALLOWED_EXTENSIONS)


def _error(status_code: int, message: str, error_code: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        content={
            "success": False,
            "message": message,
            "errorCode": error_code,
            "timestamp": datetime.now().isoformat()
        },
        status_code=status_code
    )


@router.post("/verify-qr")
async def verify_qr(qrImage: UploadFile = File(...)):

    if not _is_image_upload(qrImage):
        logger.info(f"Rejected upload: {qrImage.filename} ({qrImage.content_type})")
        return _error(400, f"Only image files are allowed. Received: {qrImage.content_type}")

    image_bytes = await qrImage.read()

    max_bytes = get_settings().max_upload_bytes
    if len(image_bytes) > max_bytes:
        return _error(413, f"Image exceeds the {max_bytes} byte upload limit")

    # Decoding is CPU-bound; keep it off the event loop
    result = await run_in_threadpool(verify_identity_qr, image_bytes)

    if not result.success:
        return _error(400, result.error or "Failed to verify Aadhaar QR code", result.error_code)

    dedup_hash = compute_fingerprint(result.record)

    return {
        "success": True,
        "message": "Aadhaar QR code decoded successfully",
        "data": result.to_dict(),
        "deduplicationHash": dedup_hash
    }


@router.post("/fingerprint")
async def fingerprint(request: FingerprintRequest):
    return {"fingerprint": compute_fingerprint(request.model_dump())}


@router.get("/verification-info")
async def get_verification_info():

    return {
        "system": "Aadhaar Identity QR Decoder",
        "version": "1.0.0",
        "supported_qr_formats": [
            "Aadhaar Secure QR (numeric, compressed)",
            "Aadhaar XML QR",
            "Base64 deflated XML"
        ],
        "verified_flag": VERIFICATION_NOTICE,
        "limitations": [
            "Digital signatures are not verified against UIDAI's certificate",
            "Only the last 4 digits of the Aadhaar number are ever returned",
            "It does NOT verify Aadhaar existence in UIDAI database"
        ]
    }
