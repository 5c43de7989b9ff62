from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import os
import logging
from datetime import datetime

from aadhaar_qr.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises in production when the identifier salt is missing
    get_settings().validate()
    yield


app = FastAPI(
    title="Aadhaar Identity QR Service",
    description="Decodes Aadhaar QR codes into identity records and deduplication fingerprints.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from routes.aadhaar import router as aadhaar_router

app.include_router(aadhaar_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "service": "Aadhaar Identity QR Service",
        "version": "1.0.0",
        "status": "running",
        "timestamp": datetime.now().isoformat()
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }

if __name__ == "__main__":
    port = int(os.getenv('PORT', 8000))
    uvicorn.run("app:app", host="0.0.0.0", port=port, reload=True)
