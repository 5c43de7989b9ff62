"""
Tests for the HTTP surface that calls the decoding core.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from aadhaar_qr import compute_fingerprint
from aadhaar_qr.config import reset_settings
from aadhaar_qr.models import IdentityRecord
from aadhaar_qr.qr_reader import qr_reader
from app import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def scanned(monkeypatch):
    def install(payload):
        monkeypatch.setattr(qr_reader, "decode", lambda image_bytes: payload)
    return install


def upload(client, content=b"fake-image", filename="qr.png", content_type="image/png"):
    return client.post(
        "/api/v1/aadhaar/verify-qr",
        files={"qrImage": (filename, content, content_type)},
    )


class TestVerifyQR:

    def test_success(self, client, scanned, secure_payload):
        scanned(secure_payload)
        response = upload(client)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["verified"] is True
        assert body["data"]["data"]["name"] == "Jane Doe"
        assert body["data"]["data"]["uidLastFour"] == "4321"

        expected = compute_fingerprint(IdentityRecord(
            name="Jane Doe",
            date_of_birth="1990-01-01",
            gender="Female",
            uid_last_four="4321",
            postcode="411038",
        ))
        assert body["deduplicationHash"] == expected

    def test_decode_runs_off_the_event_loop(self, client, monkeypatch, secure_payload):
        seen = []

        def decode(image_bytes):
            try:
                asyncio.get_running_loop()
                seen.append("event loop")
            except RuntimeError:
                seen.append("worker thread")
            return secure_payload

        monkeypatch.setattr(qr_reader, "decode", decode)
        assert upload(client).status_code == 200
        assert seen == ["worker thread"]

    def test_extension_accepted_without_image_mime(self, client, scanned, secure_payload):
        scanned(secure_payload)
        response = upload(client, filename="scan.JPG", content_type="application/octet-stream")
        assert response.status_code == 200

    def test_non_image_rejected(self, client):
        response = upload(client, filename="notes.txt", content_type="text/plain")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_no_qr_found(self, client, blank_png):
        response = upload(client, content=blank_png)
        assert response.status_code == 400
        assert response.json()["errorCode"] == "NO_QR_FOUND"

    def test_upload_limit(self, client, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "16")
        reset_settings()
        response = upload(client, content=b"x" * 17)
        assert response.status_code == 413

    def test_missing_file(self, client):
        response = client.post("/api/v1/aadhaar/verify-qr")
        assert response.status_code == 422


class TestFingerprintEndpoint:

    def test_matches_core(self, client):
        payload = {
            "name": "Jane Doe",
            "dateOfBirth": "1990-01-01",
            "gender": "Female",
            "uidLastFour": "5678",
            "postcode": "411038",
        }
        response = client.post("/api/v1/aadhaar/fingerprint", json=payload)
        assert response.status_code == 200
        assert response.json()["fingerprint"] == compute_fingerprint(payload)

    def test_case_insensitive(self, client):
        lower = client.post("/api/v1/aadhaar/fingerprint", json={"name": "jane doe"}).json()
        upper = client.post("/api/v1/aadhaar/fingerprint", json={"name": " JANE DOE "}).json()
        assert lower == upper


class TestServiceEndpoints:

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_info_explains_verified_flag(self, client):
        body = client.get("/api/v1/aadhaar/verification-info").json()
        assert "signature" in body["verified_flag"]

    def test_startup_fails_in_production_without_salt(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        reset_settings()
        with pytest.raises(Exception):
            with TestClient(app):
                pass

    def test_startup_with_salt(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("AADHAAR_HASH_SALT", "s")
        reset_settings()
        with TestClient(app) as client:
            assert client.get("/").json()["status"] == "running"
