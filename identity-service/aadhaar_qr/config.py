"""
Service Configuration

Reads the identity QR service settings from environment variables and
validates the values that have no safe default.
"""

import os
import logging
from typing import Dict, List, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings:
    """
    Environment-driven settings

    Variables:
    - AADHAAR_HASH_SALT: salt for full identifier hashing (required, no default)
    - AADHAAR_QR_STRICT_DECOMPRESSION: fail instead of using raw bytes
    - AADHAAR_REFERENCE_PREFIX: prefix for generated reference ids
    - APP_ENV: deployment environment ("production" enables fail-fast)
    - MAX_UPLOAD_BYTES: upload limit for the web layer
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        env = os.environ if environ is None else environ

        self.hash_salt = env.get("AADHAAR_HASH_SALT") or None
        self.strict_decompression = (
            env.get("AADHAAR_QR_STRICT_DECOMPRESSION", "").strip().lower() in TRUE_VALUES
        )
        self.reference_prefix = env.get("AADHAAR_REFERENCE_PREFIX", "AADH")
        self.environment = env.get("APP_ENV", "development").strip().lower()
        self.max_upload_bytes = int(env.get("MAX_UPLOAD_BYTES", 10 * 1024 * 1024))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def missing(self) -> List[str]:
        """Names of required settings that are not set"""
        missing = []
        if not self.hash_salt:
            missing.append("AADHAAR_HASH_SALT")
        return missing

    def require_salt(self) -> str:
        if not self.hash_salt:
            raise ConfigurationError(
                "AADHAAR_HASH_SALT is not configured; refusing to hash identifiers"
            )
        return self.hash_salt

    def validate(self) -> None:
        """
        Fail fast on missing required settings in production.

        Outside production the problem is logged and surfaces later as a
        ConfigurationError from the operation that needs the value.
        """
        missing = self.missing()
        if not missing:
            logger.info("Configuration validated")
            return

        message = f"Missing required configuration: {', '.join(missing)}"
        if self.is_production:
            raise ConfigurationError(message)
        logger.warning(f"{message} (environment={self.environment})")


# Global settings instance
_settings = None


def get_settings() -> Settings:
    """Get or create global settings"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment"""
    global _settings
    _settings = None
