"""Application configuration."""
import os
from typing import Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Document store
    STORE_BACKEND: str = "firestore"  # firestore, memory
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # falls back to ADC when unset

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["*"]

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Application
    APP_TITLE: str = "ScanBridge Check-in Functions"
    APP_DESCRIPTION: str = "Event, student and scan-record functions for the check-in scanners"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # render logs as JSON lines instead of console output

    # Scan ingestion
    # Strict: an event number that matches no event is rejected with 404.
    # Lenient: the raw reference is stored as-is and left for migrateScanRecords.
    STRICT_EVENT_RESOLUTION: bool = True
    MERGE_NESTED_SCANS: bool = True
    DUAL_WRITE_RETRIES: int = 2  # extra attempts per representation

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Photo-check CLI
    PHOTO_CHECK_URL: str = "https://us-central1-scannerappfb.cloudfunctions.net/checkStudentPhotos"
    PHOTO_CHECK_TIMEOUT: int = 30  # seconds

    @field_validator('DUAL_WRITE_RETRIES')
    @classmethod
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("DUAL_WRITE_RETRIES must be >= 0")
        return v

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT != "production":
            return

        issues = []
        if self.STORE_BACKEND == "memory":
            issues.append("STORE_BACKEND=memory loses every write on restart")
        if self.CORS_ORIGINS == ["*"]:
            issues.append("CORS_ORIGINS should be restricted to specific domains")

        if issues:
            raise ValueError(
                "Production configuration errors:\n" +
                "\n".join(f"  - {issue}" for issue in issues)
            )


settings = Settings()

if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
