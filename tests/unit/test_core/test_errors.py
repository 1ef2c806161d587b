"""Unit tests for the error taxonomy and settings."""
import pytest

from scanbridge.core.config import Settings
from scanbridge.core.errors import (
    ConflictError,
    IndexUnavailableError,
    NotFoundError,
    ResolutionError,
    StoreError,
    ValidationError,
    WriteError,
)


@pytest.mark.unit
class TestErrors:
    """Each error carries its HTTP status and renders as {"error": ...}."""

    @pytest.mark.parametrize("error_cls, status", [
        (ValidationError, 400),
        (NotFoundError, 404),
        (ConflictError, 409),
        (StoreError, 500),
        (IndexUnavailableError, 500),
        (ResolutionError, 500),
        (WriteError, 500),
    ])
    def test_status_codes(self, error_cls, status):
        assert error_cls("boom").status_code == status

    def test_body(self):
        assert NotFoundError("Event not found").to_body() == {"error": "Event not found"}

    def test_conflict_names_field(self):
        body = ConflictError("Event number 42 already exists", conflict_field="eventNumber").to_body()
        assert body == {"error": "Event number 42 already exists", "conflictField": "eventNumber"}

    def test_store_error_family(self):
        assert issubclass(IndexUnavailableError, StoreError)
        assert issubclass(ResolutionError, StoreError)
        assert issubclass(WriteError, StoreError)

    def test_write_error_keeps_failed_sides(self):
        err = WriteError("Failed to add scan record", record_id="S1", failed=["nested", "flat"])
        assert err.record_id == "S1"
        assert err.failed == ["nested", "flat"]


@pytest.mark.unit
class TestSettings:
    """Test settings parsing and production validation."""

    def test_cors_origins_from_comma_string(self):
        s = Settings(CORS_ORIGINS="https://a.example, https://b.example")
        assert s.CORS_ORIGINS == ["https://a.example", "https://b.example"]

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            Settings(DUAL_WRITE_RETRIES=-1)

    def test_strict_resolution_default(self):
        assert Settings().STRICT_EVENT_RESOLUTION is True

    def test_production_rejects_memory_store_and_wildcard_cors(self):
        s = Settings(ENVIRONMENT="production", STORE_BACKEND="memory", CORS_ORIGINS=["*"])
        with pytest.raises(ValueError) as exc_info:
            s.validate_production_config()
        assert "STORE_BACKEND" in str(exc_info.value)
        assert "CORS_ORIGINS" in str(exc_info.value)

    def test_production_accepts_restricted_config(self):
        s = Settings(
            ENVIRONMENT="production",
            STORE_BACKEND="firestore",
            CORS_ORIGINS=["https://admin.example.edu"],
        )
        s.validate_production_config()

    def test_development_skips_validation(self):
        Settings(ENVIRONMENT="development", STORE_BACKEND="memory").validate_production_config()
