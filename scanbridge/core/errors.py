"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to so the exception handlers in
``scanbridge.main`` can render it without a lookup table.
"""
from typing import Any, Dict, Optional


class ScanBridgeError(Exception):
    """Base class for all expected failures."""

    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_body(self) -> Dict[str, Any]:
        body = {"error": self.message}
        body.update(self.extra)
        return body


class ValidationError(ScanBridgeError):
    """A required field is missing or malformed."""

    status_code = 400


class NotFoundError(ScanBridgeError):
    """No matching event, student or scan."""

    status_code = 404


class ConflictError(ScanBridgeError):
    """A unique key is already taken."""

    status_code = 409

    def __init__(self, message: str, conflict_field: Optional[str] = None):
        if conflict_field:
            super().__init__(message, conflictField=conflict_field)
        else:
            super().__init__(message)


class MethodNotAllowedError(ScanBridgeError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class StoreError(ScanBridgeError):
    """The underlying document store call failed."""

    status_code = 500


class IndexUnavailableError(StoreError):
    """An ordered query needs an index the store does not have."""


class ResolutionError(StoreError):
    """Looking up an event by its number failed (not the same as not found)."""


class WriteError(StoreError):
    """One or both scan representations could not be written."""

    def __init__(self, message: str, record_id: Optional[str] = None, failed: Optional[list] = None):
        super().__init__(message)
        self.record_id = record_id
        self.failed = failed or []
