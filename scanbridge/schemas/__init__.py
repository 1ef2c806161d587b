"""Pydantic schemas for request/response validation."""
from scanbridge.schemas.common import ErrorResponse, SuccessResponse, coerce_reference
from scanbridge.schemas.event import CreateEventResponse, EventCreate, EventUpdate
from scanbridge.schemas.maintenance import (
    EnrichmentResponse,
    EventNumberRequest,
    MigrationResponse,
    ReconcileResponse,
)
from scanbridge.schemas.scan import (
    BulkDeleteError,
    BulkDeleteRequest,
    BulkDeleteResponse,
    DeleteScanRequest,
    DeleteScanResponse,
    RecordScanResponse,
    ScanRecordIn,
)

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "coerce_reference",
    "EventCreate",
    "EventUpdate",
    "CreateEventResponse",
    "EventNumberRequest",
    "MigrationResponse",
    "EnrichmentResponse",
    "ReconcileResponse",
    "ScanRecordIn",
    "RecordScanResponse",
    "DeleteScanRequest",
    "DeleteScanResponse",
    "BulkDeleteRequest",
    "BulkDeleteError",
    "BulkDeleteResponse",
]
