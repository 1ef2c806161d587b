"""Scan record schemas."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from scanbridge.schemas.common import coerce_reference


class ScanRecordIn(BaseModel):
    """
    A scan as sent by a capture device.

    Only ``id`` and ``eventId`` are required by the recorder; unknown fields
    are kept and stored on the nested copy.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    eventId: Optional[str] = None
    code: Optional[str] = None
    studentId: Optional[str] = None
    timestamp: Optional[Any] = None  # epoch millis or {"seconds", "nanoseconds"}
    deviceId: Optional[str] = None
    symbology: Optional[str] = None
    processed: Optional[bool] = None
    synced: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator('id', 'eventId', 'code', 'studentId', mode='before')
    @classmethod
    def references_as_strings(cls, v: Any) -> Any:
        return coerce_reference(v)


class RecordScanResponse(BaseModel):
    success: bool = True
    id: str
    eventId: str
    listId: str


class DeleteScanRequest(BaseModel):
    scanId: Optional[str] = None
    eventId: Optional[str] = None

    @field_validator('scanId', 'eventId', mode='before')
    @classmethod
    def references_as_strings(cls, v: Any) -> Any:
        return coerce_reference(v)


class DeleteScanResponse(BaseModel):
    success: bool = True
    message: str
    scanId: str
    eventId: Optional[str] = None
    partial: bool = False
    errors: Optional[List[str]] = None


class BulkDeleteRequest(BaseModel):
    recordIds: Optional[List[str]] = None
    eventId: Optional[str] = None

    @field_validator('recordIds', mode='before')
    @classmethod
    def record_ids_as_strings(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [coerce_reference(item) for item in v]
        return v

    @field_validator('eventId', mode='before')
    @classmethod
    def event_id_as_string(cls, v: Any) -> Any:
        return coerce_reference(v)


class BulkDeleteError(BaseModel):
    recordId: str
    error: str


class BulkDeleteResponse(BaseModel):
    success: bool = True
    message: str
    deletedCount: int
    totalRequested: int
    errors: Optional[List[BulkDeleteError]] = None
