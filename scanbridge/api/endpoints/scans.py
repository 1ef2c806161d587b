"""Scan record endpoints."""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from scanbridge.api.deps import get_reader, get_recorder, get_remover, get_store
from scanbridge.core.errors import ResolutionError, StoreError, ValidationError, WriteError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.rate_limit import RATE_LIMITS, limiter
from scanbridge.schemas import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    DeleteScanRequest,
    DeleteScanResponse,
    RecordScanResponse,
    ScanRecordIn,
    SuccessResponse,
)
from scanbridge.services import ScanReader, ScanRecorder, ScanRemover, record_error
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)
router = APIRouter()


@router.get("/getScanRecords", response_model=List[Dict[str, Any]])
async def get_scan_records(
    eventNumber: Optional[str] = None,
    eventId: Optional[str] = None,
    reader: ScanReader = Depends(get_reader),
):
    """
    List the scans of one event, newest first.

    Either query parameter may carry either form of reference; an event number
    is resolved to the event's id before reading. Both the flat index and the
    nested per-event log are read and merged by record id, the flat copy
    winning when a record is in both.

    Raises:
        400 if neither parameter is given
        404 if an event number matches no event
    """
    reference = eventNumber or eventId
    if not reference:
        raise ValidationError("eventNumber or eventId is required")

    try:
        return reader.list_scans(reference)
    except ResolutionError:
        logger.exception("event_lookup_failed", reference=reference)
        raise HTTPException(status_code=500, detail="Failed to lookup event")
    except StoreError:
        logger.exception("scans_list_failed", reference=reference)
        raise HTTPException(status_code=500, detail="Failed to get scan records")


@router.post("/addScanRecord", response_model=RecordScanResponse)
@limiter.limit(RATE_LIMITS["record_scan"])
async def add_scan_record(
    request: Request,
    scan: ScanRecordIn,
    recorder: ScanRecorder = Depends(get_recorder),
):
    """
    Record one scan in both the nested event log and the flat index.

    Replaying the same ``id`` overwrites the earlier copy, so scanners can
    retry an upload safely.

    Example:
        Request:
            POST /addScanRecord
            {
                "id": "S1",
                "eventId": "42",
                "code": "12345",
                "timestamp": {"seconds": 1726000000, "nanoseconds": 0},
                "deviceId": "scanner-3"
            }

        Response (200):
            {"success": true, "id": "S1", "eventId": "E1", "listId": "E1"}

    Rate Limit:
        600 requests per minute per IP
    """
    try:
        result = recorder.record(scan.model_dump(exclude_none=True))
    except WriteError as e:
        logger.exception("scan_record_failed", record_id=scan.id, failed=e.failed)
        raise HTTPException(status_code=500, detail=e.message)
    except ResolutionError:
        logger.exception("event_lookup_failed", event_ref=scan.eventId)
        raise HTTPException(status_code=500, detail="Failed to lookup event")
    return RecordScanResponse(id=result.id, eventId=result.event_id, listId=result.event_id)


@router.post("/addErrorRecord", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["record_error"])
async def add_error_record(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
):
    """Store an error report sent by a scanner."""
    try:
        record_error(store, payload or {})
    except StoreError:
        logger.exception("error_record_failed")
        raise HTTPException(status_code=500, detail="Failed to add error record")
    return SuccessResponse()


@router.delete("/deleteScanRecord", response_model=DeleteScanResponse, response_model_exclude_none=True)
async def delete_scan_record(
    body: DeleteScanRequest,
    remover: ScanRemover = Depends(get_remover),
):
    """
    Delete a scan from both representations.

    A nested copy that cannot be deleted once the flat copy is gone is
    reported with ``partial: true`` and the failure in ``errors``.
    """
    try:
        result = remover.delete_scan(body.scanId, body.eventId)
    except StoreError:
        logger.exception("scan_delete_failed", scan_id=body.scanId)
        raise HTTPException(status_code=500, detail="Failed to delete scan record")

    return DeleteScanResponse(
        message="Scan record deleted successfully" if not result.partial
        else "Scan record deleted from the flat index only",
        scanId=result.scan_id,
        eventId=result.event_id,
        partial=result.partial,
        errors=result.errors or None,
    )


@router.delete("/bulkDeleteScanRecords", response_model=BulkDeleteResponse, response_model_exclude_none=True)
async def bulk_delete_scan_records(
    body: BulkDeleteRequest,
    remover: ScanRemover = Depends(get_remover),
):
    """
    Delete many scans of one event.

    Records that are missing or fail are listed in ``errors``; the rest are
    still deleted and the response is 200.
    """
    try:
        result = remover.bulk_delete(body.recordIds, body.eventId)
    except StoreError:
        logger.exception("scan_bulk_delete_failed", event_id=body.eventId)
        raise HTTPException(status_code=500, detail="Failed to delete scan records")

    return BulkDeleteResponse(
        message=f"Successfully deleted {result.deleted_count} of {result.total_requested} records",
        deletedCount=result.deleted_count,
        totalRequested=result.total_requested,
        errors=result.errors or None,
    )
