"""Maintenance endpoints.

Repair jobs for scans stored before event numbers were resolved, before
enrichment existed, or by a dual write that only half succeeded. All are safe
to re-run.
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from scanbridge.api.deps import get_maintenance
from scanbridge.core.errors import StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.rate_limit import RATE_LIMITS, limiter
from scanbridge.schemas import (
    EnrichmentResponse,
    EventNumberRequest,
    MigrationResponse,
    ReconcileResponse,
    SuccessResponse,
)
from scanbridge.services import MaintenanceService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/migrateScanRecords", response_model=MigrationResponse)
@limiter.limit(RATE_LIMITS["maintenance"])
async def migrate_scan_records(
    request: Request,
    body: EventNumberRequest,
    maintenance: MaintenanceService = Depends(get_maintenance),
):
    """
    Re-point flat scans stored under a raw event number at the event's id.

    Example:
        Request:
            POST /migrateScanRecords
            {"eventNumber": 42}

        Response (200):
            {
                "success": true,
                "eventNumber": 42,
                "actualEventId": "E1",
                "migratedCount": 17,
                "relocatedCount": 17
            }
    """
    try:
        report = maintenance.migrate(body.eventNumber)
    except StoreError:
        logger.exception("scan_migration_failed", event_number=body.eventNumber)
        raise HTTPException(status_code=500, detail="Failed to migrate scan records")

    return MigrationResponse(
        eventNumber=report.event_number,
        actualEventId=report.event_id,
        migratedCount=report.migrated_count,
        relocatedCount=report.relocated_count,
    )


@router.post("/fixScanRecords", response_model=EnrichmentResponse)
@limiter.limit(RATE_LIMITS["maintenance"])
async def fix_scan_records(
    request: Request,
    body: EventNumberRequest,
    maintenance: MaintenanceService = Depends(get_maintenance),
):
    """Backfill student names and verification onto an event's scans."""
    try:
        report = maintenance.enrich(body.eventNumber)
    except StoreError:
        logger.exception("scan_enrichment_failed", event_number=body.eventNumber)
        raise HTTPException(status_code=500, detail="Failed to enrich scan records")

    return EnrichmentResponse(
        eventNumber=report.event_number,
        actualEventId=report.event_id,
        totalScans=report.total_scans,
        enrichedCount=report.enriched_count,
    )


@router.post("/reconcileScanRecords", response_model=ReconcileResponse)
@limiter.limit(RATE_LIMITS["maintenance"])
async def reconcile_scan_records(
    request: Request,
    maintenance: MaintenanceService = Depends(get_maintenance),
):
    """Rebuild the missing copy of every scan queued by a half-failed dual write."""
    try:
        report = maintenance.reconcile_pending()
    except StoreError:
        logger.exception("scan_reconcile_failed")
        raise HTTPException(status_code=500, detail="Failed to reconcile scan records")

    return ReconcileResponse(reconciledCount=report.reconciled_count, unresolved=report.unresolved)


@router.api_route("/deleteTestEvent", methods=["GET", "DELETE"], response_model=SuccessResponse)
async def delete_test_event(maintenance: MaintenanceService = Depends(get_maintenance)):
    try:
        maintenance.delete_test_event()
    except StoreError:
        logger.exception("test_event_delete_failed")
        raise HTTPException(status_code=500, detail="Failed to delete test event")
    return SuccessResponse(message="Test event deleted")
