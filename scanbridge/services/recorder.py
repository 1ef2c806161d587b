"""Dual-write scan recording.

A scan is stored twice: under ``lists/{eventId}/scans/{id}`` for the capture
devices, and under ``scans/{id}`` for operator tooling. Both copies carry the
same resolved event id and the same enrichment. The writes are not atomic
against each other; each is retried, and a record that ends up in only one
place is queued in ``reconciliation`` for ``MaintenanceService.reconcile_pending``.
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from scanbridge.core.constants import (
    DEFAULT_SYMBOLOGY,
    ENRICHMENT_FIELDS,
    FLAT_EVENT_FIELD,
    RECONCILIATION_COLLECTION,
    SCANS_COLLECTION,
    nested_scans_path,
)
from scanbridge.core.errors import (
    NotFoundError,
    ResolutionError,
    StoreError,
    ValidationError,
    WriteError,
)
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import to_epoch_millis
from scanbridge.services.resolver import EventResolver
from scanbridge.services.students import StudentDirectory, StudentProfile, empty_enrichment
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)

NESTED = "nested"
FLAT = "flat"


@dataclass
class RecordResult:
    id: str
    event_id: str
    nested: Dict[str, Any]
    flat: Dict[str, Any]

    @property
    def enriched(self) -> bool:
        return bool(self.flat.get("fullName"))


def build_representations(
    payload: Dict[str, Any],
    event_id: str,
    student: Optional[StudentProfile],
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Build the nested and flat documents for one scan.

    The nested copy keeps every caller-supplied field and the caller's
    timestamp shape; the flat copy is a fixed field set with the timestamp
    normalized to epoch milliseconds.
    """
    student_code = payload.get("studentId") or payload.get("code")
    processed = True if student else bool(payload.get("processed") or False)
    enrichment = student.enrichment_fields() if student else empty_enrichment()
    timestamp = payload.get("timestamp")
    if timestamp is None:
        timestamp = int(time.time() * 1000)

    shared = {
        "eventId": event_id,
        "symbology": payload.get("symbology") or DEFAULT_SYMBOLOGY,
        "studentId": student_code,
        "deviceId": payload.get("deviceId") or "",
        "synced": bool(payload.get("synced") or False),
        "processed": processed,
        "verified": processed,
        "metadata": payload.get("metadata") or {},
        **enrichment,
    }

    nested = {**payload, "timestamp": timestamp, **shared}
    flat = {
        "code": payload.get("code"),
        "timestamp": to_epoch_millis(timestamp),
        FLAT_EVENT_FIELD: event_id,
        **shared,
    }
    return nested, flat


def flat_from_nested(nested: Dict[str, Any], event_id: str) -> Dict[str, Any]:
    """Rebuild a flat copy from a surviving nested copy."""
    flat = {
        key: nested.get(key)
        for key in (
            "code", "symbology", "studentId", "deviceId", "synced", "processed",
            "verified", "metadata", *ENRICHMENT_FIELDS,
        )
    }
    flat.update({
        "timestamp": to_epoch_millis(nested.get("timestamp")),
        FLAT_EVENT_FIELD: event_id,
        "eventId": event_id,
    })
    return flat


def nested_from_flat(flat: Dict[str, Any], record_id: str, event_id: str) -> Dict[str, Any]:
    """Rebuild a nested copy from a surviving flat copy."""
    nested = {key: value for key, value in flat.items() if key != FLAT_EVENT_FIELD}
    nested.update({"id": record_id, "eventId": event_id})
    return nested


class ScanRecorder:
    """
    Records incoming scans in both representations.

    Args:
        store: document store
        strict_resolution: reject scans whose event number matches no event
            (404). When False, the unresolved reference is stored as given and
            a warning is logged; ``migrateScanRecords`` repairs such records later.
        retries: extra attempts per representation write
    """

    def __init__(
        self,
        store: DocumentStore,
        resolver: Optional[EventResolver] = None,
        students: Optional[StudentDirectory] = None,
        strict_resolution: bool = True,
        retries: int = 2,
    ):
        self.store = store
        self.resolver = resolver or EventResolver(store)
        self.students = students or StudentDirectory(store)
        self.strict_resolution = strict_resolution
        self.retries = retries

    def record(self, payload: Dict[str, Any]) -> RecordResult:
        """
        Resolve, enrich and dual-write one scan.

        Raises:
            ValidationError: ``id`` or ``eventId`` missing
            NotFoundError: unknown event number under strict resolution
            ResolutionError: event lookup failed under strict resolution
            WriteError: one or both writes failed after retries
        """
        record_id = payload.get("id")
        event_ref = payload.get("eventId")
        if not record_id or event_ref in (None, ""):
            raise ValidationError("Scan record must have id and eventId")
        record_id = str(record_id)

        event_id = self._resolve(event_ref)

        student_code = payload.get("studentId") or payload.get("code")
        student = self.students.try_find_by_code(student_code) if student_code else None

        if payload.get("timestamp") is None:
            payload = {**payload, "timestamp": self._first_seen(record_id, event_id)}
        nested, flat = build_representations(payload, event_id, student)
        self._commit(record_id, event_id, nested, flat)

        logger.info(
            "scan_recorded",
            record_id=record_id,
            event_id=event_id,
            event_ref=str(event_ref),
            student_found=student is not None,
        )
        return RecordResult(id=record_id, event_id=event_id, nested=nested, flat=flat)

    def _first_seen(self, record_id: str, event_id: str) -> Any:
        """Timestamp of an earlier write of this record, else now; replays keep the first value."""
        try:
            for path in (nested_scans_path(event_id), SCANS_COLLECTION):
                existing = self.store.get(path, record_id)
                if existing is not None and existing.data.get("timestamp") is not None:
                    return existing.data["timestamp"]
        except StoreError as exc:
            logger.warning("scan_timestamp_lookup_failed", record_id=record_id, error=str(exc))
        return int(time.time() * 1000)

    def _resolve(self, event_ref: Any) -> str:
        try:
            return self.resolver.resolve(event_ref)
        except (NotFoundError, ResolutionError) as exc:
            if self.strict_resolution:
                raise
            logger.warning("event_resolution_fallback", event_ref=str(event_ref), reason=exc.message)
            return str(event_ref)

    def _commit(self, record_id: str, event_id: str, nested: Dict[str, Any], flat: Dict[str, Any]) -> None:
        """Write nested then flat; queue the record if exactly one write failed."""
        failures: Dict[str, StoreError] = {}
        writes = (
            (NESTED, nested_scans_path(event_id), nested),
            (FLAT, SCANS_COLLECTION, flat),
        )
        for representation, path, data in writes:
            try:
                self._write_with_retry(path, record_id, data)
            except StoreError as exc:
                failures[representation] = exc

        if not failures:
            return

        if len(failures) == len(writes):
            logger.error("scan_write_failed", record_id=record_id, event_id=event_id)
            raise WriteError("Failed to add scan record", record_id=record_id, failed=[NESTED, FLAT])

        missing = next(iter(failures))
        self._queue_reconciliation(record_id, event_id, missing, failures[missing])
        raise WriteError(
            f"Scan record {record_id} was stored without its {missing} copy; queued for reconciliation",
            record_id=record_id,
            failed=[missing],
        )

    def _write_with_retry(self, path: str, record_id: str, data: Dict[str, Any]) -> None:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.store.set(path, record_id, data)
                return
            except StoreError as exc:
                logger.warning(
                    "scan_write_attempt_failed",
                    path=path,
                    record_id=record_id,
                    attempt=attempt,
                    attempts=attempts,
                    error=str(exc),
                )
                if attempt == attempts:
                    raise

    def _queue_reconciliation(self, record_id: str, event_id: str, missing: str, error: StoreError) -> None:
        entry = {
            "recordId": record_id,
            "eventId": event_id,
            "missing": missing,
            "error": str(error),
            "queuedAt": self.store.server_timestamp(),
        }
        try:
            self.store.set(RECONCILIATION_COLLECTION, record_id, entry)
            logger.warning("scan_queued_for_reconciliation", record_id=record_id, missing=missing)
        except StoreError as exc:
            # Nothing left to fall back on; the log line is the only trace
            logger.error(
                "reconciliation_queue_failed",
                record_id=record_id,
                event_id=event_id,
                missing=missing,
                error=str(exc),
            )
