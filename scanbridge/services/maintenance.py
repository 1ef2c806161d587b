"""Re-runnable repair jobs over stored scans.

Each job collects its writes into one batch and commits once, so a job run
either lands completely or not at all. Jobs are not isolated from recorder
writes happening at the same time.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from scanbridge.core.constants import (
    EVENTS_COLLECTION,
    FLAT_EVENT_FIELD,
    RECONCILIATION_COLLECTION,
    SCANS_COLLECTION,
    TEST_EVENT_ID,
    nested_scans_path,
)
from scanbridge.core.errors import ValidationError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import parse_number
from scanbridge.services.recorder import flat_from_nested, nested_from_flat
from scanbridge.services.resolver import EventResolver
from scanbridge.services.students import StudentDirectory
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)


@dataclass
class MigrationReport:
    event_number: Any
    event_id: str
    migrated_count: int
    relocated_count: int


@dataclass
class EnrichmentReport:
    event_number: Any
    event_id: str
    total_scans: int
    enriched_count: int


@dataclass
class ReconcileReport:
    reconciled_count: int
    unresolved: List[str] = field(default_factory=list)


def _require_event_number(event_number: Any) -> str:
    """Canonical text of the number, so "42.0" and 42 both give "42"."""
    if event_number in (None, ""):
        raise ValidationError("eventNumber is required")
    number = parse_number(event_number)
    if number is None:
        raise ValidationError("eventNumber must be a number")
    return str(number)


class MaintenanceService:
    def __init__(
        self,
        store: DocumentStore,
        resolver: Optional[EventResolver] = None,
        students: Optional[StudentDirectory] = None,
    ):
        self.store = store
        self.resolver = resolver or EventResolver(store)
        self.students = students or StudentDirectory(store)

    def migrate(self, event_number: Any) -> MigrationReport:
        """
        Point flat scans stored under the raw event number at the event's id.

        Nested copies filed under ``lists/{eventNumber}`` move to
        ``lists/{eventId}`` in the same batch. A second run finds nothing left.

        Raises:
            ValidationError: eventNumber missing or not numeric
            NotFoundError: no event with that number
        """
        raw_number = _require_event_number(event_number)
        event_id = self.resolver.resolve_event_number(event_number)
        if event_id == raw_number:
            # The event's document id is the number itself; nothing is stale
            return MigrationReport(event_number, event_id, 0, 0)

        stale = self.store.query(SCANS_COLLECTION, FLAT_EVENT_FIELD, raw_number)
        stale_path = nested_scans_path(raw_number)
        target_path = nested_scans_path(event_id)

        batch = self.store.batch()
        relocated = 0
        for doc in stale:
            batch.update(SCANS_COLLECTION, doc.id, {FLAT_EVENT_FIELD: event_id, "eventId": event_id})

            nested = self.store.get(stale_path, doc.id)
            if nested is None:
                continue
            if self.store.get(target_path, doc.id) is None:
                batch.set(target_path, doc.id, {**nested.data, "eventId": event_id})
            batch.delete(stale_path, doc.id)
            relocated += 1

        if batch.size:
            batch.commit()
        logger.info(
            "scans_migrated",
            event_number=raw_number,
            event_id=event_id,
            migrated=len(stale),
            relocated=relocated,
        )
        return MigrationReport(event_number, event_id, len(stale), relocated)

    def enrich(self, event_number: Any) -> EnrichmentReport:
        """
        Backfill student names and verification onto an event's scans.

        Loads the roster once instead of querying per scan.
        """
        _require_event_number(event_number)
        event_id = self.resolver.resolve_event_number(event_number)

        roster = self.students.load_roster()
        scans = self.store.query(SCANS_COLLECTION, FLAT_EVENT_FIELD, event_id)
        nested_path = nested_scans_path(event_id)
        nested_ids = {doc.id for doc in self.store.list(nested_path)}

        batch = self.store.batch()
        enriched = 0
        for doc in scans:
            code = doc.data.get("studentId") or doc.data.get("code")
            student = roster.get(str(code)) if code not in (None, "") else None
            if student is None:
                logger.debug("scan_student_unknown", record_id=doc.id, student_id=code)
                continue

            fields = {
                "verified": True,
                "processed": True,
                "studentId": code,
                **student.enrichment_fields(),
            }
            batch.update(SCANS_COLLECTION, doc.id, {**fields, FLAT_EVENT_FIELD: event_id, "eventId": event_id})
            if doc.id in nested_ids:
                batch.update(nested_path, doc.id, {**fields, "eventId": event_id})
            enriched += 1

        if batch.size:
            batch.commit()
        logger.info(
            "scans_enriched",
            event_number=event_number,
            event_id=event_id,
            total=len(scans),
            enriched=enriched,
        )
        return EnrichmentReport(event_number, event_id, len(scans), enriched)

    def reconcile_pending(self) -> ReconcileReport:
        """
        Rebuild the missing copy of every record queued by a half-failed dual write.

        Entries whose surviving copy has since disappeared (e.g. deleted by an
        operator), or whose event id cannot be recovered from the entry or the
        flat copy, are dropped and reported as unresolved.
        """
        entries = self.store.list(RECONCILIATION_COLLECTION)
        batch = self.store.batch()
        reconciled = 0
        unresolved: List[str] = []

        for entry in entries:
            record_id = entry.data.get("recordId") or entry.id
            flat = self.store.get(SCANS_COLLECTION, record_id)
            event_id = entry.data.get("eventId")
            if not event_id and flat is not None:
                event_id = flat.data.get(FLAT_EVENT_FIELD) or flat.data.get("eventId")
            event_id = str(event_id or "")
            nested = self.store.get(nested_scans_path(event_id), record_id) if event_id else None

            if not event_id or (flat is None and nested is None):
                unresolved.append(record_id)
                batch.delete(RECONCILIATION_COLLECTION, entry.id)
                continue
            if nested is None:
                batch.set(nested_scans_path(event_id), record_id, nested_from_flat(flat.data, record_id, event_id))
            elif flat is None:
                batch.set(SCANS_COLLECTION, record_id, flat_from_nested(nested.data, event_id))
            # Both present: a replayed write already repaired it
            batch.delete(RECONCILIATION_COLLECTION, entry.id)
            reconciled += 1

        if batch.size:
            batch.commit()
        logger.info("scans_reconciled", reconciled=reconciled, unresolved=len(unresolved))
        return ReconcileReport(reconciled, unresolved)

    def delete_test_event(self) -> None:
        """Remove the hardcoded test event left over from scanner bring-up."""
        self.store.delete(EVENTS_COLLECTION, TEST_EVENT_ID)
        logger.info("test_event_deleted", event_id=TEST_EVENT_ID)
