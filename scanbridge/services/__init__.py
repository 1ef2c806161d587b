from .diagnostics import record_error
from .events import EventService
from .maintenance import (
    EnrichmentReport,
    MaintenanceService,
    MigrationReport,
    ReconcileReport,
)
from .reader import ScanReader, merge_by_id, sort_newest_first
from .recorder import RecordResult, ScanRecorder, build_representations
from .removal import BulkDeleteResult, DeleteResult, ScanRemover
from .resolver import EventResolver, is_event_number
from .students import StudentDirectory, StudentProfile

__all__ = [
    # diagnostics
    "record_error",
    # events
    "EventService",
    # maintenance
    "MaintenanceService",
    "MigrationReport",
    "EnrichmentReport",
    "ReconcileReport",
    # reader
    "ScanReader",
    "merge_by_id",
    "sort_newest_first",
    # recorder
    "ScanRecorder",
    "RecordResult",
    "build_representations",
    # removal
    "ScanRemover",
    "DeleteResult",
    "BulkDeleteResult",
    # resolver
    "EventResolver",
    "is_event_number",
    # students
    "StudentDirectory",
    "StudentProfile",
]
