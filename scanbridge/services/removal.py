"""Deleting scans from both representations."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scanbridge.core.constants import FLAT_EVENT_FIELD, SCANS_COLLECTION, nested_scans_path
from scanbridge.core.errors import NotFoundError, ResolutionError, StoreError, ValidationError
from scanbridge.core.logging_config import get_logger
from scanbridge.services.resolver import EventResolver
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)


@dataclass
class DeleteResult:
    scan_id: str
    event_id: Optional[str]
    errors: List[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.errors)


@dataclass
class BulkDeleteResult:
    deleted_count: int
    total_requested: int
    errors: List[Dict[str, str]] = field(default_factory=list)


class ScanRemover:
    """
    Removes scans from the flat index and the nested per-event log.

    The flat copy is deleted first; a failure there aborts the record. A
    nested failure after the flat copy is gone is reported, not raised.
    """

    def __init__(self, store: DocumentStore, resolver: Optional[EventResolver] = None):
        self.store = store
        self.resolver = resolver or EventResolver(store)

    def delete_scan(self, scan_id: str, event_id: Optional[str] = None) -> DeleteResult:
        """
        Raises:
            ValidationError: scan_id missing
            NotFoundError: neither representation exists
            StoreError: the flat delete failed
        """
        if not scan_id:
            raise ValidationError("scanId is required")
        return self._remove(scan_id, self._lenient_resolve(event_id))

    def bulk_delete(self, record_ids: List[str], event_id: Any) -> BulkDeleteResult:
        """Delete many records, collecting per-record failures instead of stopping."""
        if not record_ids or not isinstance(record_ids, list):
            raise ValidationError("recordIds array is required")
        if event_id in (None, ""):
            raise ValidationError("eventId is required")

        resolved = self._lenient_resolve(event_id)
        deleted = 0
        errors: List[Dict[str, str]] = []
        for record_id in record_ids:
            try:
                result = self._remove(str(record_id), resolved)
            except (NotFoundError, StoreError) as exc:
                errors.append({"recordId": str(record_id), "error": exc.message})
                continue
            if result.partial:
                errors.append({"recordId": str(record_id), "error": "; ".join(result.errors)})
                continue
            deleted += 1

        logger.info(
            "scans_bulk_deleted",
            event_id=resolved,
            deleted=deleted,
            requested=len(record_ids),
            failed=len(errors),
        )
        return BulkDeleteResult(deleted_count=deleted, total_requested=len(record_ids), errors=errors)

    def _lenient_resolve(self, event_ref: Any) -> Optional[str]:
        """Resolve when possible; deletion still targets the raw reference otherwise."""
        if event_ref in (None, ""):
            return None
        try:
            return self.resolver.resolve(event_ref)
        except (NotFoundError, ResolutionError):
            return str(event_ref)

    def _remove(self, scan_id: str, event_id: Optional[str]) -> DeleteResult:
        flat = self.store.get(SCANS_COLLECTION, scan_id)

        candidates: List[str] = []
        for candidate in (
            event_id,
            flat.data.get(FLAT_EVENT_FIELD) if flat else None,
            flat.data.get("eventId") if flat else None,
        ):
            if candidate not in (None, "") and str(candidate) not in candidates:
                candidates.append(str(candidate))

        nested_paths = [
            nested_scans_path(candidate)
            for candidate in candidates
            if self.store.get(nested_scans_path(candidate), scan_id) is not None
        ]

        if flat is None and not nested_paths:
            raise NotFoundError("Scan record not found")

        if flat is not None:
            self.store.delete(SCANS_COLLECTION, scan_id)

        result = DeleteResult(scan_id=scan_id, event_id=candidates[0] if candidates else None)
        for path in nested_paths:
            try:
                self.store.delete(path, scan_id)
            except StoreError as exc:
                logger.warning("nested_scan_delete_failed", scan_id=scan_id, path=path, error=str(exc))
                result.errors.append(f"Could not delete nested copy at {path}: {exc.message}")

        logger.info("scan_deleted", scan_id=scan_id, event_id=result.event_id, partial=result.partial)
        return result
