"""Reading scans back out of both representations."""
from typing import Any, Dict, Iterable, List, Optional

from scanbridge.core.constants import FLAT_EVENT_FIELD, SCANS_COLLECTION, nested_scans_path
from scanbridge.core.errors import StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import to_epoch_millis
from scanbridge.services.resolver import EventResolver
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)


def sort_newest_first(scans: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort by normalized timestamp, newest first; mixed timestamp shapes are fine."""
    return sorted(scans, key=lambda scan: to_epoch_millis(scan.get("timestamp")), reverse=True)


def merge_by_id(flat: List[Dict[str, Any]], nested: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Union of both representations keyed by record id; the flat copy wins."""
    merged: Dict[str, Dict[str, Any]] = {}
    for scan in nested:
        merged[scan["id"]] = scan
    for scan in flat:
        merged[scan["id"]] = scan
    return list(merged.values())


class ScanReader:
    """
    Lists the scans of one event.

    Event numbers are resolved strictly: an unknown number raises
    ``NotFoundError`` instead of silently reading nothing.
    """

    def __init__(
        self,
        store: DocumentStore,
        resolver: Optional[EventResolver] = None,
        merge_nested: bool = True,
    ):
        self.store = store
        self.resolver = resolver or EventResolver(store)
        self.merge_nested = merge_nested

    def list_scans(self, reference: Any) -> List[Dict[str, Any]]:
        """
        Return every scan for the event, newest first.

        When nothing is stored under the resolved id, the raw reference is
        tried too: records written before event numbers were resolved still
        carry the number itself.
        """
        event_id = self.resolver.resolve(reference)
        scans = self._collect(event_id)

        raw_reference = str(reference).strip()
        if not scans and raw_reference != event_id:
            logger.info("scan_lookup_raw_reference", event_id=event_id, raw_reference=raw_reference)
            scans = self._collect(raw_reference)

        logger.info("scans_listed", reference=raw_reference, event_id=event_id, count=len(scans))
        return sort_newest_first(scans)

    def _collect(self, event_id: str) -> List[Dict[str, Any]]:
        if not self.merge_nested:
            return self.read_flat(event_id)

        flat: List[Dict[str, Any]] = []
        nested: List[Dict[str, Any]] = []
        errors = []
        try:
            flat = self.read_flat(event_id)
        except StoreError as exc:
            logger.warning("flat_scans_unreadable", event_id=event_id, error=str(exc))
            errors.append(exc)
        try:
            nested = self.read_nested(event_id)
        except StoreError as exc:
            logger.warning("nested_scans_unreadable", event_id=event_id, error=str(exc))
            errors.append(exc)

        if len(errors) == 2:
            raise StoreError(f"Failed to read scans for event {event_id}") from errors[0]
        return merge_by_id(flat, nested)

    def read_flat(self, event_id: str) -> List[Dict[str, Any]]:
        """
        Flat scans for an event, trying the indexed ordered query first.

        An ordered query skips documents that lack the order field, so the
        unordered result is always read as well and anything missing from
        the ordered one is appended.
        """
        ordered: Optional[List[Dict[str, Any]]] = None
        try:
            docs = self.store.query(
                SCANS_COLLECTION,
                FLAT_EVENT_FIELD,
                event_id,
                order_by="timestamp",
                descending=True,
            )
            ordered = [doc.to_dict() for doc in docs]
        except StoreError as exc:
            # Typically IndexUnavailableError: no composite index for listId + timestamp
            logger.info("ordered_scan_query_unavailable", event_id=event_id, error=str(exc))

        everything = [doc.to_dict() for doc in self.store.query(SCANS_COLLECTION, FLAT_EVENT_FIELD, event_id)]
        if ordered is None:
            return sort_newest_first(everything)

        seen = {scan["id"] for scan in ordered}
        untimed = [scan for scan in everything if scan["id"] not in seen]
        if untimed:
            logger.info("flat_scans_without_timestamp", event_id=event_id, count=len(untimed))
        return ordered + sort_newest_first(untimed)

    def read_nested(self, event_id: str) -> List[Dict[str, Any]]:
        return [doc.to_dict() for doc in self.store.list(nested_scans_path(event_id))]
