"""Event reference resolution.

Scanners and operators refer to events either by the store's internal
document id or by the human-facing ``eventNumber``. Everything written to
the store uses the internal id.
"""
from typing import Any

from scanbridge.core.constants import EVENTS_COLLECTION
from scanbridge.core.errors import NotFoundError, ResolutionError, StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import parse_number
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)


def is_event_number(reference: Any) -> bool:
    """True when the reference reads as a number (e.g. ``42`` or ``"42"``)."""
    return parse_number(reference) is not None


class EventResolver:
    """Maps event numbers to internal event ids."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def resolve(self, reference: Any) -> str:
        """
        Return the internal event id for ``reference``.

        Non-numeric references are already internal ids and pass through.

        Raises:
            NotFoundError: numeric reference that matches no event
            ResolutionError: the lookup itself failed
        """
        if not is_event_number(reference):
            return str(reference)
        return self.resolve_event_number(reference)

    def resolve_event_number(self, event_number: Any) -> str:
        """Look an event up by number, falling back to a numeric document id."""
        number = parse_number(event_number)
        if number is None:
            raise NotFoundError(f"No event found with eventNumber: {event_number}")

        try:
            matches = self.store.query(EVENTS_COLLECTION, "eventNumber", number, limit=1)
            if matches:
                logger.debug("event_number_resolved", event_number=number, event_id=matches[0].id)
                return matches[0].id

            # Some early events were stored under numeric document ids
            raw_id = str(event_number).strip()
            if self.store.get(EVENTS_COLLECTION, raw_id) is not None:
                logger.debug("event_id_numeric", event_id=raw_id)
                return raw_id
        except StoreError as exc:
            logger.error("event_lookup_failed", event_number=event_number, error=str(exc))
            raise ResolutionError(f"Failed to lookup event {event_number}") from exc

        logger.info("event_number_unknown", event_number=event_number)
        raise NotFoundError(f"No event found with eventNumber: {event_number}")
