"""Event catalogue business logic."""
from datetime import datetime, timezone
from typing import Any, Dict, List

from scanbridge.core.constants import (
    DEFAULT_CREATED_BY,
    DEFAULT_EXPORT_FORMAT,
    EVENTS_COLLECTION,
)
from scanbridge.core.errors import ConflictError, NotFoundError, ValidationError
from scanbridge.core.logging_config import get_logger
from scanbridge.core.utils import parse_iso_datetime, parse_number
from scanbridge.store.base import DocumentStore

logger = get_logger(__name__)

UPDATABLE_FIELDS = (
    "eventNumber",
    "name",
    "description",
    "location",
    "date",
    "isActive",
    "isCompleted",
    "completedAt",
    "exportFormat",
    "customColumns",
    "staticValues",
)


def _parse_event_number(value: Any):
    number = parse_number(value)
    if number is None or not isinstance(number, int):
        raise ValidationError("eventNumber must be a whole number")
    return number


def _parse_date(value: Any, field: str = "date") -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 date")


class EventService:
    """Create, list and update events; ``eventNumber`` stays unique."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list_events(self) -> List[Dict[str, Any]]:
        return [doc.to_dict() for doc in self.store.list(EVENTS_COLLECTION)]

    def create_event(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an event and return it with its new id.

        Raises:
            ValidationError: name or eventNumber missing or malformed
            ConflictError: eventNumber already used
        """
        if not data.get("name") or data.get("eventNumber") in (None, ""):
            raise ValidationError("Event name and eventNumber are required")

        event_number = _parse_event_number(data["eventNumber"])
        if self.store.query(EVENTS_COLLECTION, "eventNumber", event_number, limit=1):
            raise ConflictError(
                f"Event number {event_number} already exists",
                conflict_field="eventNumber",
            )

        now = datetime.now(timezone.utc)
        date_value = _parse_date(data["date"]) if data.get("date") else self.store.server_timestamp()

        event_doc = {
            "eventNumber": event_number,
            "name": data["name"],
            "description": data.get("description") or "",
            "date": date_value,
            "location": data.get("location") or "",
            "isActive": data["isActive"] if data.get("isActive") is not None else True,
            "isCompleted": False,
            "completedAt": None,
            "createdAt": self.store.server_timestamp(),
            "createdBy": data.get("createdBy") or DEFAULT_CREATED_BY,
            "customColumns": data.get("customColumns") or [],
            "staticValues": data.get("staticValues") or {},
            "exportFormat": data.get("exportFormat") or DEFAULT_EXPORT_FORMAT,
        }
        event_id = self.store.add(EVENTS_COLLECTION, event_doc)
        logger.info("event_created", event_id=event_id, event_number=event_number, name=data["name"])

        # Server timestamps are sentinels until read back; report wall-clock values
        return {
            "id": event_id,
            **event_doc,
            "date": data.get("date") or now.isoformat(),
            "createdAt": now.isoformat(),
        }

    def update_event(self, event_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update; only fields present in ``fields`` change.

        Raises:
            ValidationError: id missing or a field malformed
            NotFoundError: no such event
            ConflictError: new eventNumber held by another event
        """
        if not event_id:
            raise ValidationError("Event ID is required")
        if self.store.get(EVENTS_COLLECTION, event_id) is None:
            raise NotFoundError("Event not found")

        update = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}

        if "eventNumber" in update:
            update["eventNumber"] = _parse_event_number(update["eventNumber"])
            holders = self.store.query(EVENTS_COLLECTION, "eventNumber", update["eventNumber"])
            if any(doc.id != event_id for doc in holders):
                raise ConflictError(
                    f"Event number {update['eventNumber']} already exists",
                    conflict_field="eventNumber",
                )
        if update.get("date"):
            update["date"] = _parse_date(update["date"])
        if update.get("completedAt"):
            update["completedAt"] = _parse_date(update["completedAt"], "completedAt")

        update["updatedAt"] = datetime.now(timezone.utc).isoformat()
        self.store.update(EVENTS_COLLECTION, event_id, update)
        logger.info("event_updated", event_id=event_id, fields=sorted(update))

        updated = self.store.get(EVENTS_COLLECTION, event_id)
        if updated is None:
            raise NotFoundError("Event not found after update")
        return updated.to_dict()
