"""Event endpoints."""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from scanbridge.api.deps import get_event_service
from scanbridge.core.errors import StoreError
from scanbridge.core.logging_config import get_logger
from scanbridge.schemas import CreateEventResponse, EventCreate, EventUpdate
from scanbridge.services import EventService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/getEvents", response_model=List[Dict[str, Any]])
async def get_events(service: EventService = Depends(get_event_service)):
    """List every event."""
    try:
        return service.list_events()
    except StoreError:
        logger.exception("events_list_failed")
        raise HTTPException(status_code=500, detail="Failed to get events")


@router.post("/createEvent", response_model=CreateEventResponse, status_code=201)
async def create_event(
    event: EventCreate,
    service: EventService = Depends(get_event_service),
):
    """
    Create an event with a unique, creator-assigned event number.

    Example:
        Request:
            POST /createEvent
            {"name": "Fall Gala", "eventNumber": 42, "location": "Main Hall"}

        Response (201):
            {
                "success": true,
                "event": {"id": "E1", "eventNumber": 42, "name": "Fall Gala", ...},
                "message": "Event created successfully"
            }

        Response (409):
            {"error": "Event number 42 already exists", "conflictField": "eventNumber"}
    """
    try:
        created = service.create_event(event.model_dump(exclude_none=True))
    except StoreError:
        logger.exception("event_create_failed", event_number=event.eventNumber)
        raise HTTPException(status_code=500, detail="Failed to create event")
    return CreateEventResponse(event=created)


@router.put("/updateEvent", response_model=Dict[str, Any])
async def update_event(
    update: EventUpdate,
    service: EventService = Depends(get_event_service),
):
    """
    Update the supplied fields of an event and return the stored result.

    Fields left out of the body are untouched; ``completedAt: null`` clears
    the completion time.
    """
    fields = update.model_dump(exclude_unset=True)
    event_id = fields.pop("id", None)
    try:
        return service.update_event(event_id, fields)
    except StoreError:
        logger.exception("event_update_failed", event_id=event_id)
        raise HTTPException(status_code=500, detail="Failed to update event")
