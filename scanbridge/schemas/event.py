"""Event schemas."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel


class EventCreate(BaseModel):
    # name and eventNumber are checked by the service so a missing one is a 400
    name: Optional[str] = None
    eventNumber: Optional[Union[int, str]] = None
    description: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    isActive: Optional[bool] = None
    createdBy: Optional[str] = None
    customColumns: Optional[List[Any]] = None
    staticValues: Optional[Dict[str, Any]] = None
    exportFormat: Optional[str] = None


class EventUpdate(BaseModel):
    id: Optional[str] = None
    eventNumber: Optional[Union[int, str]] = None
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    isActive: Optional[bool] = None
    isCompleted: Optional[bool] = None
    completedAt: Optional[str] = None
    exportFormat: Optional[str] = None
    customColumns: Optional[List[Any]] = None
    staticValues: Optional[Dict[str, Any]] = None


class CreateEventResponse(BaseModel):
    success: bool = True
    event: Dict[str, Any]
    message: str = "Event created successfully"
