"""Maintenance job schemas."""
from typing import List, Optional, Union

from pydantic import BaseModel


class EventNumberRequest(BaseModel):
    eventNumber: Optional[Union[int, str]] = None


class MigrationResponse(BaseModel):
    success: bool = True
    eventNumber: Union[int, str]
    actualEventId: str
    migratedCount: int
    relocatedCount: int


class EnrichmentResponse(BaseModel):
    success: bool = True
    eventNumber: Union[int, str]
    actualEventId: str
    totalScans: int
    enrichedCount: int


class ReconcileResponse(BaseModel):
    success: bool = True
    reconciledCount: int
    unresolved: List[str]
