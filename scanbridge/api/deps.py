"""Shared API dependencies.

The store is built once per process and handed to each service; tests swap
it out through ``app.dependency_overrides[get_store]``.
"""
from functools import lru_cache

from fastapi import Depends

from scanbridge.core import config
from scanbridge.services import (
    EventService,
    MaintenanceService,
    ScanReader,
    ScanRecorder,
    ScanRemover,
    StudentDirectory,
)
from scanbridge.store.base import DocumentStore
from scanbridge.store.memory import InMemoryStore


@lru_cache(maxsize=1)
def build_store() -> DocumentStore:
    settings = config.settings
    if settings.STORE_BACKEND == "memory":
        return InMemoryStore()
    if settings.STORE_BACKEND == "firestore":
        from scanbridge.store.firestore import FirestoreStore
        return FirestoreStore.from_settings(settings)
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")


def get_store() -> DocumentStore:
    """Dependency for FastAPI to get the document store."""
    return build_store()


def get_event_service(store: DocumentStore = Depends(get_store)) -> EventService:
    return EventService(store)


def get_student_directory(store: DocumentStore = Depends(get_store)) -> StudentDirectory:
    return StudentDirectory(store)


def get_recorder(store: DocumentStore = Depends(get_store)) -> ScanRecorder:
    return ScanRecorder(
        store,
        strict_resolution=config.settings.STRICT_EVENT_RESOLUTION,
        retries=config.settings.DUAL_WRITE_RETRIES,
    )


def get_reader(store: DocumentStore = Depends(get_store)) -> ScanReader:
    return ScanReader(store, merge_nested=config.settings.MERGE_NESTED_SCANS)


def get_remover(store: DocumentStore = Depends(get_store)) -> ScanRemover:
    return ScanRemover(store)


def get_maintenance(store: DocumentStore = Depends(get_store)) -> MaintenanceService:
    return MaintenanceService(store)


__all__ = [
    "build_store",
    "get_store",
    "get_event_service",
    "get_student_directory",
    "get_recorder",
    "get_reader",
    "get_remover",
    "get_maintenance",
]
