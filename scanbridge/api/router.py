"""Function-style router.

Routes sit at the application root under the names the scanners and the
admin portal already call (``/getScanRecords``, ``/addScanRecord``, ...).
"""
from typing import Dict, Set

from fastapi import APIRouter
from fastapi.routing import APIRoute

from scanbridge.api.endpoints import events, maintenance, scans, students
from scanbridge.schemas import ErrorResponse

api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)

ROUTERS = (events.router, students.router, scans.router, maintenance.router)

api_router.include_router(events.router, tags=["Events"])
api_router.include_router(students.router, tags=["Students"])
api_router.include_router(scans.router, tags=["Scans"])
api_router.include_router(maintenance.router, tags=["Maintenance"])


def function_methods(*routers: APIRouter) -> Dict[str, Set[str]]:
    """Map each route path to the HTTP methods it accepts.

    Reads the endpoint routers directly; an including router may keep its
    children wrapped rather than flattened into ``routes``.
    """
    methods: Dict[str, Set[str]] = {}
    for router in routers:
        for route in router.routes:
            if isinstance(route, APIRoute):
                methods.setdefault(route.path, set()).update(route.methods)
    return methods
