"""Common request/response schemas."""
from typing import Any, Optional

from pydantic import BaseModel

from scanbridge.core.utils import parse_number


def coerce_reference(value: Any) -> Any:
    """Event/record references arrive as numbers or strings; store them as strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    number = parse_number(value)
    if number is not None:
        return str(number)
    return str(value)


class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned for every failure."""
    error: str
    conflictField: Optional[str] = None
