"""Student endpoints."""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from scanbridge.api.deps import get_student_directory
from scanbridge.core.errors import StoreError, ValidationError
from scanbridge.core.logging_config import get_logger
from scanbridge.services import StudentDirectory

logger = get_logger(__name__)
router = APIRouter()


@router.get("/getStudents", response_model=List[Dict[str, Any]])
async def get_students(directory: StudentDirectory = Depends(get_student_directory)):
    try:
        return directory.list_students()
    except StoreError:
        logger.exception("students_list_failed")
        raise HTTPException(status_code=500, detail="Failed to get students")


@router.get("/getStudentById", response_model=Dict[str, Any])
async def get_student_by_id(
    studentId: Optional[str] = None,
    directory: StudentDirectory = Depends(get_student_directory),
):
    """Look a student up by roster id (``?studentId=12345``)."""
    if not studentId:
        raise ValidationError("studentId is required")
    try:
        return directory.get_student(studentId)
    except StoreError:
        logger.exception("student_lookup_failed", student_id=studentId)
        raise HTTPException(status_code=500, detail="Failed to get student")
