"""
Student API routes - registration, deletion, and JSON reads.

Mutating endpoints answer with the envelope {success, message, ...}.
Store errors are translated here and never propagate further:
- ValidationError / DuplicateEmailError → 400
- NotFound → 404
"""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from student_portal.services.student_store import (
    StudentStore, ValidationError, DuplicateEmailError, NotFound, get_store
)
from student_portal.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_fields(request: Request):
    """
    Read submitted fields from a JSON or form-encoded body.

    An unreadable body yields an empty field set, which the store rejects as
    missing required fields.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith("application/json"):
        try:
            return await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            log_with_context(logger, "WARNING", "Unparseable JSON registration body")
            return {}

    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except (HTTPException, MultiPartException):
            log_with_context(logger, "WARNING", "Unparseable form registration body")
            return {}
        return dict(form)

    return {}


def envelope(success: bool, message: str, status_code: int = 200, **fields) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": success, "message": message, **fields},
    )


@router.post("/register")
async def register_student(request: Request, store: StudentStore = Depends(get_store)):
    """Register a student from the submitted form fields."""
    fields = await read_fields(request)

    try:
        student_id = store.register(fields)
    except (ValidationError, DuplicateEmailError) as e:
        return envelope(False, e.message, status_code=400)

    return envelope(True, "Student registered successfully!", studentId=student_id)


@router.delete("/student/{student_id}")
def delete_student(student_id: str, store: StudentStore = Depends(get_store)):
    """Delete a student permanently."""
    try:
        store.delete_student(student_id)
    except NotFound as e:
        log_with_context(logger, "INFO",
            "Delete requested for unknown student {}".format(student_id),
            context={"student_id": student_id})
        return envelope(False, e.message, status_code=404)

    return envelope(True, "Student deleted successfully")


@router.get("/api/students")
def list_students(store: StudentStore = Depends(get_store)):
    """Every registered student as JSON, in registration order."""
    return [student.to_dict() for student in store.list_students()]


@router.get("/api/stats")
def get_stats(store: StudentStore = Depends(get_store)):
    """Total number of students and the count per course."""
    return store.stats()
