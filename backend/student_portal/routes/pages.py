"""
HTML page routes - landing page, registration form, list and detail views.
"""

from fastapi import APIRouter, Depends, Request

from student_portal.services.student_store import StudentStore, NotFound, get_store
from student_portal.views import render, render_not_found
from student_portal.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


@router.get("/")
def index(request: Request):
    return render(request, "index.html", "Student Registration Portal")


@router.get("/register")
def registration_form(request: Request):
    return render(request, "register.html", "Register New Student")


@router.get("/students")
def students_page(request: Request, store: StudentStore = Depends(get_store)):
    """Table of every registered student, in registration order."""
    students = store.list_students()
    return render(request, "students.html", "All Students", students=students)


@router.get("/student/{student_id}")
def student_detail(student_id: str, request: Request, store: StudentStore = Depends(get_store)):
    """Detail page for one student, or the 404 page for an unknown id."""
    try:
        student = store.get_student(student_id)
    except NotFound:
        log_with_context(logger, "INFO",
            "Student detail not found: {}".format(student_id),
            context={"student_id": student_id})
        return render_not_found(request, "Student Not Found")

    return render(request, "student_detail.html", "Student Details", student=student)
