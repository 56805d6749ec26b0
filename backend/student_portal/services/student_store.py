"""
Student Store - the authoritative set of registered students.

Implements the four record operations and the stats aggregation:
1. register: required-field check, email uniqueness, id assignment
2. list_students / get_student: reads in insertion order
3. delete_student: permanent removal
4. stats: total count plus per-course counts

Records live in a private in-memory SQLite database owned by the store
instance. Every operation, reads included, holds the store lock: FastAPI runs
synchronous handlers on a thread pool and the database connection is shared.

Email uniqueness is an exact, case-sensitive match with no whitespace
normalization. Required fields only need to be non-empty; no format checks.
"""

import re
import threading
from typing import List, Optional

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from student_portal.database import create_memory_engine, create_session_factory
from student_portal.models.student import Student, utc_timestamp
from student_portal.logging_config import get_logger, log_with_context

logger = get_logger("store")

REQUIRED_FIELDS = ("first_name", "last_name", "email", "course")

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# SQLite INTEGER range
MAX_ID = 2 ** 63 - 1


# ── Errors ───────────────────────────────────────────────────

class StoreError(Exception):
    """Base class for store failures. `message` is safe to show to users."""
    default_message = "Student store error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StoreError):
    """A required field is absent or empty, or the payload is malformed."""
    default_message = "Please fill all required fields"


class DuplicateEmailError(StoreError):
    """Another current record already uses this email."""
    default_message = "Email already registered"


class NotFound(StoreError):
    """No record has the requested id."""
    default_message = "Student not found"


# ── Registration payload ─────────────────────────────────────

class StudentRegistration(BaseModel):
    """
    Registration fields as submitted by the form.

    Fields are read only under their camelCase form names. Every field is
    optional at the schema level so a partial payload parses; the
    required-field rule is enforced by the store. Numbers are accepted and
    kept as their string form.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = Field(None, alias="email")
    phone: Optional[str] = Field(None, alias="phone")
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")
    gender: Optional[str] = Field(None, alias="gender")
    course: Optional[str] = Field(None, alias="course")
    address: Optional[str] = Field(None, alias="address")

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def falsy_as_missing(cls, value):
        # 0 and false count as absent, not as "0" / "False"
        return value or None

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]


def parse_registration(fields) -> StudentRegistration:
    """
    Turn a raw payload into a StudentRegistration.

    Anything that does not parse (not a mapping, nested objects as values,
    ...) counts as missing required fields.
    """
    if isinstance(fields, StudentRegistration):
        return fields
    try:
        return StudentRegistration.model_validate(fields)
    except SchemaError as e:
        raise ValidationError() from e


def parse_student_id(raw) -> Optional[int]:
    """
    Parse an id taken from a URL path.

    Returns None for anything that is not a whole base-10 integer; such ids
    never match a record.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str) and _ID_PATTERN.fullmatch(raw):
        raw = int(raw)
    if isinstance(raw, int) and -MAX_ID <= raw <= MAX_ID:
        return raw
    return None


# ── Store ────────────────────────────────────────────────────

class StudentStore:
    """In-memory student registry. Create one per application (or per test)."""

    def __init__(self, engine: Engine = None):
        self.engine = engine or create_memory_engine()
        self._session_factory = create_session_factory(self.engine)
        self._lock = threading.Lock()

    def register(self, fields) -> int:
        """
        Add a student and return the new id.

        Raises:
            ValidationError: a required field is absent or empty
            DuplicateEmailError: the email is already registered
        """
        registration = parse_registration(fields)

        missing = registration.missing_fields()
        if missing:
            log_with_context(logger, "WARNING",
                "Registration rejected: missing {}".format(", ".join(missing)),
                extra_data={"missing_fields": missing})
            raise ValidationError()

        with self._lock, self._session_factory() as db:
            existing = db.query(Student.id).filter(Student.email == registration.email).first()
            if existing is not None:
                log_with_context(logger, "WARNING",
                    "Registration rejected: duplicate email",
                    context={"email": registration.email, "student_id": existing.id})
                raise DuplicateEmailError()

            student = Student(
                first_name=registration.first_name,
                last_name=registration.last_name,
                email=registration.email,
                phone=registration.phone,
                date_of_birth=registration.date_of_birth,
                gender=registration.gender,
                course=registration.course,
                address=registration.address,
                registered_at=utc_timestamp(),
            )
            db.add(student)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateEmailError() from e

        log_with_context(logger, "INFO",
            "Student {} registered for {}".format(student.id, student.course),
            context={"student_id": student.id, "email": student.email})
        return student.id

    def list_students(self) -> List[Student]:
        """All records in registration order."""
        with self._lock, self._session_factory() as db:
            return db.query(Student).order_by(Student.id).all()

    def get_student(self, student_id) -> Student:
        """Record with the given id. Raises NotFound."""
        parsed_id = parse_student_id(student_id)
        if parsed_id is None:
            raise NotFound()

        with self._lock, self._session_factory() as db:
            student = db.get(Student, parsed_id)
        if student is None:
            raise NotFound()
        return student

    def delete_student(self, student_id) -> None:
        """Permanently remove the record with the given id. Raises NotFound."""
        parsed_id = parse_student_id(student_id)
        if parsed_id is None:
            raise NotFound()

        with self._lock, self._session_factory() as db:
            student = db.get(Student, parsed_id)
            if student is None:
                raise NotFound()
            db.delete(student)
            db.commit()

        log_with_context(logger, "INFO",
            "Student {} deleted".format(parsed_id),
            context={"student_id": parsed_id})

    def stats(self) -> dict:
        """Total student count and number of students per course."""
        courses = {}
        total = 0
        with self._lock, self._session_factory() as db:
            for (course,) in db.query(Student.course).order_by(Student.id):
                courses[course] = courses.get(course, 0) + 1
                total += 1
        return {"totalStudents": total, "courses": courses}

    def close(self) -> None:
        """Drop the in-memory database. The store is unusable afterwards."""
        self.engine.dispose()


def get_store(request: Request) -> StudentStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
