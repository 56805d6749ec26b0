"""
Student model - a registered student.

Ids come from SQLite AUTOINCREMENT, which never hands out an id again once it
has been used, even after the row holding it is deleted.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Text, Integer, String
from student_portal.database import Base


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision, e.g. 2024-01-15T10:20:30.123Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Only first_name, last_name, email and course are required. Email is
    unique and compared exactly as stored (case-sensitive, no trimming).
    """
    __tablename__ = "students"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Store-assigned identifier, strictly increasing")
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True,
                   doc="Contact email, unique across current records")
    phone = Column(Text, nullable=True)
    date_of_birth = Column(Text, nullable=True,
                           doc="Date of birth exactly as submitted, no format imposed")
    gender = Column(Text, nullable=True)
    course = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    registered_at = Column(String(24), nullable=False,
                           doc="ISO 8601 UTC registration time, set once at creation")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape used by the API."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "dateOfBirth": self.date_of_birth,
            "gender": self.gender,
            "course": self.course,
            "address": self.address,
            "registeredAt": self.registered_at,
        }

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.full_name}', email='{self.email}')>"
