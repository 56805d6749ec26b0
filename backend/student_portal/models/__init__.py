from student_portal.models.student import Student

__all__ = ["Student"]
