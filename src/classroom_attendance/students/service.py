from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.validators import normalize_email, require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.repository import CourseRepository
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage students and their enrollments."""

    def __init__(self, students: StudentRepository, courses: CourseRepository):
        self._students = students
        self._courses = courses

    def _checked_course_ids(self, course_ids: Iterable) -> list[int]:
        if isinstance(course_ids, (str, bytes, dict)):
            raise ValidationError("Course IDs must be a list")
        out: list[int] = []
        for raw in course_ids or ():
            course_id = require_int(raw, "Course ID")
            if not self._courses.get_by_id(course_id):
                raise NotFoundError(f"Course {course_id} not found")
            if course_id not in out:
                out.append(course_id)
        return out

    def create_student(
        self,
        *,
        name: str,
        student_number: str,
        email: Optional[str] = "",
        course_ids: Sequence = (),
    ) -> Student:
        name = require_non_empty(name, "Student name")
        student_number = require_non_empty(student_number, "Student ID")
        email = normalize_email(email)

        if self._students.get_by_student_number(student_number):
            raise ValidationError("Student ID already exists")

        student_id = self._students.create_student(
            name=name,
            student_number=student_number,
            email=email,
            course_ids=self._checked_course_ids(course_ids),
        )
        logger.info("Created student %s (%s)", student_id, student_number)
        return self.get_student(student_id)

    def update_student(
        self,
        student_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        course_ids: Optional[Sequence] = None,
    ) -> Student:
        """Partial update: any argument left as None keeps the stored value."""
        current = self.get_student(student_id)

        new_name = require_non_empty(name, "Student name") if name is not None else current.name
        new_email = normalize_email(email) if email is not None else current.email
        new_courses = self._checked_course_ids(course_ids) if course_ids is not None else list(current.course_ids)

        if not self._students.update_student(
            current.student_id, name=new_name, email=new_email, course_ids=new_courses
        ):
            raise NotFoundError("Student not found")
        return self.get_student(current.student_id)

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def find_student(self, *, student_number: Optional[str] = None, email: Optional[str] = None) -> Optional[Student]:
        student_number = (student_number or "").strip() or None
        email = (email or "").strip().lower() or None
        if not student_number and not email:
            raise ValidationError("Provide a student ID or an email to search")
        return self._students.find_one(student_number=student_number, email=email)

    def delete_student(self, student_id: int) -> None:
        """Delete a student and their attendance; courses and other students stay untouched."""
        if not self._students.delete_cascade(student_id):
            raise NotFoundError("Student not found")
        logger.info("Deleted student %s", student_id)
