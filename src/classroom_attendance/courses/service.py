from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Use case: manage courses."""

    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def create_course(self, *, name: str, instructor: str, schedule: str = "", description: str = "") -> Course:
        name = require_non_empty(name, "Course name")
        instructor = require_non_empty(instructor, "Instructor name")

        course_id = self._courses.create_course(
            name=name,
            instructor=instructor,
            schedule=(schedule or "").strip(),
            description=(description or "").strip(),
        )
        logger.info("Created course %s (%s)", course_id, name)
        return self.get_course(course_id)

    def get_course(self, course_id: int) -> Course:
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def list_courses(self) -> Sequence[Course]:
        return self._courses.list_all()

    def delete_course(self, course_id: int) -> None:
        """Delete a course together with its attendance and enrollments."""
        if not self._courses.delete_cascade(course_id):
            raise NotFoundError("Course not found")
        logger.info("Deleted course %s", course_id)
