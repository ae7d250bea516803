from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    """Repository interface for Course.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def create_course(self, *, name: str, instructor: str, schedule: str, description: str) -> int:
        raise NotImplementedError

    def set_current_session(self, course_id: int, *, session_id: str, issued_at: datetime) -> bool:
        raise NotImplementedError

    def delete_cascade(self, course_id: int) -> bool:
        """Delete the course, its attendance events and its enrollments atomically."""

        raise NotImplementedError
