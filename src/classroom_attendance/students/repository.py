from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

    def find_one(self, *, student_number: Optional[str] = None, email: Optional[str] = None) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_enrolled_in(self, course_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def create_student(self, *, name: str, student_number: str, email: str, course_ids: Sequence[int]) -> int:
        """Insert a student; raises ValidationError when the student number is taken."""

        raise NotImplementedError

    def update_student(self, student_id: int, *, name: str, email: str, course_ids: Sequence[int]) -> bool:
        raise NotImplementedError

    def delete_cascade(self, student_id: int) -> bool:
        """Delete the student with their attendance events and enrollments."""

        raise NotImplementedError
