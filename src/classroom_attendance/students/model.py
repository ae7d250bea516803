from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and their enrollment set."""

    student_id: int
    name: str
    student_number: str
    email: str = ""
    course_ids: tuple[int, ...] = ()
    created_at: Optional[datetime] = None

    def is_enrolled_in(self, course_id: int) -> bool:
        return int(course_id) in self.course_ids

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "studentId": self.student_number,
            "email": self.email,
            "courseIds": list(self.course_ids),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
