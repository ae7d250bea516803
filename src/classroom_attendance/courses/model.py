from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    """Domain entity: a course.

    `current_session_id`/`session_issued_at` only mirror the latest issued
    session for display; token validation never reads them.
    """

    course_id: int
    name: str
    instructor: str
    schedule: str = ""
    description: str = ""
    current_session_id: Optional[str] = None
    session_issued_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.course_id,
            "name": self.name,
            "instructor": self.instructor,
            "schedule": self.schedule,
            "description": self.description,
            "sessionId": self.current_session_id,
            "sessionIssuedAt": self.session_issued_at.isoformat() if self.session_issued_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
