from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one recorded attendance for a student in a session.

    Unique per (course_id, student_id, session_id); never mutated.
    """

    attendance_id: int
    course_id: int
    student_id: int
    session_id: str
    recorded_at: datetime
    status: AttendanceStatus = AttendanceStatus.PRESENT

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "courseId": self.course_id,
            "studentId": self.student_id,
            "sessionId": self.session_id,
            "status": self.status.value,
            "timestamp": self.recorded_at.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for attendance listings (event joined with names)."""

    attendance_id: int
    course_id: int
    course_name: str
    student_id: int
    student_name: str
    student_number: str
    session_id: str
    recorded_at: datetime
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "course": {"id": self.course_id, "name": self.course_name},
            "student": {"id": self.student_id, "name": self.student_name, "studentId": self.student_number},
            "sessionId": self.session_id,
            "status": self.status.value,
            "timestamp": self.recorded_at.isoformat(),
        }
