from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEvent, AttendanceListRow


class AttendanceRepository(Protocol):
    def exists_for_session(self, *, course_id: int, student_id: int, session_id: str) -> bool:
        raise NotImplementedError

    def create_event(
        self,
        *,
        course_id: int,
        student_id: int,
        session_id: str,
        status: AttendanceStatus,
        recorded_at: datetime,
    ) -> AttendanceEvent:
        """Insert one event.

        Must raise ConflictOnWriteError when the (course, student, session)
        uniqueness constraint rejects the row.
        """

        raise NotImplementedError

    def list_for_course(
        self,
        course_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        """Events of a course ordered by recorded_at ascending; bounds are inclusive."""

        raise NotImplementedError

    def distinct_session_ids(
        self,
        *,
        course_id: int,
        student_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> set[str]:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        course_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceListRow]:
        """Newest first."""

        raise NotImplementedError
