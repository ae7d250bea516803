from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..core.constants import DEFAULT_EVENT_LIST_LIMIT, SESSION_TOKEN_TTL_SECONDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyRecordedError,
    ConflictOnWriteError,
    ExpiredTokenError,
    NotEnrolledError,
    NotFoundError,
)
from ..courses.repository import CourseRepository
from ..sessions.codec import TokenPayload, decode_token
from ..students.repository import StudentRepository
from .model import AttendanceEvent, AttendanceListRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecorder:
    """Use case: validate a scanned session token and record attendance once.

    Checks run in a fixed order and stop at the first failure, so nothing is
    written unless every check passed. The final duplicate check is backed
    by the store's unique key on (course, student, session).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        students: StudentRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._courses = courses
        self._students = students
        self._clock = clock

    def record_attendance(
        self,
        token: TokenPayload,
        student_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        now = now or self._clock()
        token = decode_token(token)

        course = self._courses.get_by_id(token.course_id)
        if not course:
            raise NotFoundError("Course not found")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        if not student.is_enrolled_in(course.course_id):
            raise NotEnrolledError("Student not enrolled in this course")

        age = token.age_seconds(now)
        if age > SESSION_TOKEN_TTL_SECONDS:
            logger.info(
                "Rejected expired token for course %s (session %s, age %.0fs)",
                course.course_id,
                token.session_id,
                age,
            )
            raise ExpiredTokenError("QR code has expired")

        if self._attendance.exists_for_session(
            course_id=course.course_id,
            student_id=student.student_id,
            session_id=token.session_id,
        ):
            raise AlreadyRecordedError("Attendance already recorded for this session")

        try:
            event = self._attendance.create_event(
                course_id=course.course_id,
                student_id=student.student_id,
                session_id=token.session_id,
                status=AttendanceStatus.PRESENT,
                recorded_at=now,
            )
        except ConflictOnWriteError:
            logger.warning(
                "Concurrent duplicate scan for course %s, student %s, session %s",
                course.course_id,
                student.student_id,
                token.session_id,
            )
            raise

        logger.info(
            "Recorded attendance %s: course %s, student %s, session %s",
            event.attendance_id,
            course.course_id,
            student.student_id,
            token.session_id,
        )
        return event


class AttendanceQueryService:
    """Use case: browse recorded attendance events."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_events(
        self,
        *,
        course_id: Optional[int] = None,
        on_date: Optional[date] = None,
        limit: int = DEFAULT_EVENT_LIST_LIMIT,
    ) -> Sequence[AttendanceListRow]:
        start, end = day_bounds(on_date) if on_date else (None, None)
        return self._attendance.list_rows(course_id=course_id, start=start, end=end, limit=limit)
