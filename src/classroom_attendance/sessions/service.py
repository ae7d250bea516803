from __future__ import annotations

import logging
import secrets
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import SESSION_ID_BYTES
from ..core.exceptions import NotFoundError
from ..courses.repository import CourseRepository
from .codec import build_scan_url, encode_token
from .model import IssuedSession, SessionToken

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """128 random bits, hex encoded."""
    return secrets.token_hex(SESSION_ID_BYTES)


class SessionIssuer:
    """Use case: open a new attendance session for a course.

    Issuing overwrites the course's display pointer only. Earlier tokens stay
    valid until their own window closes, since validation never consults the
    pointer.
    """

    def __init__(
        self,
        courses: CourseRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        session_id_factory: Callable[[], str] = new_session_id,
    ):
        self._courses = courses
        self._clock = clock
        self._session_id_factory = session_id_factory

    def issue_session(
        self,
        course_id: int,
        *,
        base_url: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> IssuedSession:
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")

        token = SessionToken(
            course_id=course.course_id,
            session_id=self._session_id_factory(),
            issued_at=now or self._clock(),
        )
        self._courses.set_current_session(course.course_id, session_id=token.session_id, issued_at=token.issued_at)
        logger.info("Issued session %s for course %s", token.session_id, course.course_id)

        return IssuedSession(
            token=token,
            encoded_token=encode_token(token),
            scan_url=build_scan_url(base_url, token) if base_url else None,
        )

    def current_session(self, course_id: int) -> SessionToken:
        """Latest session descriptor of a course, for re-display only."""
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        if not course.current_session_id or not course.session_issued_at:
            raise NotFoundError("No session has been issued for this course")
        return SessionToken(
            course_id=course.course_id,
            session_id=course.current_session_id,
            issued_at=course.session_issued_at,
        )
