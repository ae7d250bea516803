from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Course
from .repository import CourseRepository

_COLUMNS = """
    course_id, name, instructor, schedule, description,
    current_session_id, session_issued_at, created_at
"""


def _to_course(r: dict) -> Course:
    return Course(
        course_id=int(r["course_id"]),
        name=r["name"],
        instructor=r["instructor"],
        schedule=r.get("schedule") or "",
        description=r.get("description") or "",
        current_session_id=r.get("current_session_id"),
        session_issued_at=r.get("session_issued_at"),
        created_at=r.get("created_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses WHERE course_id=%s", (int(course_id),))
            row = fetchone(cur)
            return _to_course(row) if row else None

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM courses ORDER BY created_at DESC, course_id DESC")
            return [_to_course(r) for r in fetchall(cur)]

    def create_course(self, *, name: str, instructor: str, schedule: str, description: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses(name, instructor, schedule, description)
                VALUES(%s,%s,%s,%s)
                """,
                (name, instructor, schedule, description),
            )
            return int(cur.lastrowid)

    def set_current_session(self, course_id: int, *, session_id: str, issued_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE courses
                SET current_session_id=%s, session_issued_at=%s
                WHERE course_id=%s
                """,
                (session_id, issued_at, int(course_id)),
            )
            return cur.rowcount > 0

    def delete_cascade(self, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE course_id=%s", (int(course_id),))
            cur.execute("DELETE FROM enrollments WHERE course_id=%s", (int(course_id),))
            cur.execute("DELETE FROM courses WHERE course_id=%s", (int(course_id),))
            return cur.rowcount > 0
