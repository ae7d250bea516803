from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictOnWriteError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceEvent, AttendanceListRow
from .repository import AttendanceRepository


def _time_clauses(
    clauses: list[str],
    params: list[object],
    *,
    start: Optional[datetime],
    end: Optional[datetime],
    column: str = "recorded_at",
) -> None:
    if start is not None:
        clauses.append(f"{column} >= %s")
        params.append(start)
    if end is not None:
        clauses.append(f"{column} <= %s")
        params.append(end)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for_session(self, *, course_id: int, student_id: int, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE course_id=%s AND student_id=%s AND session_id=%s
                LIMIT 1
                """,
                (int(course_id), int(student_id), session_id),
            )
            return fetchone(cur) is not None

    def create_event(
        self,
        *,
        course_id: int,
        student_id: int,
        session_id: str,
        status: AttendanceStatus,
        recorded_at: datetime,
    ) -> AttendanceEvent:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(course_id, student_id, session_id, status, recorded_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(course_id), int(student_id), session_id, status.value, recorded_at),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictOnWriteError("Attendance already recorded for this session") from e
            raise

        return AttendanceEvent(
            attendance_id=attendance_id,
            course_id=int(course_id),
            student_id=int(student_id),
            session_id=session_id,
            recorded_at=recorded_at,
            status=status,
        )

    def list_for_course(
        self,
        course_id: int,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["course_id=%s"]
        params: list[object] = [int(course_id)]
        _time_clauses(clauses, params, start=start, end=end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, course_id, student_id, session_id, status, recorded_at
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY recorded_at ASC, attendance_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceEvent(
                    attendance_id=int(r["attendance_id"]),
                    course_id=int(r["course_id"]),
                    student_id=int(r["student_id"]),
                    session_id=r["session_id"],
                    recorded_at=r["recorded_at"],
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def distinct_session_ids(
        self,
        *,
        course_id: int,
        student_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> set[str]:
        clauses = ["course_id=%s"]
        params: list[object] = [int(course_id)]
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))
        _time_clauses(clauses, params, start=start, end=end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT DISTINCT session_id FROM attendance_records WHERE {' AND '.join(clauses)}",
                tuple(params),
            )
            return {r["session_id"] for r in fetchall(cur)}

    def list_rows(
        self,
        *,
        course_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceListRow]:
        clauses: list[str] = []
        params: list[object] = []
        if course_id is not None:
            clauses.append("ar.course_id=%s")
            params.append(int(course_id))
        _time_clauses(clauses, params, start=start, end=end, column="ar.recorded_at")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.attendance_id, ar.course_id, c.name AS course_name,
                    ar.student_id, s.name AS student_name, s.student_number,
                    ar.session_id, ar.status, ar.recorded_at
                FROM attendance_records ar
                JOIN courses c ON c.course_id = ar.course_id
                JOIN students s ON s.student_id = ar.student_id
                {where}
                ORDER BY ar.recorded_at DESC, ar.attendance_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                AttendanceListRow(
                    attendance_id=int(r["attendance_id"]),
                    course_id=int(r["course_id"]),
                    course_name=r["course_name"],
                    student_id=int(r["student_id"]),
                    student_name=r["student_name"],
                    student_number=r["student_number"],
                    session_id=r["session_id"],
                    recorded_at=r["recorded_at"],
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
