from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, is_duplicate_key
from .model import Student
from .repository import StudentRepository

_COLUMNS = "s.student_id, s.name, s.student_number, s.email, s.created_at"


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str = "", params: tuple = (), *, join: str = "") -> list[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students s
                {join}
                {where}
                ORDER BY s.created_at DESC, s.student_id DESC
                """,
                params,
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["student_id"]) for r in rows]
            cur.execute(
                f"SELECT student_id, course_id FROM enrollments WHERE student_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            enrolled: dict[int, list[int]] = {}
            for e in fetchall(cur):
                enrolled.setdefault(int(e["student_id"]), []).append(int(e["course_id"]))

            return [
                Student(
                    student_id=int(r["student_id"]),
                    name=r["name"],
                    student_number=r["student_number"],
                    email=r.get("email") or "",
                    course_ids=tuple(sorted(enrolled.get(int(r["student_id"]), []))),
                    created_at=r.get("created_at"),
                )
                for r in rows
            ]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        found = self._load("WHERE s.student_id=%s", (int(student_id),))
        return found[0] if found else None

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        found = self._load("WHERE s.student_number=%s", (student_number,))
        return found[0] if found else None

    def find_one(self, *, student_number: Optional[str] = None, email: Optional[str] = None) -> Optional[Student]:
        clauses: list[str] = []
        params: list[object] = []
        if student_number:
            clauses.append("s.student_number=%s")
            params.append(student_number)
        if email:
            clauses.append("s.email=%s")
            params.append(email)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        found = self._load(where, tuple(params))
        return found[0] if found else None

    def list_all(self) -> Sequence[Student]:
        return self._load()

    def list_enrolled_in(self, course_id: int) -> Sequence[Student]:
        return self._load(
            "WHERE en.course_id=%s",
            (int(course_id),),
            join="JOIN enrollments en ON en.student_id = s.student_id",
        )

    @staticmethod
    def _write_enrollments(cur, student_id: int, course_ids: Sequence[int]) -> None:
        cur.execute("DELETE FROM enrollments WHERE student_id=%s", (student_id,))
        for course_id in sorted(set(int(c) for c in course_ids)):
            cur.execute(
                "INSERT INTO enrollments(student_id, course_id) VALUES(%s,%s)",
                (student_id, course_id),
            )

    def create_student(self, *, name: str, student_number: str, email: str, course_ids: Sequence[int]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO students(name, student_number, email) VALUES(%s,%s,%s)",
                    (name, student_number, email),
                )
                student_id = int(cur.lastrowid)
                self._write_enrollments(cur, student_id, course_ids)
                return student_id
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError("Student ID already exists") from e
            raise

    def update_student(self, student_id: int, *, name: str, email: str, course_ids: Sequence[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE student_id=%s FOR UPDATE", (int(student_id),))
            if not cur.fetchone():
                return False
            cur.execute(
                "UPDATE students SET name=%s, email=%s WHERE student_id=%s",
                (name, email, int(student_id)),
            )
            self._write_enrollments(cur, int(student_id), course_ids)
            return True

    def delete_cascade(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE student_id=%s", (int(student_id),))
            cur.execute("DELETE FROM enrollments WHERE student_id=%s", (int(student_id),))
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
