from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceQueryService, AttendanceRecorder
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DatabaseConnection, db_config_from_dict
from .reports.service import ReportService
from .sessions.service import SessionIssuer
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    courses_repo: CourseRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    course_service: CourseService
    student_service: StudentService
    session_issuer: SessionIssuer
    attendance_recorder: AttendanceRecorder
    attendance_query_service: AttendanceQueryService
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    courses_repo: CourseRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    return Container(
        courses_repo=courses_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        course_service=CourseService(courses_repo),
        student_service=StudentService(students_repo, courses_repo),
        session_issuer=SessionIssuer(courses_repo),
        attendance_recorder=AttendanceRecorder(attendance_repo, courses_repo, students_repo),
        attendance_query_service=AttendanceQueryService(attendance_repo),
        report_service=ReportService(attendance_repo, courses_repo, students_repo),
        conn=conn,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(db_config_from_dict(db_config))
    return build_services(
        courses_repo=MySQLCourseRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
    )
