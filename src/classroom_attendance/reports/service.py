from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds
from ..core.exceptions import NotFoundError
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..students.repository import StudentRepository
from .model import AbsentStudent, CourseReport, PresentStudent, StudentStat


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def _bounds(on_date: Optional[date]) -> tuple[Optional[datetime], Optional[datetime]]:
    return day_bounds(on_date) if on_date else (None, None)


class ReportService:
    """Aggregates recorded attendance into course reports and student percentages.

    Reads are not isolated from concurrent scans; reports are advisory.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        students: StudentRepository,
    ):
        self._attendance = attendance
        self._courses = courses
        self._students = students

    def course_report(self, course_id: int, on_date: Optional[date] = None) -> CourseReport:
        course = self._courses.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return self._build_course_report(course, on_date)

    def all_courses_report(self, on_date: Optional[date] = None) -> list[CourseReport]:
        return [self._build_course_report(c, on_date) for c in self._courses.list_all()]

    def _build_course_report(self, course: Course, on_date: Optional[date]) -> CourseReport:
        start, end = _bounds(on_date)
        events = self._attendance.list_for_course(course.course_id, start=start, end=end)
        enrolled = list(self._students.list_enrolled_in(course.course_id))
        by_id = {s.student_id: s for s in enrolled}

        # Events come oldest first, so the first one seen per student is kept.
        first_seen: dict[int, datetime] = {}
        for e in events:
            first_seen.setdefault(e.student_id, e.recorded_at)

        present: list[PresentStudent] = []
        for student_id, ts in first_seen.items():
            student = by_id.get(student_id) or self._students.get_by_id(student_id)
            if not student:
                continue
            present.append(
                PresentStudent(
                    student_id=student.student_id,
                    name=student.name,
                    student_number=student.student_number,
                    email=student.email,
                    timestamp=ts,
                )
            )

        present_ids = {p.student_id for p in present}
        absent = [
            AbsentStudent(student_id=s.student_id, name=s.name, student_number=s.student_number, email=s.email)
            for s in enrolled
            if s.student_id not in present_ids
        ]

        return CourseReport(
            course_id=course.course_id,
            course_name=course.name,
            instructor=course.instructor,
            date=on_date,
            total_enrolled=len(enrolled),
            present=len(present),
            absent=len(absent),
            attendance_rate=percentage(len(present), len(enrolled)),
            present_students=present,
            absent_students=absent,
        )

    def student_attendance_percentages(self, on_date: Optional[date] = None) -> list[StudentStat]:
        """Per-student share of distinct recorded sessions attended, across enrolled courses.

        A session counts toward the total only once someone has scanned into
        it. The total is never date-filtered; the attended count is.
        """
        start, end = _bounds(on_date)
        sessions_per_course: dict[int, int] = {}
        stats: list[StudentStat] = []

        for student in self._students.list_all():
            total = 0
            attended = 0
            enrolled_courses = 0

            for course_id in student.course_ids:
                if course_id not in sessions_per_course:
                    if not self._courses.get_by_id(course_id):
                        sessions_per_course[course_id] = -1
                    else:
                        sessions_per_course[course_id] = len(
                            self._attendance.distinct_session_ids(course_id=course_id)
                        )
                course_total = sessions_per_course[course_id]
                if course_total < 0:
                    continue

                enrolled_courses += 1
                total += course_total
                attended += len(
                    self._attendance.distinct_session_ids(
                        course_id=course_id,
                        student_id=student.student_id,
                        start=start,
                        end=end,
                    )
                )

            stats.append(
                StudentStat(
                    student_id=student.student_id,
                    name=student.name,
                    student_number=student.student_number,
                    email=student.email,
                    total_sessions=total,
                    attended_sessions=attended,
                    attendance_percentage=percentage(attended, total),
                    enrolled_courses=enrolled_courses,
                )
            )

        stats.sort(key=lambda s: s.attendance_percentage, reverse=True)
        return stats
