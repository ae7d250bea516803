from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional

import pytest

from classroom_attendance.attendance.model import AttendanceEvent, AttendanceListRow
from classroom_attendance.container import build_services
from classroom_attendance.core.enums import AttendanceStatus
from classroom_attendance.core.exceptions import ConflictOnWriteError, ValidationError
from classroom_attendance.courses.model import Course
from classroom_attendance.students.model import Student


class InMemoryStore:
    """Shared state behind the in-memory repositories, so cascades can reach every table."""

    def __init__(self):
        self.lock = threading.Lock()
        self.courses: dict[int, Course] = {}
        self.students: dict[int, Student] = {}
        self.events: dict[int, AttendanceEvent] = {}
        self._next_id = {"course": 0, "student": 0, "event": 0}

    def next_id(self, kind: str) -> int:
        self._next_id[kind] += 1
        return self._next_id[kind]


class InMemoryCourses:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._s.courses.get(int(course_id))

    def list_all(self):
        return list(self._s.courses.values())

    def create_course(self, *, name, instructor, schedule, description) -> int:
        course_id = self._s.next_id("course")
        self._s.courses[course_id] = Course(
            course_id=course_id,
            name=name,
            instructor=instructor,
            schedule=schedule,
            description=description,
        )
        return course_id

    def set_current_session(self, course_id, *, session_id, issued_at) -> bool:
        course = self._s.courses.get(int(course_id))
        if not course:
            return False
        self._s.courses[course.course_id] = Course(
            course_id=course.course_id,
            name=course.name,
            instructor=course.instructor,
            schedule=course.schedule,
            description=course.description,
            current_session_id=session_id,
            session_issued_at=issued_at,
        )
        return True

    def delete_cascade(self, course_id) -> bool:
        course_id = int(course_id)
        if course_id not in self._s.courses:
            return False
        del self._s.courses[course_id]
        self._s.events = {k: e for k, e in self._s.events.items() if e.course_id != course_id}
        for sid, st in list(self._s.students.items()):
            if course_id in st.course_ids:
                self._s.students[sid] = Student(
                    student_id=st.student_id,
                    name=st.name,
                    student_number=st.student_number,
                    email=st.email,
                    course_ids=tuple(c for c in st.course_ids if c != course_id),
                )
        return True


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, student_id) -> Optional[Student]:
        return self._s.students.get(int(student_id))

    def get_by_student_number(self, student_number) -> Optional[Student]:
        return next((s for s in self._s.students.values() if s.student_number == student_number), None)

    def find_one(self, *, student_number=None, email=None) -> Optional[Student]:
        for s in self._s.students.values():
            if student_number and s.student_number != student_number:
                continue
            if email and s.email != email:
                continue
            return s
        return None

    def list_all(self):
        return list(self._s.students.values())

    def list_enrolled_in(self, course_id):
        return [s for s in self._s.students.values() if int(course_id) in s.course_ids]

    def create_student(self, *, name, student_number, email, course_ids) -> int:
        if self.get_by_student_number(student_number):
            raise ValidationError("Student ID already exists")
        student_id = self._s.next_id("student")
        self._s.students[student_id] = Student(
            student_id=student_id,
            name=name,
            student_number=student_number,
            email=email,
            course_ids=tuple(dict.fromkeys(int(c) for c in course_ids)),
        )
        return student_id

    def update_student(self, student_id, *, name, email, course_ids) -> bool:
        current = self._s.students.get(int(student_id))
        if not current:
            return False
        self._s.students[current.student_id] = Student(
            student_id=current.student_id,
            name=name,
            student_number=current.student_number,
            email=email,
            course_ids=tuple(dict.fromkeys(int(c) for c in course_ids)),
        )
        return True

    def delete_cascade(self, student_id) -> bool:
        student_id = int(student_id)
        if student_id not in self._s.students:
            return False
        del self._s.students[student_id]
        self._s.events = {k: e for k, e in self._s.events.items() if e.student_id != student_id}
        return True


class InMemoryAttendance:
    """Enforces the (course, student, session) unique key under a lock, like the DB does."""

    def __init__(self, store: InMemoryStore):
        self._s = store

    def _matching(self, *, course_id=None, student_id=None, start=None, end=None):
        for e in list(self._s.events.values()):
            if course_id is not None and e.course_id != int(course_id):
                continue
            if student_id is not None and e.student_id != int(student_id):
                continue
            if start is not None and e.recorded_at < start:
                continue
            if end is not None and e.recorded_at > end:
                continue
            yield e

    def exists_for_session(self, *, course_id, student_id, session_id) -> bool:
        return any(e.session_id == session_id for e in self._matching(course_id=course_id, student_id=student_id))

    def create_event(self, *, course_id, student_id, session_id, status, recorded_at) -> AttendanceEvent:
        with self._s.lock:
            if self.exists_for_session(course_id=course_id, student_id=student_id, session_id=session_id):
                raise ConflictOnWriteError("Attendance already recorded for this session")
            event = AttendanceEvent(
                attendance_id=self._s.next_id("event"),
                course_id=int(course_id),
                student_id=int(student_id),
                session_id=session_id,
                recorded_at=recorded_at,
                status=status,
            )
            self._s.events[event.attendance_id] = event
            return event

    def add(self, *, course_id, student_id, session_id, recorded_at, status=AttendanceStatus.PRESENT):
        """Test helper: seed an event directly."""
        return self.create_event(
            course_id=course_id,
            student_id=student_id,
            session_id=session_id,
            status=status,
            recorded_at=recorded_at,
        )

    def list_for_course(self, course_id, *, start=None, end=None):
        return sorted(self._matching(course_id=course_id, start=start, end=end), key=lambda e: e.recorded_at)

    def distinct_session_ids(self, *, course_id, student_id=None, start=None, end=None) -> set[str]:
        return {e.session_id for e in self._matching(course_id=course_id, student_id=student_id, start=start, end=end)}

    def list_rows(self, *, course_id=None, start=None, end=None, limit=500):
        rows = []
        for e in sorted(self._matching(course_id=course_id, start=start, end=end), key=lambda e: e.recorded_at, reverse=True):
            course = self._s.courses[e.course_id]
            student = self._s.students[e.student_id]
            rows.append(
                AttendanceListRow(
                    attendance_id=e.attendance_id,
                    course_id=e.course_id,
                    course_name=course.name,
                    student_id=e.student_id,
                    student_name=student.name,
                    student_number=student.student_number,
                    session_id=e.session_id,
                    recorded_at=e.recorded_at,
                    status=e.status,
                )
            )
        return rows[:limit]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def courses_repo(store) -> InMemoryCourses:
    return InMemoryCourses(store)


@pytest.fixture
def students_repo(store) -> InMemoryStudents:
    return InMemoryStudents(store)


@pytest.fixture
def attendance_repo(store) -> InMemoryAttendance:
    return InMemoryAttendance(store)


@pytest.fixture
def container(courses_repo, students_repo, attendance_repo):
    return build_services(courses_repo=courses_repo, students_repo=students_repo, attendance_repo=attendance_repo)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)
