from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class PresentStudent:
    student_id: int
    name: str
    student_number: str
    email: str
    timestamp: datetime


@dataclass(frozen=True)
class AbsentStudent:
    student_id: int
    name: str
    student_number: str
    email: str


@dataclass(frozen=True)
class CourseReport:
    """Read-model: per-course presence for one day, or for all time when `date` is None."""

    course_id: int
    course_name: str
    instructor: str
    date: Optional[date]
    total_enrolled: int
    present: int
    absent: int
    attendance_rate: float
    present_students: list[PresentStudent] = field(default_factory=list)
    absent_students: list[AbsentStudent] = field(default_factory=list)

    def summary_dict(self) -> dict:
        return {
            "courseId": self.course_id,
            "courseName": self.course_name,
            "instructor": self.instructor,
            "date": self.date.isoformat() if self.date else None,
            "totalEnrolled": self.total_enrolled,
            "present": self.present,
            "absent": self.absent,
            "attendanceRate": self.attendance_rate,
        }

    def to_dict(self) -> dict:
        return {
            "course": {"id": self.course_id, "name": self.course_name, "instructor": self.instructor},
            "date": self.date.isoformat() if self.date else None,
            "totalEnrolled": self.total_enrolled,
            "present": self.present,
            "absent": self.absent,
            "attendanceRate": self.attendance_rate,
            "presentStudents": [
                {
                    "id": s.student_id,
                    "name": s.name,
                    "studentId": s.student_number,
                    "timestamp": s.timestamp.isoformat(),
                }
                for s in self.present_students
            ],
            "absentStudents": [
                {"id": s.student_id, "name": s.name, "studentId": s.student_number}
                for s in self.absent_students
            ],
        }


@dataclass(frozen=True)
class StudentStat:
    student_id: int
    name: str
    student_number: str
    email: str
    total_sessions: int
    attended_sessions: int
    attendance_percentage: float
    enrolled_courses: int

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "name": self.name,
            "studentIdNumber": self.student_number,
            "email": self.email,
            "totalSessions": self.total_sessions,
            "attendedSessions": self.attended_sessions,
            "attendancePercentage": self.attendance_percentage,
            "enrolledCourses": self.enrolled_courses,
        }
