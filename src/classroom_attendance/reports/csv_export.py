from __future__ import annotations

import csv
import io
from typing import Iterable

from ..common.datetime_utils import format_timestamp
from .model import CourseReport

CSV_FIELDS = ["Course", "Instructor", "Name", "Student ID", "Email", "Status", "Timestamp"]


def report_csv_rows(reports: Iterable[CourseReport]) -> list[dict]:
    """Flatten reports: per course, present students first, then absent ones."""
    rows: list[dict] = []
    for report in reports:
        for s in report.present_students:
            rows.append(
                {
                    "Course": report.course_name,
                    "Instructor": report.instructor,
                    "Name": s.name,
                    "Student ID": s.student_number,
                    "Email": s.email,
                    "Status": "Present",
                    "Timestamp": format_timestamp(s.timestamp),
                }
            )
        for s in report.absent_students:
            rows.append(
                {
                    "Course": report.course_name,
                    "Instructor": report.instructor,
                    "Name": s.name,
                    "Student ID": s.student_number,
                    "Email": s.email,
                    "Status": "Absent",
                    "Timestamp": "",
                }
            )
    return rows


def write_csv_bytes(rows: Iterable[dict], *, fieldnames: list[str] = CSV_FIELDS) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=fieldnames, quoting=csv.QUOTE_ALL)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
