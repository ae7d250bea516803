from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored on each event.

    Only PRESENT is produced by the scan path; the others are reserved.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
