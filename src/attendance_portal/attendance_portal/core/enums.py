from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles known to the student directory."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class RawAttendanceStatus(str, Enum):
    """Status a teacher records for one student in one hour."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class HourStatus(str, Enum):
    """Status of one hour slot in a daily summary."""

    PRESENT = "present"
    ABSENT = "absent"
    NOT_MARKED = "not_marked"


class BatchKind(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    RANGE = "range"
