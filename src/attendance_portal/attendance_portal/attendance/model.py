from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import RawAttendanceStatus


@dataclass(frozen=True)
class RawAttendanceEntry:
    """One student's mark inside an attendance sheet."""

    student_id: int
    status: RawAttendanceStatus

    @property
    def attended(self) -> bool:
        return self.status in (RawAttendanceStatus.PRESENT, RawAttendanceStatus.LATE)


@dataclass(frozen=True)
class RawAttendanceRecord:
    """Thực thể miền (domain): one hour of attendance for one section.

    Written by teachers elsewhere in the portal; read-only here.
    """

    record_id: int
    work_date: date
    hour: int
    subject_id: Optional[int]
    marked_by: Optional[int]
    last_edited_at: Optional[datetime]
    entries: Tuple[RawAttendanceEntry, ...] = ()
    department_id: Optional[int] = None
    section: Optional[str] = None
    year: Optional[int] = None
    semester: Optional[int] = None

    def entry_for(self, student_id: int) -> Optional[RawAttendanceEntry]:
        for entry in self.entries:
            if entry.student_id == student_id:
                return entry
        return None
