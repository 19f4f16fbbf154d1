from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from ..core.constants import TOTAL_HOURS
from ..core.enums import HourStatus


@dataclass(frozen=True)
class HourSlot:
    hour: int
    status: HourStatus = HourStatus.NOT_MARKED
    subject_id: Optional[int] = None
    marked_by: Optional[int] = None
    marked_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hour": self.hour,
            "status": self.status.value,
            "subject_id": self.subject_id,
            "marked_by": self.marked_by,
            "marked_at": self.marked_at.isoformat() if self.marked_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HourSlot":
        marked_at = data.get("marked_at")
        return cls(
            hour=int(data["hour"]),
            status=HourStatus(data.get("status", HourStatus.NOT_MARKED.value)),
            subject_id=data.get("subject_id"),
            marked_by=data.get("marked_by"),
            marked_at=datetime.fromisoformat(marked_at) if marked_at else None,
        )


@dataclass(frozen=True)
class DailyAttendanceSummary:
    """Thực thể miền (domain): one student's attendance for one calendar day.

    Keyed by ``(student_id, work_date)``. Counts are derived from
    ``hourly_attendance`` and checked on construction, so an instance that
    exists always satisfies the sum and full-day rules.
    """

    student_id: int
    work_date: date
    hourly_attendance: Tuple[HourSlot, ...]
    attended_hours: int
    absent_hours: int
    not_marked_hours: int
    full_day_attendance: bool
    last_updated: datetime
    total_hours: int = TOTAL_HOURS
    department_id: Optional[int] = None
    academic_year_id: Optional[int] = None
    year: Optional[int] = None
    semester: Optional[int] = None
    section: Optional[str] = None

    def __post_init__(self) -> None:
        if self.total_hours != TOTAL_HOURS:
            raise ValueError(f"total_hours must be {TOTAL_HOURS}, got {self.total_hours}")
        if len(self.hourly_attendance) != TOTAL_HOURS:
            raise ValueError(f"expected {TOTAL_HOURS} hour slots, got {len(self.hourly_attendance)}")
        if [s.hour for s in self.hourly_attendance] != list(range(1, TOTAL_HOURS + 1)):
            raise ValueError("hour slots must be ordered 1..6")
        if self.attended_hours + self.absent_hours + self.not_marked_hours != self.total_hours:
            raise ValueError("attended + absent + not_marked hours must equal total_hours")
        full = self.attended_hours == self.total_hours and self.not_marked_hours == 0
        if self.full_day_attendance != full:
            raise ValueError("full_day_attendance does not match the hour counts")

    @property
    def key(self) -> Tuple[int, date]:
        return self.student_id, self.work_date

    @property
    def is_complete(self) -> bool:
        return self.not_marked_hours == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "date": self.work_date.isoformat(),
            "total_hours": self.total_hours,
            "attended_hours": self.attended_hours,
            "absent_hours": self.absent_hours,
            "not_marked_hours": self.not_marked_hours,
            "full_day_attendance": self.full_day_attendance,
            "hourly_attendance": [s.to_dict() for s in self.hourly_attendance],
            "department_id": self.department_id,
            "academic_year_id": self.academic_year_id,
            "year": self.year,
            "semester": self.semester,
            "section": self.section,
            "last_updated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for dashboards: totals over a trailing window of summaries."""

    student_id: int
    window_days: int
    start_date: date
    end_date: date
    total_days: int
    full_attendance_days: int
    total_hours: int
    total_possible_hours: int
    attendance_percentage: float
    summaries: Tuple[DailyAttendanceSummary, ...] = field(default=(), repr=False)

    def to_dict(self, *, include_summaries: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "student_id": self.student_id,
            "window_days": self.window_days,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "full_attendance_days": self.full_attendance_days,
            "total_hours": self.total_hours,
            "total_possible_hours": self.total_possible_hours,
            "attendance_percentage": self.attendance_percentage,
        }
        if include_summaries:
            data["summaries"] = [s.to_dict() for s in self.summaries]
        return data
