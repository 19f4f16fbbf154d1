"""Daily summary calculation.

Turns the raw per-hour sheets of one student and one day into the fixed
six-slot :class:`DailyAttendanceSummary` and upserts it.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

from ..attendance.model import RawAttendanceRecord
from ..attendance.repository import RawAttendanceRepository
from ..common.keyed_lock import KeyedLock
from ..core.constants import FIRST_HOUR, LAST_HOUR, TOTAL_HOURS
from ..core.enums import HourStatus
from ..students.model import Student
from ..students.repository import StudentRepository, require_active_student
from .model import DailyAttendanceSummary, HourSlot
from .repository import SummaryRepository

logger = logging.getLogger(__name__)


def _edit_order(record: RawAttendanceRecord):
    return (record.last_edited_at or datetime.min, record.record_id)


def build_daily_summary(
    student: Student,
    work_date: date,
    records: Iterable[RawAttendanceRecord],
    *,
    now: datetime,
) -> DailyAttendanceSummary:
    """Pure part of the calculation: no reads, no writes.

    Hours nobody marked stay ``not_marked`` (never ``absent``). When two sheets
    cover the same hour, the most recently edited one wins.
    """

    slots: List[HourSlot] = [HourSlot(hour=h) for h in range(1, TOTAL_HOURS + 1)]

    for record in sorted(records, key=_edit_order):
        if not (FIRST_HOUR <= record.hour <= LAST_HOUR):
            logger.debug("Ignoring sheet %s with hour %s outside 1..%s", record.record_id, record.hour, LAST_HOUR)
            continue
        entry = record.entry_for(student.student_id)
        if entry is None:
            continue
        slots[record.hour - 1] = HourSlot(
            hour=record.hour,
            status=HourStatus.PRESENT if entry.attended else HourStatus.ABSENT,
            subject_id=record.subject_id,
            marked_by=record.marked_by,
            marked_at=record.last_edited_at,
        )

    attended = sum(1 for s in slots if s.status == HourStatus.PRESENT)
    absent = sum(1 for s in slots if s.status == HourStatus.ABSENT)
    not_marked = TOTAL_HOURS - attended - absent

    return DailyAttendanceSummary(
        student_id=student.student_id,
        work_date=work_date,
        hourly_attendance=tuple(slots),
        attended_hours=attended,
        absent_hours=absent,
        not_marked_hours=not_marked,
        full_day_attendance=attended == TOTAL_HOURS and not_marked == 0,
        last_updated=now,
        total_hours=TOTAL_HOURS,
        department_id=student.department_id,
        academic_year_id=student.academic_year_id,
        year=student.year,
        semester=student.semester,
        section=student.section,
    )


class DailySummaryCalculator:
    """The only writer of daily summaries."""

    def __init__(
        self,
        students: StudentRepository,
        raw_attendance: RawAttendanceRepository,
        summaries: SummaryRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        locks: Optional[KeyedLock] = None,
    ):
        self._students = students
        self._raw = raw_attendance
        self._summaries = summaries
        self._clock = clock or datetime.now
        self._locks = locks or KeyedLock()

    def calculate(self, student_id: int, work_date: date) -> DailyAttendanceSummary:
        student = require_active_student(self._students, student_id)

        with self._locks.hold((student.student_id, work_date)):
            records = self._raw.find_records_for_student_on_date(student.student_id, work_date)
            summary = build_daily_summary(student, work_date, records, now=self._clock())
            self._summaries.upsert(summary)

        logger.debug(
            "Summary student=%s date=%s attended=%s absent=%s not_marked=%s full=%s",
            summary.student_id,
            work_date.isoformat(),
            summary.attended_hours,
            summary.absent_hours,
            summary.not_marked_hours,
            summary.full_day_attendance,
        )
        return summary
