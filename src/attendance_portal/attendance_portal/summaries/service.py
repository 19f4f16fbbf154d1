from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional

from ..common.datetime_utils import DateLike, coerce_date, iter_date_range, require_date_range, today_local
from ..common.validators import require_int_between
from ..core.constants import DEFAULT_STATS_DAYS, MAX_STATS_DAYS, TOTAL_HOURS
from ..students.repository import StudentRepository, require_active_student
from .calculator import DailySummaryCalculator
from .model import AttendanceStats, DailyAttendanceSummary
from .repository import SummaryRepository

logger = logging.getLogger(__name__)


def _percentage(part: int, whole: int) -> float:
    """Share of ``whole`` in percent, one decimal, halves rounded up."""

    if whole <= 0:
        return 0.0
    value = Decimal(part * 100) / Decimal(whole)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class SummaryService:
    """Dashboard-facing access to daily summaries.

    Reads go through :meth:`get_or_calculate` so a day nobody has aggregated
    yet is computed on first read, for API callers and the streak evaluator
    alike.
    """

    def __init__(
        self,
        calculator: DailySummaryCalculator,
        summaries: SummaryRepository,
        students: StudentRepository,
        *,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        self._calculator = calculator
        self._summaries = summaries
        self._students = students
        self._today = today_provider or today_local

    def today(self) -> date:
        return self._today()

    def calculate(self, student_id: int, work_date: DateLike) -> DailyAttendanceSummary:
        return self._calculator.calculate(int(student_id), coerce_date(work_date))

    def get_or_calculate(self, student_id: int, work_date: DateLike) -> DailyAttendanceSummary:
        day = coerce_date(work_date)
        summary = self._summaries.get(int(student_id), day)
        if summary is not None:
            return summary
        logger.debug("Summary miss student=%s date=%s, calculating", student_id, day.isoformat())
        return self._calculator.calculate(int(student_id), day)

    def get_fresh(self, student_id: int, work_date: DateLike) -> DailyAttendanceSummary:
        """Like :meth:`get_or_calculate`, but also recomputes a day that still has unmarked hours."""

        day = coerce_date(work_date)
        summary = self._summaries.get(int(student_id), day)
        if summary is not None and summary.is_complete:
            return summary
        return self._calculator.calculate(int(student_id), day)

    def recalculate_range(self, student_id: int, start: DateLike, end: DateLike) -> List[DailyAttendanceSummary]:
        start_d, end_d = require_date_range(start, end)
        require_active_student(self._students, student_id)
        return [self._calculator.calculate(int(student_id), day) for day in iter_date_range(start_d, end_d)]

    def get_stats(
        self,
        student_id: int,
        window_days: int = DEFAULT_STATS_DAYS,
        *,
        today: Optional[date] = None,
    ) -> AttendanceStats:
        days = require_int_between(window_days, "days", 1, MAX_STATS_DAYS)
        student = require_active_student(self._students, student_id)

        end_date = today or self._today()
        start_date = end_date - timedelta(days=days)
        summaries = tuple(self._summaries.list_between(student.student_id, start_date, end_date))

        total_days = len(summaries)
        total_hours = sum(s.attended_hours for s in summaries)
        total_possible_hours = total_days * TOTAL_HOURS
        percentage = _percentage(total_hours, total_possible_hours)

        return AttendanceStats(
            student_id=student.student_id,
            window_days=days,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            full_attendance_days=sum(1 for s in summaries if s.full_day_attendance),
            total_hours=total_hours,
            total_possible_hours=total_possible_hours,
            attendance_percentage=percentage,
            summaries=summaries,
        )
