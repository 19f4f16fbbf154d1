"""Full-attendance streak.

Two policies, depending on today:

* today is a full day: count consecutive full days backward from today;
* otherwise: report the longest chain that starts at any full day of the
  trailing search window, so one bad day does not wipe the number out.

Both walk days strictly in descending order and cap a chain at
``STREAK_CHAIN_DAYS`` days including the day it starts from.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Dict, Optional

from ..common.datetime_utils import iter_days_back, today_local
from ..core.constants import STREAK_CHAIN_DAYS, STREAK_SEARCH_DAYS
from ..students.repository import StudentRepository, require_active_student
from ..summaries.model import DailyAttendanceSummary
from ..summaries.service import SummaryService

logger = logging.getLogger(__name__)

Checkpoint = Callable[[], None]


def _noop() -> None:
    return None


def _is_summary_of(summary: Optional[DailyAttendanceSummary], student_id: int, day: date) -> bool:
    return summary is not None and summary.key == (student_id, day)


class _FullDayLookup:
    """Per-evaluation memo of "was this day full?" backed by lazy fill."""

    def __init__(self, summaries: SummaryService, student_id: int, checkpoint: Checkpoint):
        self._summaries = summaries
        self._student_id = student_id
        self._checkpoint = checkpoint
        self._seen: Dict[date, bool] = {}

    def remember(self, day: date, full: bool) -> None:
        self._seen[day] = full

    def is_full(self, day: date) -> bool:
        if day not in self._seen:
            self._checkpoint()
            self._seen[day] = self._summaries.get_or_calculate(self._student_id, day).full_day_attendance
        return self._seen[day]


class StreakService:
    def __init__(
        self,
        summaries: SummaryService,
        students: StudentRepository,
        *,
        today_provider: Optional[Callable[[], date]] = None,
        chain_days: int = STREAK_CHAIN_DAYS,
        search_days: int = STREAK_SEARCH_DAYS,
    ):
        self._summaries = summaries
        self._students = students
        self._today = today_provider or today_local
        self._chain_days = int(chain_days)
        self._search_days = int(search_days)

    def get_streak(
        self,
        student_id: int,
        *,
        today: Optional[date] = None,
        checkpoint: Optional[Checkpoint] = None,
        today_summary: Optional[DailyAttendanceSummary] = None,
    ) -> int:
        """Return the student's streak (>= 0).

        ``checkpoint`` is called before every store access; batch jobs use it to
        enforce their time budget and cancellation. ``today_summary`` is a summary
        of ``today`` the caller has just computed; it is used as is.
        """

        student = require_active_student(self._students, student_id)
        today = today or self._today()
        checkpoint = checkpoint or _noop

        if not _is_summary_of(today_summary, student.student_id, today):
            checkpoint()
            today_summary = self._summaries.get_fresh(student.student_id, today)

        lookup = _FullDayLookup(self._summaries, student.student_id, checkpoint)
        lookup.remember(today, today_summary.full_day_attendance)

        if today_summary.full_day_attendance:
            streak = self._chain_length(lookup, today)
            logger.debug("Live streak student=%s today=%s streak=%s", student.student_id, today.isoformat(), streak)
            return streak

        best = 0
        for day in iter_days_back(today, self._search_days):
            if lookup.is_full(day):
                best = max(best, self._chain_length(lookup, day))
            if best >= self._chain_days:
                break

        logger.debug("Best recent streak student=%s today=%s streak=%s", student.student_id, today.isoformat(), best)
        return best

    def _chain_length(self, lookup: _FullDayLookup, anchor: date) -> int:
        """Length of the run of full days ending at ``anchor`` (assumed full)."""

        length = 1
        for day in iter_days_back(anchor - timedelta(days=1), self._chain_days - 1):
            if not lookup.is_full(day):
                break
            length += 1
        return length
