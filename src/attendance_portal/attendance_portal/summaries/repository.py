from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyAttendanceSummary


class SummaryRepository(Protocol):
    def get(self, student_id: int, work_date: date) -> Optional[DailyAttendanceSummary]:
        raise NotImplementedError

    def upsert(self, summary: DailyAttendanceSummary) -> DailyAttendanceSummary:
        """Insert or overwrite the single row for ``summary.key``."""

        raise NotImplementedError

    def list_between(self, student_id: int, start_date: date, end_date: date) -> Sequence[DailyAttendanceSummary]:
        """Summaries in ``[start_date, end_date]``, ascending by date."""

        raise NotImplementedError
