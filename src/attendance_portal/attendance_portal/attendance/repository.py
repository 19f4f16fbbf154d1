from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import RawAttendanceRecord


class RawAttendanceRepository(Protocol):
    def find_records_for_student_on_date(self, student_id: int, work_date: date) -> Sequence[RawAttendanceRecord]:
        """Records of ``work_date`` that list the student, oldest edit first."""

        raise NotImplementedError
