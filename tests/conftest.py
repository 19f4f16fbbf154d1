from __future__ import annotations

import threading
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from src.attendance_portal.attendance_portal.attendance.model import RawAttendanceEntry, RawAttendanceRecord
from src.attendance_portal.attendance_portal.batch.service import BatchConfig, BatchRecalculationService
from src.attendance_portal.attendance_portal.core.enums import RawAttendanceStatus
from src.attendance_portal.attendance_portal.core.exceptions import TransientStoreError
from src.attendance_portal.attendance_portal.streaks.service import StreakService
from src.attendance_portal.attendance_portal.students.model import Student
from src.attendance_portal.attendance_portal.summaries.calculator import DailySummaryCalculator
from src.attendance_portal.attendance_portal.summaries.model import DailyAttendanceSummary
from src.attendance_portal.attendance_portal.summaries.service import SummaryService

TODAY = date(2025, 3, 20)
FIXED_NOW = datetime(2025, 3, 20, 18, 30)


class InMemoryStudents:
    def __init__(self, students: Iterable[Student] = ()):
        self._by_id: Dict[int, Student] = {s.student_id: s for s in students}
        self.fail_listing = False
        self.list_calls = 0

    def add(self, student: Student) -> None:
        self._by_id[student.student_id] = student

    def list_active_students(self) -> List[Student]:
        self.list_calls += 1
        if self.fail_listing:
            raise TransientStoreError("users table unreachable")
        return [s for _, s in sorted(self._by_id.items()) if s.is_active]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._by_id.get(student_id)


class InMemoryRawAttendance:
    def __init__(self):
        self._records: List[RawAttendanceRecord] = []
        self._next_id = 0
        self._lock = threading.Lock()
        self.on_find: Optional[Callable[[int, date], None]] = None

    def mark(
        self,
        student_id: int,
        work_date: date,
        hour: int,
        status: RawAttendanceStatus | str = RawAttendanceStatus.PRESENT,
        *,
        subject_id: int = 10,
        marked_by: int = 900,
        edited_at: Optional[datetime] = None,
    ) -> RawAttendanceRecord:
        with self._lock:
            self._next_id += 1
            record = RawAttendanceRecord(
                record_id=self._next_id,
                work_date=work_date,
                hour=hour,
                subject_id=subject_id,
                marked_by=marked_by,
                last_edited_at=edited_at or datetime.combine(work_date, time(8)) + timedelta(hours=max(hour, 0)),
                entries=(RawAttendanceEntry(student_id=student_id, status=RawAttendanceStatus(status)),),
            )
            self._records.append(record)
            return record

    def mark_day(self, student_id: int, work_date: date, statuses: Iterable[str]) -> None:
        for hour, status in enumerate(statuses, start=1):
            if status:
                self.mark(student_id, work_date, hour, status)

    def mark_full_day(self, student_id: int, work_date: date) -> None:
        self.mark_day(student_id, work_date, ["present"] * 6)

    def mark_full_days(self, student_id: int, days: Iterable[date]) -> None:
        for day in days:
            self.mark_full_day(student_id, day)

    def clear_day(self, work_date: date) -> None:
        with self._lock:
            self._records = [r for r in self._records if r.work_date != work_date]

    def find_records_for_student_on_date(self, student_id: int, work_date: date) -> List[RawAttendanceRecord]:
        if self.on_find:
            self.on_find(student_id, work_date)
        with self._lock:
            return [r for r in self._records if r.work_date == work_date and r.entry_for(student_id)]


class InMemorySummaries:
    def __init__(self):
        self._rows: Dict[Tuple[int, date], DailyAttendanceSummary] = {}
        self._lock = threading.Lock()
        self.upserts = 0
        self.upserts_by_key: Counter = Counter()
        self.reads: List[date] = []

    def get(self, student_id: int, work_date: date) -> Optional[DailyAttendanceSummary]:
        with self._lock:
            self.reads.append(work_date)
            return self._rows.get((student_id, work_date))

    def upsert(self, summary: DailyAttendanceSummary) -> DailyAttendanceSummary:
        with self._lock:
            self.upserts += 1
            self.upserts_by_key[summary.key] += 1
            self._rows[summary.key] = summary
            return summary

    def list_between(self, student_id: int, start_date: date, end_date: date) -> List[DailyAttendanceSummary]:
        with self._lock:
            rows = [s for (sid, d), s in self._rows.items() if sid == student_id and start_date <= d <= end_date]
        return sorted(rows, key=lambda s: s.work_date)

    def keys(self) -> List[Tuple[int, date]]:
        with self._lock:
            return sorted(self._rows)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)


def make_student(student_id: int, *, is_active: bool = True) -> Student:
    return Student(
        student_id=student_id,
        full_name=f"Student {student_id}",
        department_id=3,
        academic_year_id=2025,
        year=2,
        semester=4,
        section="B",
        is_active=is_active,
    )


def days_before(anchor: date, *offsets: int) -> List[date]:
    return [anchor - timedelta(days=o) for o in offsets]


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents([make_student(1), make_student(2), make_student(3), make_student(4, is_active=False)])


@pytest.fixture
def raw() -> InMemoryRawAttendance:
    return InMemoryRawAttendance()


@pytest.fixture
def store() -> InMemorySummaries:
    return InMemorySummaries()


@pytest.fixture
def calculator(students, raw, store, fixed_now) -> DailySummaryCalculator:
    return DailySummaryCalculator(students, raw, store, clock=lambda: fixed_now)


@pytest.fixture
def summary_service(calculator, store, students, today) -> SummaryService:
    return SummaryService(calculator, store, students, today_provider=lambda: today)


@pytest.fixture
def streak_service(summary_service, students, today) -> StreakService:
    return StreakService(summary_service, students, today_provider=lambda: today)


@pytest.fixture
def make_batch(students, calculator, streak_service, today, fixed_now):
    def _make(**config) -> BatchRecalculationService:
        return BatchRecalculationService(
            students,
            calculator,
            streak_service,
            config=BatchConfig(**config),
            today_provider=lambda: today,
            clock=lambda: fixed_now,
        )

    return _make
