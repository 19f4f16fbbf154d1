"""Batch recalculation of daily summaries and streaks.

Runs one unit of work per active student on a bounded thread pool. A failing
student is logged, recorded in the report and skipped; the run itself only
fails when the active-student list cannot be read.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Sequence, Set

from ..common.datetime_utils import DateLike, iter_date_range, iter_days_back, require_date_range, today_local
from ..core.constants import (
    DEFAULT_BATCH_WORKERS,
    DEFAULT_STUDENT_TIMEOUT_SECONDS,
    PROGRESS_LOG_EVERY,
    WEEKLY_LOOKBACK_DAYS,
)
from ..core.enums import BatchKind
from ..core.exceptions import DomainError, OperationTimeoutError
from ..streaks.service import StreakService
from ..students.repository import StudentRepository
from ..summaries.calculator import DailySummaryCalculator
from ..summaries.model import DailyAttendanceSummary
from .report import BatchReport, StudentError, StudentResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchConfig:
    max_workers: int = DEFAULT_BATCH_WORKERS
    student_timeout_seconds: float = DEFAULT_STUDENT_TIMEOUT_SECONDS
    progress_every: int = PROGRESS_LOG_EVERY


class _Cancelled(Exception):
    pass


class _StudentBudget:
    """Cooperative time/cancellation check between store operations."""

    def __init__(self, student_id: int, timeout_seconds: float, cancel_event: threading.Event, monotonic=time.monotonic):
        self._student_id = student_id
        self._timeout = float(timeout_seconds)
        self._cancel_event = cancel_event
        self._monotonic = monotonic
        self._started = monotonic()

    def check(self) -> None:
        if self._cancel_event.is_set():
            raise _Cancelled()
        if self._timeout > 0 and self._monotonic() - self._started > self._timeout:
            raise OperationTimeoutError(f"Student {self._student_id} exceeded {self._timeout:g}s budget")


class BatchRecalculationService:
    def __init__(
        self,
        students: StudentRepository,
        calculator: DailySummaryCalculator,
        streaks: StreakService,
        *,
        config: Optional[BatchConfig] = None,
        today_provider: Optional[Callable[[], date]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._students = students
        self._calculator = calculator
        self._streaks = streaks
        self._config = config or BatchConfig()
        self._today = today_provider or today_local
        self._clock = clock or datetime.now
        self._active_runs: Set[threading.Event] = set()
        self._runs_lock = threading.Lock()

    def cancel(self) -> None:
        """Stop every running batch: queued students are skipped, running ones stop at their next check."""

        with self._runs_lock:
            for event in self._active_runs:
                event.set()
            running = len(self._active_runs)
        if running:
            logger.warning("Cancelling %d running attendance batch(es)", running)

    def run_daily(self, *, today: Optional[date] = None) -> BatchReport:
        """Yesterday (late marks), today, then the streak for every active student."""

        today = today or self._today()
        days = [today - timedelta(days=1), today]
        return self._run(BatchKind.DAILY, days, with_streak=True, today=today)

    def run_weekly(self, *, today: Optional[date] = None) -> BatchReport:
        """Re-aggregate the trailing week to pick up backfilled or corrected sheets."""

        today = today or self._today()
        days = sorted(iter_days_back(today, WEEKLY_LOOKBACK_DAYS))
        return self._run(BatchKind.WEEKLY, days, with_streak=False, today=today)

    def run_range(self, start: DateLike, end: DateLike, *, today: Optional[date] = None) -> BatchReport:
        start_d, end_d = require_date_range(start, end)
        days = list(iter_date_range(start_d, end_d))
        return self._run(BatchKind.RANGE, days, with_streak=True, today=today or self._today())

    def _run(self, kind: BatchKind, days: Sequence[date], *, with_streak: bool, today: date) -> BatchReport:
        cancel_event = threading.Event()
        with self._runs_lock:
            self._active_runs.add(cancel_event)
        try:
            return self._run_students(kind, days, with_streak=with_streak, today=today, cancel_event=cancel_event)
        finally:
            with self._runs_lock:
                self._active_runs.discard(cancel_event)

    def _run_students(
        self,
        kind: BatchKind,
        days: Sequence[date],
        *,
        with_streak: bool,
        today: date,
        cancel_event: threading.Event,
    ) -> BatchReport:
        # Not caught: without the student list there is nothing to report on.
        students = list(self._students.list_active_students())

        report = BatchReport(kind=kind, started_at=self._clock(), total_students=len(students))
        logger.info(
            "Starting %s attendance recalculation: %d active students, %s..%s",
            kind.value,
            len(students),
            days[0].isoformat() if days else "-",
            days[-1].isoformat() if days else "-",
        )

        every = max(int(self._config.progress_every), 1)
        with ThreadPoolExecutor(max_workers=max(int(self._config.max_workers), 1), thread_name_prefix="attendance-batch") as executor:
            futures: Dict[Future, int] = {
                executor.submit(
                    self._process_student,
                    student.student_id,
                    days,
                    with_streak=with_streak,
                    today=today,
                    cancel_event=cancel_event,
                ): student.student_id
                for student in students
            }

            try:
                for future in as_completed(futures):
                    student_id = futures[future]
                    try:
                        result = future.result()
                    except CancelledError:
                        result = StudentResult(student_id=student_id, cancelled=True)
                    report.results.append(result)

                    if cancel_event.is_set():
                        for pending in futures:
                            pending.cancel()

                    done = len(report.results)
                    if done % every == 0:
                        logger.info("Processed %d/%d students...", done, len(students))
            except BaseException:
                # Interrupted (e.g. Ctrl-C): drain the pool quickly before re-raising.
                cancel_event.set()
                for pending in futures:
                    pending.cancel()
                raise

        report.results.sort(key=lambda r: r.student_id)
        report.finished_at = self._clock()
        logger.info(
            "%s attendance recalculation completed. Processed: %d, Errors: %d, Cancelled: %d",
            kind.value.capitalize(),
            report.processed_count,
            report.error_count,
            report.cancelled_count,
        )
        return report

    def _process_student(
        self,
        student_id: int,
        days: Sequence[date],
        *,
        with_streak: bool,
        today: date,
        cancel_event: threading.Event,
    ) -> StudentResult:
        budget = _StudentBudget(student_id, self._config.student_timeout_seconds, cancel_event)
        computed = 0
        today_summary: Optional[DailyAttendanceSummary] = None
        try:
            for day in days:
                budget.check()
                summary = self._calculator.calculate(student_id, day)
                computed += 1
                if day == today:
                    today_summary = summary

            streak = None
            if with_streak:
                streak = self._streaks.get_streak(
                    student_id,
                    today=today,
                    checkpoint=budget.check,
                    today_summary=today_summary,
                )
            return StudentResult(student_id=student_id, summary_count=computed, streak=streak)
        except _Cancelled:
            return StudentResult(student_id=student_id, summary_count=computed, cancelled=True)
        except DomainError as e:
            logger.error("Error processing student %s: %s", student_id, e)
            return StudentResult(student_id=student_id, summary_count=computed, error=StudentError.from_exception(student_id, e))
        except Exception as e:
            logger.exception("Unexpected error processing student %s", student_id)
            return StudentResult(student_id=student_id, summary_count=computed, error=StudentError.from_exception(student_id, e))
