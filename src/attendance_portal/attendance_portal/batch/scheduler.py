from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..common.datetime_utils import DateLike, require_date_range
from .report import BatchReport
from .service import BatchRecalculationService

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "attendance-daily-summary"
WEEKLY_JOB_ID = "attendance-weekly-recalculation"


@dataclass(frozen=True)
class SchedulerConfig:
    timezone: str = "Asia/Kolkata"
    daily_hour: int = 0
    daily_minute: int = 0
    weekly_day: str = "sun"
    weekly_hour: int = 1
    weekly_minute: int = 0
    misfire_grace_seconds: int = 3600
    keep_reports: int = 20


class AttendanceScheduler:
    """Owns the timer jobs that drive :class:`BatchRecalculationService`.

    Built and torn down by the process owner (see ``main.create_app``); nothing
    is scheduled at import time.
    """

    def __init__(
        self,
        batch: BatchRecalculationService,
        *,
        config: Optional[SchedulerConfig] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._batch = batch
        self._config = config or SchedulerConfig()
        self._scheduler = scheduler or BackgroundScheduler(
            timezone=self._config.timezone,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": self._config.misfire_grace_seconds,
            },
        )
        self._reports: Deque[BatchReport] = deque(maxlen=self._config.keep_reports)
        self._reports_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    @property
    def scheduler(self) -> BackgroundScheduler:
        return self._scheduler

    @property
    def last_reports(self) -> List[BatchReport]:
        with self._reports_lock:
            return list(self._reports)

    def start(self, *, with_cron_jobs: bool = True, paused: bool = False) -> None:
        if self.running:
            return

        if with_cron_jobs:
            cfg = self._config
            self._scheduler.add_job(
                self._run_daily,
                CronTrigger(hour=cfg.daily_hour, minute=cfg.daily_minute, timezone=cfg.timezone),
                id=DAILY_JOB_ID,
                name="Daily attendance summary calculation",
                replace_existing=True,
            )
            self._scheduler.add_job(
                self._run_weekly,
                CronTrigger(day_of_week=cfg.weekly_day, hour=cfg.weekly_hour, minute=cfg.weekly_minute, timezone=cfg.timezone),
                id=WEEKLY_JOB_ID,
                name="Weekly attendance recalculation",
                replace_existing=True,
            )

        self._scheduler.start(paused=paused)
        if with_cron_jobs:
            logger.info(
                "Attendance jobs scheduled: daily at %02d:%02d, weekly on %s at %02d:%02d (%s)",
                self._config.daily_hour,
                self._config.daily_minute,
                self._config.weekly_day,
                self._config.weekly_hour,
                self._config.weekly_minute,
                self._config.timezone,
            )
        else:
            logger.info("Attendance scheduler started for manual triggers only")

    def shutdown(self, *, wait: bool = True) -> None:
        if not self.running:
            return
        self._batch.cancel()
        self._scheduler.shutdown(wait=wait)
        logger.info("Attendance scheduler stopped")

    def trigger_daily_calculation(self) -> str:
        job = self._scheduler.add_job(self._run_daily, id=f"manual-daily-{uuid.uuid4().hex[:12]}", name="Manual daily attendance calculation")
        logger.info("Manually triggered daily attendance calculation (job=%s)", job.id)
        return job.id

    def trigger_date_range_calculation(self, start: DateLike, end: DateLike) -> str:
        # Validate now so a bad request fails for the caller, not inside the job.
        start_d, end_d = require_date_range(start, end)
        job = self._scheduler.add_job(
            self._run_range,
            args=[start_d, end_d],
            id=f"manual-range-{uuid.uuid4().hex[:12]}",
            name=f"Manual attendance recalculation {start_d.isoformat()}..{end_d.isoformat()}",
        )
        logger.info("Manually triggered date range calculation from %s to %s (job=%s)", start_d, end_d, job.id)
        return job.id

    def _run_daily(self) -> None:
        self._record(self._batch.run_daily())

    def _run_weekly(self) -> None:
        self._record(self._batch.run_weekly())

    def _run_range(self, start, end) -> None:
        self._record(self._batch.run_range(start, end))

    def _record(self, report: BatchReport) -> None:
        with self._reports_lock:
            self._reports.append(report)
