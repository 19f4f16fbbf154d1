from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLRawAttendanceRepository
from .attendance.repository import RawAttendanceRepository
from .batch.scheduler import AttendanceScheduler, SchedulerConfig
from .batch.service import BatchConfig, BatchRecalculationService
from .common.datetime_utils import now_local, today_local
from .core.constants import DEFAULT_BATCH_WORKERS, DEFAULT_STUDENT_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .streaks.service import StreakService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .summaries.calculator import DailySummaryCalculator
from .summaries.mysql_summary_repository import MySQLSummaryRepository
from .summaries.repository import SummaryRepository
from .summaries.service import SummaryService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    raw_attendance_repo: RawAttendanceRepository
    summaries_repo: SummaryRepository

    calculator: DailySummaryCalculator
    summary_service: SummaryService
    streak_service: StreakService
    batch_service: BatchRecalculationService
    scheduler: AttendanceScheduler


def batch_config_from(settings: Any) -> BatchConfig:
    return BatchConfig(
        max_workers=int(getattr(settings, "BATCH_MAX_WORKERS", DEFAULT_BATCH_WORKERS)),
        student_timeout_seconds=float(getattr(settings, "BATCH_STUDENT_TIMEOUT_SECONDS", DEFAULT_STUDENT_TIMEOUT_SECONDS)),
    )


def scheduler_config_from(settings: Any) -> SchedulerConfig:
    defaults = SchedulerConfig()
    return SchedulerConfig(
        timezone=str(getattr(settings, "SCHEDULER_TIMEZONE", defaults.timezone)),
        daily_hour=int(getattr(settings, "DAILY_JOB_HOUR", defaults.daily_hour)),
        daily_minute=int(getattr(settings, "DAILY_JOB_MINUTE", defaults.daily_minute)),
        weekly_day=str(getattr(settings, "WEEKLY_JOB_DAY", defaults.weekly_day)),
        weekly_hour=int(getattr(settings, "WEEKLY_JOB_HOUR", defaults.weekly_hour)),
        weekly_minute=int(getattr(settings, "WEEKLY_JOB_MINUTE", defaults.weekly_minute)),
    )


def wire_services(
    *,
    students_repo: StudentRepository,
    raw_attendance_repo: RawAttendanceRepository,
    summaries_repo: SummaryRepository,
    conn: Optional[DatabaseConnection] = None,
    batch_config: Optional[BatchConfig] = None,
    scheduler_config: Optional[SchedulerConfig] = None,
    today_provider=None,
    clock=None,
) -> Container:
    scheduler_config = scheduler_config or SchedulerConfig()
    today_provider = today_provider or partial(today_local, scheduler_config.timezone)
    clock = clock or partial(now_local, scheduler_config.timezone)

    calculator = DailySummaryCalculator(students_repo, raw_attendance_repo, summaries_repo, clock=clock)
    summary_service = SummaryService(calculator, summaries_repo, students_repo, today_provider=today_provider)
    streak_service = StreakService(summary_service, students_repo, today_provider=today_provider)
    batch_service = BatchRecalculationService(
        students_repo,
        calculator,
        streak_service,
        config=batch_config,
        today_provider=today_provider,
        clock=clock,
    )
    scheduler = AttendanceScheduler(batch_service, config=scheduler_config)

    return Container(
        conn=conn,
        students_repo=students_repo,
        raw_attendance_repo=raw_attendance_repo,
        summaries_repo=summaries_repo,
        calculator=calculator,
        summary_service=summary_service,
        streak_service=streak_service,
        batch_service=batch_service,
        scheduler=scheduler,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        students_repo=MySQLStudentRepository(conn),
        raw_attendance_repo=MySQLRawAttendanceRepository(conn),
        summaries_repo=MySQLSummaryRepository(conn),
        conn=conn,
        batch_config=batch_config_from(settings),
        scheduler_config=scheduler_config_from(settings),
    )
