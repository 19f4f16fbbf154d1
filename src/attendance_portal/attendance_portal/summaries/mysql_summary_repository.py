from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_column
from .model import DailyAttendanceSummary, HourSlot
from .repository import SummaryRepository

_COLUMNS = """
    student_id, work_date, academic_year_id, department_id, year, semester, section,
    total_hours, attended_hours, absent_hours, not_marked_hours, full_day_attendance,
    hourly_attendance, last_updated
"""


def _to_summary(r: Dict[str, Any]) -> DailyAttendanceSummary:
    slots = load_json_column(r["hourly_attendance"]) or []
    return DailyAttendanceSummary(
        student_id=int(r["student_id"]),
        work_date=r["work_date"],
        hourly_attendance=tuple(HourSlot.from_dict(s) for s in slots),
        attended_hours=int(r["attended_hours"]),
        absent_hours=int(r["absent_hours"]),
        not_marked_hours=int(r["not_marked_hours"]),
        full_day_attendance=bool(r["full_day_attendance"]),
        last_updated=r["last_updated"],
        total_hours=int(r["total_hours"]),
        department_id=r.get("department_id"),
        academic_year_id=r.get("academic_year_id"),
        year=r.get("year"),
        semester=r.get("semester"),
        section=r.get("section"),
    )


class MySQLSummaryRepository(SummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, student_id: int, work_date: date) -> Optional[DailyAttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance_summaries
                WHERE student_id=%s AND work_date=%s
                """,
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _to_summary(r) if r else None

    def upsert(self, summary: DailyAttendanceSummary) -> DailyAttendanceSummary:
        # Single statement against the unique (student_id, work_date) key.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_attendance_summaries(
                    student_id, work_date, academic_year_id, department_id, year, semester, section,
                    total_hours, attended_hours, absent_hours, not_marked_hours, full_day_attendance,
                    hourly_attendance, last_updated
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    academic_year_id=VALUES(academic_year_id),
                    department_id=VALUES(department_id),
                    year=VALUES(year),
                    semester=VALUES(semester),
                    section=VALUES(section),
                    total_hours=VALUES(total_hours),
                    attended_hours=VALUES(attended_hours),
                    absent_hours=VALUES(absent_hours),
                    not_marked_hours=VALUES(not_marked_hours),
                    full_day_attendance=VALUES(full_day_attendance),
                    hourly_attendance=VALUES(hourly_attendance),
                    last_updated=VALUES(last_updated)
                """,
                (
                    summary.student_id,
                    summary.work_date,
                    summary.academic_year_id,
                    summary.department_id,
                    summary.year,
                    summary.semester,
                    summary.section,
                    summary.total_hours,
                    summary.attended_hours,
                    summary.absent_hours,
                    summary.not_marked_hours,
                    int(summary.full_day_attendance),
                    json.dumps([s.to_dict() for s in summary.hourly_attendance]),
                    summary.last_updated,
                ),
            )
        return summary

    def list_between(self, student_id: int, start_date: date, end_date: date) -> Sequence[DailyAttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance_summaries
                WHERE student_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(student_id), start_date, end_date),
            )
            return [_to_summary(r) for r in fetchall(cur)]
