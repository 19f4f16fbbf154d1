from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import RawAttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import RawAttendanceEntry, RawAttendanceRecord
from .repository import RawAttendanceRepository


class MySQLRawAttendanceRepository(RawAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_records_for_student_on_date(self, student_id: int, work_date: date) -> Sequence[RawAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.sheet_id, s.work_date, s.hour, s.subject_id, s.marked_by, s.last_edited_at,
                    s.department_id, s.section, s.year, s.semester,
                    e.student_id, e.status
                FROM attendance_sheets s
                JOIN attendance_sheet_entries e ON e.sheet_id = s.sheet_id
                WHERE s.work_date=%s AND e.student_id=%s
                ORDER BY s.last_edited_at ASC, s.sheet_id ASC
                """,
                (work_date, int(student_id)),
            )
            rows = fetchall(cur)

            return [
                RawAttendanceRecord(
                    record_id=int(r["sheet_id"]),
                    work_date=r["work_date"],
                    hour=int(r["hour"]),
                    subject_id=r.get("subject_id"),
                    marked_by=r.get("marked_by"),
                    last_edited_at=r.get("last_edited_at"),
                    department_id=r.get("department_id"),
                    section=r.get("section"),
                    year=r.get("year"),
                    semester=r.get("semester"),
                    entries=(
                        RawAttendanceEntry(
                            student_id=int(r["student_id"]),
                            status=RawAttendanceStatus(r["status"]),
                        ),
                    ),
                )
                for r in rows
            ]
