from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "user_id, full_name, role, department_id, academic_year_id, year, semester, section, is_active"


def _to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["user_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        department_id=r.get("department_id"),
        academic_year_id=r.get("academic_year_id"),
        year=r.get("year"),
        semester=r.get("semester"),
        section=r.get("section"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_students(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE role=%s AND is_active=1
                ORDER BY user_id ASC
                """,
                (Role.STUDENT.value,),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE user_id=%s AND role=%s
                """,
                (int(student_id), Role.STUDENT.value),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None
