from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """Thực thể miền (domain): Student.

    Read-only view of a student row owned by the user-management side.
    """

    student_id: int
    full_name: str
    role: Role = Role.STUDENT
    department_id: Optional[int] = None
    academic_year_id: Optional[int] = None
    year: Optional[int] = None
    semester: Optional[int] = None
    section: Optional[str] = None
    is_active: bool = True
