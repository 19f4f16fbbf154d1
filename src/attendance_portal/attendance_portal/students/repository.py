from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.exceptions import NotFoundError
from .model import Student


class StudentRepository(Protocol):
    def list_active_students(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError


def require_active_student(students: StudentRepository, student_id: int) -> Student:
    student = students.get_by_id(int(student_id))
    if not student or not student.is_active:
        raise NotFoundError(f"Student {student_id} not found")
    return student
