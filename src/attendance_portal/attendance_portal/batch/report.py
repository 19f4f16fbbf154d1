from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.enums import BatchKind


@dataclass(frozen=True)
class StudentError:
    student_id: int
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, student_id: int, exc: BaseException) -> "StudentError":
        return cls(student_id=int(student_id), error_type=type(exc).__name__, message=str(exc))

    def to_dict(self) -> Dict[str, Any]:
        return {"student_id": self.student_id, "error_type": self.error_type, "message": self.message}


@dataclass(frozen=True)
class StudentResult:
    """Outcome of one student's unit of work: how many days were written, the streak or an error."""

    student_id: int
    summary_count: int = 0
    streak: Optional[int] = None
    error: Optional[StudentError] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.cancelled


@dataclass
class BatchReport:
    kind: BatchKind
    started_at: datetime
    finished_at: Optional[datetime] = None
    total_students: int = 0
    results: List[StudentResult] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if r.error is not None)

    @property
    def cancelled_count(self) -> int:
        return sum(1 for r in self.results if r.cancelled)

    @property
    def summary_count(self) -> int:
        return sum(r.summary_count for r in self.results)

    @property
    def errors(self) -> List[StudentError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def duration_seconds(self) -> float:
        if not self.finished_at:
            return 0.0
        return round((self.finished_at - self.started_at).total_seconds(), 2)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
            "total_students": self.total_students,
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "cancelled_count": self.cancelled_count,
            "summary_count": self.summary_count,
            "errors": [e.to_dict() for e in self.errors],
        }
