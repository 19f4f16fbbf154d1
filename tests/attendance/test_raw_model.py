from datetime import date, datetime

import pytest

from src.attendance_portal.attendance_portal.attendance.model import RawAttendanceEntry, RawAttendanceRecord
from src.attendance_portal.attendance_portal.core.enums import RawAttendanceStatus


@pytest.mark.parametrize(
    "status, attended",
    [(RawAttendanceStatus.PRESENT, True), (RawAttendanceStatus.LATE, True), (RawAttendanceStatus.ABSENT, False)],
)
def test_entry_attended_follows_status(status, attended):
    assert RawAttendanceEntry(student_id=1, status=status).attended is attended


def test_entry_carries_only_student_and_status():
    with pytest.raises(TypeError):
        RawAttendanceEntry(student_id=1, status=RawAttendanceStatus.LATE, late=True)


def test_entry_for_picks_the_student():
    record = RawAttendanceRecord(
        record_id=1,
        work_date=date(2025, 3, 3),
        hour=2,
        subject_id=5,
        marked_by=900,
        last_edited_at=datetime(2025, 3, 3, 10, 0),
        entries=(
            RawAttendanceEntry(student_id=1, status=RawAttendanceStatus.ABSENT),
            RawAttendanceEntry(student_id=2, status=RawAttendanceStatus.PRESENT),
        ),
    )

    assert record.entry_for(2).status == RawAttendanceStatus.PRESENT
    assert record.entry_for(3) is None
