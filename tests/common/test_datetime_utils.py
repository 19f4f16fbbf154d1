from datetime import date, datetime

import pytest

from src.attendance_portal.attendance_portal.common.datetime_utils import (
    coerce_date,
    iter_date_range,
    iter_days_back,
    parse_iso_date,
    require_date_range,
)
from src.attendance_portal.attendance_portal.core.exceptions import ValidationError


def test_iter_days_back_is_descending_and_bounded():
    days = list(iter_days_back(date(2025, 3, 2), 4))

    assert days == [date(2025, 3, 2), date(2025, 3, 1), date(2025, 2, 28), date(2025, 2, 27)]


def test_iter_days_back_with_zero_count_is_empty():
    assert list(iter_days_back(date(2025, 3, 2), 0)) == []


def test_iter_date_range_is_inclusive():
    days = list(iter_date_range(date(2024, 12, 30), date(2025, 1, 2)))

    assert [d.isoformat() for d in days] == ["2024-12-30", "2024-12-31", "2025-01-01", "2025-01-02"]


def test_single_day_range():
    assert require_date_range("2025-01-05", "2025-01-05") == (date(2025, 1, 5), date(2025, 1, 5))


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError):
        require_date_range(date(2025, 1, 6), date(2025, 1, 5))


def test_parse_iso_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_iso_date("2025-02-30")


def test_coerce_date_accepts_datetime_and_string():
    assert coerce_date(datetime(2025, 1, 5, 13, 0)) == date(2025, 1, 5)
    assert coerce_date(" 2025-01-05 ") == date(2025, 1, 5)

    with pytest.raises(ValidationError):
        coerce_date(20250105)
