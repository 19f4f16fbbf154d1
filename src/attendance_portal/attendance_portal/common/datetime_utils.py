from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError

DateLike = Union[date, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def coerce_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise ValidationError(f"Invalid date {value!r}")


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if not tz_name:
        return datetime.now()
    try:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    except ZoneInfoNotFoundError:
        raise ValidationError(f"Unknown timezone {tz_name!r}")


def today_local(tz_name: Optional[str] = None) -> date:
    return now_local(tz_name).date()


def iter_days_back(anchor: date, count: int) -> Iterator[date]:
    """Yield ``count`` calendar days starting at ``anchor`` in descending order.

    ``iter_days_back(date(2025, 1, 3), 3)`` yields Jan 3, Jan 2, Jan 1.
    """
    for offset in range(max(int(count), 0)):
        yield anchor - timedelta(days=offset)


def iter_date_range(start: date, end: date) -> Iterator[date]:
    """Yield every day in ``[start, end]`` in ascending order."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def require_date_range(start: DateLike, end: DateLike) -> Tuple[date, date]:
    start_d = coerce_date(start)
    end_d = coerce_date(end)
    if end_d < start_d:
        raise ValidationError(f"Invalid range: end date {end_d.isoformat()} is before start date {start_d.isoformat()}")
    return start_d, end_d
