from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Iterator, Union

from ..core.exceptions import ValidationError

DateLike = Union[date, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date."""
    v = (value or "").strip()
    try:
        if len(v) > 10:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    v = (value or "").strip()
    try:
        parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def require_month(month: int) -> int:
    m = int(month)
    if m < 1 or m > 12:
        raise ValidationError("Month must be between 1 and 12")
    return m


def months_spanned(start: DateLike, end: DateLike) -> Iterator[tuple[int, int]]:
    """Yield (month, year) for every calendar month touched by [start, end]."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield month, year
        month += 1
        if month > 12:
            month = 1
            year += 1
