"""Calendar helpers shared by the decoder and the analysis passes."""

from __future__ import annotations

import calendar
from datetime import date, datetime


def parse_iso_day(value: str | date | None) -> date | None:
    """Parse YYYY-MM-DD (or an ISO timestamp) into a date, truncated to the day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def iso_day(d: date) -> str:
    """Day-precision ISO string used in cell keys and variable keys."""
    return d.isoformat()[:10]


def is_weekend(d: date) -> bool:
    """Return True for Saturday and Sunday."""
    return d.weekday() >= 5


def minutes_to_hours(minutes: float | int | None) -> float:
    if not minutes:
        return 0.0
    return float(minutes) / 60.0


def format_duration(minutes: int | None) -> str:
    """Format a shift duration as e.g. '8h 30min'."""
    total = int(round(minutes or 0))
    return f"{total // 60}h {total % 60}min"


def month_days(year: int, month: int) -> list[date]:
    """All dates of a calendar month, in order."""
    _, last = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, last + 1)]
