"""Calendar arithmetic on plain ``datetime.date`` values.

All period math works on calendar dates with no time component. Day
counts are derived from year/month/day components through proleptic
ordinals, so no timezone or DST shift can introduce an off-by-one.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from periodctl.domain.errors import PeriodValidationError

MONTH_NAMES: tuple[str, ...] = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_iso_date(value: date | str | None) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a ``date`` through).

    Raises:
        PeriodValidationError: If *value* is empty, not ISO date-only, or
            names a day that does not exist (e.g. ``2025-02-30``).
    """
    if isinstance(value, date):
        return value
    if not value:
        raise PeriodValidationError("Date is required")
    match = _ISO_DATE.match(value.strip())
    if match is None:
        raise PeriodValidationError(f"Invalid date {value!r}: expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise PeriodValidationError(f"Invalid date {value!r}: {exc}") from exc


def try_parse_iso_date(value: date | str | None) -> date | None:
    """Like :func:`parse_iso_date` but returns None for unusable input."""
    try:
        return parse_iso_date(value)
    except PeriodValidationError:
        return None


def last_day_of_month(year: int, month: int) -> int:
    """Day number of the last day of *month*: day 0 of the following month."""
    if month == 12:
        first_of_next = date(year + 1, 1, 1)
    else:
        first_of_next = date(year, month + 1, 1)
    return (first_of_next - timedelta(days=1)).day


def month_end(day: date) -> date:
    """Last calendar day of the month containing *day*."""
    return date(day.year, day.month, last_day_of_month(day.year, day.month))


def inclusive_day_count(start: date, end: date) -> int:
    """Days in ``start..end`` counting both ends.

    Built from explicit components: ``2024-02-01..2024-02-29`` is 29.
    Returns 0 or a negative number when *end* precedes *start*.
    """
    start_ordinal = date(start.year, start.month, start.day).toordinal()
    end_ordinal = date(end.year, end.month, end.day).toordinal()
    return end_ordinal - start_ordinal + 1


def next_day(day: date) -> date:
    return day + timedelta(days=1)


def monday_of_week(day: date) -> date:
    """Monday of the ISO week containing *day*."""
    return day - timedelta(days=day.weekday())


def iso_week_number(day: date) -> int:
    """ISO-8601 week number (weeks start on Monday)."""
    return day.isocalendar().week


def iso_year_bounds(year: int) -> tuple[date, date]:
    """First and last day of ISO-8601 year *year* (Monday to Sunday)."""
    first = date.fromisocalendar(year, 1, 1)
    return first, date.fromisocalendar(year + 1, 1, 1) - timedelta(days=1)


def month_name(month: int) -> str:
    """Spanish month name for a 1-based month number."""
    if not 1 <= month <= 12:
        raise PeriodValidationError(f"Month out of range: {month}")
    return MONTH_NAMES[month - 1]


def month_number(name: str) -> int | None:
    """1-based month number for a Spanish month name (case-insensitive)."""
    lowered = name.strip().lower()
    for index, candidate in enumerate(MONTH_NAMES, start=1):
        if candidate.lower() == lowered:
            return index
    return None
