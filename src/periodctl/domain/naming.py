"""Human-readable period labels and text parsing.

Everything here is pure and locale-fixed (Spanish month names). The
day-count classification is a display heuristic only; generation and
validation always use the strategy of the stored or requested periodicity.
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel

from periodctl.domain.calendar import (
    last_day_of_month,
    month_name,
    month_number,
)
from periodctl.domain.models import PeriodBoundary
from periodctl.domain.types import Periodicity

WEEKLY_MAX_DAYS = 7
BIWEEKLY_MAX_DAYS = 16

_TYPE_LABELS: dict[Periodicity, str] = {
    Periodicity.WEEKLY: "Semanal",
    Periodicity.BIWEEKLY: "Quincenal",
    Periodicity.MONTHLY: "Mensual",
}

_RANGE_TEXT = re.compile(r"(\d+)\s+al\s+(\d+)\s+de\s+(\w+)\s+(\d+)", re.IGNORECASE)

# Ordered: the first keyword found wins.
_TEXT_KEYWORDS: tuple[tuple[Periodicity, tuple[str, ...]], ...] = (
    (Periodicity.WEEKLY, ("seman",)),
    (Periodicity.BIWEEKLY, ("quinc", "1 al 15", "16 al 30", "16 al 31")),
    (Periodicity.MONTHLY, ("mes", "1 al 30", "1 al 31")),
)


class ParsedPeriodText(BaseModel):
    """What could be recovered from a free-text period description."""

    model_config = {"frozen": True}

    boundary: PeriodBoundary | None = None
    periodicity: Periodicity | None = None


def classify_by_day_count(days: int) -> Periodicity:
    """Apparent cadence of a range: <=7 weekly, <=16 biweekly, else monthly."""
    if days <= WEEKLY_MAX_DAYS:
        return Periodicity.WEEKLY
    if days <= BIWEEKLY_MAX_DAYS:
        return Periodicity.BIWEEKLY
    return Periodicity.MONTHLY


def _is_whole_month(start: date, end: date) -> bool:
    return (
        start.year == end.year
        and start.month == end.month
        and start.day == 1
        and end.day == last_day_of_month(end.year, end.month)
    )


def positional_label(start: date, end: date) -> str:
    """Label a range by its position on the calendar.

    >>> positional_label(date(2025, 1, 1), date(2025, 1, 15))
    '1 - 15 Enero 2025'
    >>> positional_label(date(2025, 1, 1), date(2025, 1, 31))
    'Enero 2025'
    >>> positional_label(date(2025, 1, 20), date(2025, 2, 5))
    '20 Enero - 5 Febrero 2025'
    """
    if _is_whole_month(start, end):
        return f"{month_name(start.month)} {start.year}"
    if start.year == end.year and start.month == end.month:
        return f"{start.day} - {end.day} {month_name(start.month)} {start.year}"
    if start.year == end.year:
        return (
            f"{start.day} {month_name(start.month)} - "
            f"{end.day} {month_name(end.month)} {end.year}"
        )
    return (
        f"{start.day} {month_name(start.month)} {start.year} - "
        f"{end.day} {month_name(end.month)} {end.year}"
    )


def semantic_period_name(
    number: int,
    periodicity: Periodicity | str,
    year: int,
    fallback: str | None = None,
) -> str | None:
    """Ordinal-based name, e.g. ``"Quincena 14 del 2025"``.

    Returns *fallback* for cadences without a semantic form, or for a
    monthly number outside 1-12.
    """
    match periodicity:
        case Periodicity.MONTHLY:
            if not 1 <= number <= 12:
                return fallback
            return f"{month_name(number)} {year}"
        case Periodicity.BIWEEKLY:
            return f"Quincena {number} del {year}"
        case Periodicity.WEEKLY:
            return f"Semana {number} del {year}"
        case _:
            return fallback


def period_type_label(periodicity: Periodicity | str, day_count: int | None = None) -> str:
    """Spanish display name of a cadence (``"Quincenal"``, ``"Personalizado (10 días)"``)."""
    try:
        resolved = Periodicity(periodicity)
    except ValueError:
        return _TYPE_LABELS[Periodicity.MONTHLY]
    if resolved is Periodicity.CUSTOM:
        return f"Personalizado ({day_count if day_count is not None else '?'} días)"
    return _TYPE_LABELS[resolved]


def _boundary_from_text(text: str) -> PeriodBoundary | None:
    match = _RANGE_TEXT.search(text)
    if match is None:
        return None
    start_day, end_day, month_text, year_text = match.groups()
    month = month_number(month_text)
    if month is None:
        return None
    try:
        start = date(int(year_text), month, int(start_day))
        end = date(int(year_text), month, int(end_day))
    except ValueError:
        return None
    if end < start:
        return None
    return PeriodBoundary(start_date=start, end_date=end)


def parse_period_text(text: str | None) -> ParsedPeriodText:
    """Recover a boundary or at least a cadence from free text.

    ``"1 al 15 de Mayo 2025"`` yields the boundary and its apparent
    cadence. Otherwise keywords (``seman``, ``quinc``, ``mes``) give the
    cadence only. Unrecognised text yields an empty result.
    """
    if not text:
        return ParsedPeriodText()

    boundary = _boundary_from_text(text)
    if boundary is not None:
        return ParsedPeriodText(
            boundary=boundary,
            periodicity=classify_by_day_count(boundary.day_count),
        )

    lowered = text.lower()
    for periodicity, keywords in _TEXT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return ParsedPeriodText(periodicity=periodicity)
    return ParsedPeriodText()
