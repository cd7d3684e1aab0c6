"""Period generation strategies, one per cadence.

Every strategy answers the same four questions for its cadence:

- ``generate_first_period()``: bootstrap boundary for a tenant with no history.
- ``generate_current_period(ref)``: the canonical window containing *ref*.
- ``generate_next_consecutive_period(last_end)``: the window starting the
  day after *last_end*, snapped onto the cadence's canonical grid.
- ``validate_and_correct_period(start, end)``: whether a stored boundary is
  canonical and, if not, the nearest canonical correction.

Strategies are pure: they never touch persistence and never read the
clock unless no reference date is passed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import ClassVar

from periodctl.domain.calendar import (
    last_day_of_month,
    monday_of_week,
    next_day,
    try_parse_iso_date,
)
from periodctl.domain.defects import DefectCategory
from periodctl.domain.errors import PeriodValidationError
from periodctl.domain.models import PeriodBoundary, ValidationResult
from periodctl.domain.types import Periodicity

logger = logging.getLogger(__name__)

FIRST_HALF_LAST_DAY = 15
SECOND_HALF_FIRST_DAY = 16


def _boundary(start: date, end: date) -> PeriodBoundary:
    return PeriodBoundary(start_date=start, end_date=end)


class PeriodStrategy(ABC):
    """Common contract for cadence strategies."""

    periodicity: ClassVar[Periodicity]

    def generate_first_period(self, today: date | None = None) -> PeriodBoundary:
        """Canonical bootstrap boundary when a tenant has no periods yet."""
        return self.generate_current_period(today or date.today())

    @abstractmethod
    def generate_current_period(self, reference_date: date) -> PeriodBoundary:
        """Canonical boundary containing *reference_date*."""

    @abstractmethod
    def canonical_window(self, start: date) -> PeriodBoundary:
        """Nearest canonical window for a period that begins on *start*."""

    def generate_next_consecutive_period(self, last_end_date: date) -> PeriodBoundary:
        """Boundary starting the day after *last_end_date*."""
        return self.canonical_window(next_day(last_end_date))

    def is_canonical(self, start: date, end: date) -> bool:
        window = self.canonical_window(start)
        return window.start_date == start and window.end_date == end

    def validate_and_correct_period(
        self,
        start: date | str | None,
        end: date | str | None,
    ) -> ValidationResult:
        """Classify a boundary and suggest the nearest canonical correction.

        Idempotent: a canonical boundary is always valid with no correction,
        and every suggested correction is itself canonical.
        """
        start_day = try_parse_iso_date(start)
        end_day = try_parse_iso_date(end)

        if start_day is None or end_day is None:
            anchor = start_day or end_day
            return ValidationResult(
                is_valid=False,
                defect=DefectCategory.INVALID_DATES,
                corrected_boundary=self.generate_current_period(anchor) if anchor else None,
                message=f"Missing or invalid dates: {start!s} - {end!s}",
            )

        if end_day < start_day:
            corrected = self.generate_current_period(start_day)
            return ValidationResult(
                is_valid=False,
                defect=DefectCategory.END_BEFORE_START,
                corrected_boundary=corrected,
                message=f"End date {end_day} precedes start date {start_day}; "
                f"suggested {corrected}",
            )

        if end_day == start_day:
            corrected = self.generate_current_period(start_day)
            return ValidationResult(
                is_valid=False,
                defect=DefectCategory.ZERO_LENGTH,
                corrected_boundary=corrected,
                message=f"Zero-length period on {start_day}; suggested {corrected}",
            )

        if self.is_canonical(start_day, end_day):
            return ValidationResult(
                is_valid=True,
                message=f"Valid {self.periodicity} period: {start_day}..{end_day}",
            )

        corrected = self.canonical_window(start_day)
        return ValidationResult(
            is_valid=False,
            defect=DefectCategory.IRREGULAR,
            corrected_boundary=corrected,
            message=f"Irregular {self.periodicity} period {start_day}..{end_day}; "
            f"nearest canonical window is {corrected}",
        )


class BiWeeklyPeriodStrategy(PeriodStrategy):
    """Two periods per month: 1st to 15th and 16th to the last day."""

    periodicity = Periodicity.BIWEEKLY

    @staticmethod
    def first_half(year: int, month: int) -> PeriodBoundary:
        return _boundary(date(year, month, 1), date(year, month, FIRST_HALF_LAST_DAY))

    @staticmethod
    def second_half(year: int, month: int) -> PeriodBoundary:
        return _boundary(
            date(year, month, SECOND_HALF_FIRST_DAY),
            date(year, month, last_day_of_month(year, month)),
        )

    def generate_first_period(self, today: date | None = None) -> PeriodBoundary:
        """First half of the current month, regardless of today's day."""
        ref = today or date.today()
        return self.first_half(ref.year, ref.month)

    def generate_current_period(self, reference_date: date) -> PeriodBoundary:
        return self.canonical_window(reference_date)

    def canonical_window(self, start: date) -> PeriodBoundary:
        if start.day <= FIRST_HALF_LAST_DAY:
            return self.first_half(start.year, start.month)
        return self.second_half(start.year, start.month)

    def generate_next_consecutive_period(self, last_end_date: date) -> PeriodBoundary:
        start = next_day(last_end_date)
        if start.day not in (1, SECOND_HALF_FIRST_DAY):
            logger.warning(
                "Irregular biweekly anchor %s (start day %d); snapping to nearest half",
                last_end_date.isoformat(),
                start.day,
            )
        return self.canonical_window(start)


class MonthlyPeriodStrategy(PeriodStrategy):
    """One period per calendar month."""

    periodicity = Periodicity.MONTHLY

    def generate_current_period(self, reference_date: date) -> PeriodBoundary:
        return self.canonical_window(reference_date)

    def canonical_window(self, start: date) -> PeriodBoundary:
        return _boundary(
            date(start.year, start.month, 1),
            date(start.year, start.month, last_day_of_month(start.year, start.month)),
        )


class WeeklyPeriodStrategy(PeriodStrategy):
    """Seven-day periods.

    The bootstrap and current periods run Monday to Sunday; consecutive
    periods keep the tenant's existing seven-day grid.
    """

    periodicity = Periodicity.WEEKLY

    def generate_current_period(self, reference_date: date) -> PeriodBoundary:
        monday = monday_of_week(reference_date)
        return _boundary(monday, monday + timedelta(days=6))

    def canonical_window(self, start: date) -> PeriodBoundary:
        return _boundary(start, start + timedelta(days=6))


class CustomPeriodStrategy(PeriodStrategy):
    """Fixed-length periods of ``days`` days anchored on the previous end."""

    periodicity = Periodicity.CUSTOM

    def __init__(self, days: int) -> None:
        if days < 2:
            raise PeriodValidationError(f"Custom periods need at least 2 days, got {days}")
        self.days = days

    def generate_current_period(self, reference_date: date) -> PeriodBoundary:
        return self.canonical_window(reference_date)

    def canonical_window(self, start: date) -> PeriodBoundary:
        return _boundary(start, start + timedelta(days=self.days - 1))


STRATEGIES: dict[Periodicity, type[PeriodStrategy]] = {
    Periodicity.WEEKLY: WeeklyPeriodStrategy,
    Periodicity.BIWEEKLY: BiWeeklyPeriodStrategy,
    Periodicity.MONTHLY: MonthlyPeriodStrategy,
}


def coerce_periodicity(value: Periodicity | str) -> Periodicity:
    """Convert *value* to :class:`Periodicity` or raise PeriodValidationError."""
    try:
        return Periodicity(value)
    except ValueError as exc:
        allowed = ", ".join(p.value for p in Periodicity)
        raise PeriodValidationError(
            f"Unsupported periodicity {value!r}; expected one of: {allowed}"
        ) from exc


def create_strategy(
    periodicity: Periodicity | str,
    *,
    custom_days: int | None = None,
) -> PeriodStrategy:
    """Return the strategy for *periodicity*.

    ``custom`` requires *custom_days*; the other cadences ignore it.
    """
    resolved = coerce_periodicity(periodicity)
    if resolved is Periodicity.CUSTOM:
        if custom_days is None:
            raise PeriodValidationError("Custom periodicity requires a day count")
        return CustomPeriodStrategy(custom_days)
    return STRATEGIES[resolved]()


class PeriodStrategyFactory:
    """Factory keyed by :class:`Periodicity`."""

    @staticmethod
    def create(
        periodicity: Periodicity | str,
        custom_days: int | None = None,
    ) -> PeriodStrategy:
        return create_strategy(periodicity, custom_days=custom_days)

    @staticmethod
    def supported() -> tuple[Periodicity, ...]:
        return (*STRATEGIES, Periodicity.CUSTOM)
