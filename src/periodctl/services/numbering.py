"""Annual ordinal numbering of payroll periods.

A period's ordinal is its position within the year of its start date:
the month for monthly periods, the half-month count for biweekly periods
and the ISO week for weekly periods. Weekly ordinals count within the ISO
year, so 2024-12-30 opens week 1 of 2025. Every ordinal is derived
twice by independent means. :func:`compute_ordinal` raises
:class:`OrdinalCrossCheckError` on a disagreement; the service logs it and
reports the period as unnumbered instead of failing the caller.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING

from pydantic import BaseModel

from periodctl.domain.calendar import inclusive_day_count, next_day, parse_iso_date
from periodctl.domain.errors import OrdinalCrossCheckError, PeriodValidationError
from periodctl.domain.strategies import BiWeeklyPeriodStrategy, coerce_periodicity
from periodctl.domain.types import Periodicity
from periodctl.services.result import ErrorCode, ServiceError

if TYPE_CHECKING:
    from periodctl.infrastructure.repositories.periods import PeriodRepository

logger = logging.getLogger(__name__)

# Inclusive day-count span considered normal per cadence.
EXPECTED_SPANS: dict[Periodicity, tuple[int, int]] = {
    Periodicity.MONTHLY: (28, 31),
    Periodicity.BIWEEKLY: (14, 16),
    Periodicity.WEEKLY: (7, 7),
}


class NumberingResult(BaseModel):
    """Outcome of an ordinal computation."""

    model_config = {"frozen": True}

    ok: bool
    number: int | None = None
    warning: str | None = None
    error: ServiceError | None = None


# --- Primary and verification formulas ---------------------------------


def _monthly_ordinal(start: date) -> tuple[int, int]:
    return start.month, int(start.strftime("%m"))


def _biweekly_ordinal(start: date) -> tuple[int, int]:
    primary = (start.month - 1) * 2 + (1 if start.day <= 15 else 2)

    # Walk the canonical half-month windows from January 1st.
    strategy = BiWeeklyPeriodStrategy()
    cursor = date(start.year, 1, 1)
    count = 0
    while cursor <= start:
        count += 1
        cursor = next_day(strategy.canonical_window(cursor).end_date)
    return primary, count


def _weekly_ordinal(start: date) -> tuple[int, int]:
    primary = start.isocalendar().week
    # ISO weeks belong to the year of their Thursday.
    thursday = start + timedelta(days=3 - start.weekday())
    verification = (thursday.timetuple().tm_yday - 1) // 7 + 1
    return primary, verification


_FORMULAS = {
    Periodicity.MONTHLY: _monthly_ordinal,
    Periodicity.BIWEEKLY: _biweekly_ordinal,
    Periodicity.WEEKLY: _weekly_ordinal,
}


def compute_ordinal(start: date, periodicity: Periodicity) -> int:
    """Ordinal of a period starting on *start*, cross-checked.

    Raises:
        PeriodValidationError: For cadences without an annual ordinal.
        OrdinalCrossCheckError: If the two derivations disagree.
    """
    formula = _FORMULAS.get(periodicity)
    if formula is None:
        raise PeriodValidationError(f"{periodicity} periods have no annual ordinal")
    primary, verification = formula(start)
    if primary != verification:
        raise OrdinalCrossCheckError(str(periodicity), primary, verification, start.isoformat())
    return primary


def ordinal_year(start: date, periodicity: Periodicity) -> int:
    """Year whose sequence the ordinal of a period starting on *start* belongs to."""
    if periodicity is Periodicity.WEEKLY:
        return start.isocalendar().year
    return start.year


def validate_period_coherence(
    start: date, end: date, periodicity: Periodicity | str
) -> str | None:
    """Non-fatal warning when the range length is atypical for the cadence."""
    span = EXPECTED_SPANS.get(Periodicity(periodicity))
    if span is None:
        return None
    days = inclusive_day_count(start, end)
    low, high = span
    if low <= days <= high:
        return None
    return f"{periodicity} period of {days} days is atypical (expected {low}-{high} days)"


class PeriodNumberingService:
    """Computes ordinals and guards against duplicates for one ledger.

    Args:
        repo: Source of truth for existing ordinals.
        skip_duplicate_check: Bypass the duplicate lookup. Wired from
            ``[numbering] skip_duplicate_check``; never read from the
            environment here.
    """

    def __init__(self, repo: PeriodRepository, *, skip_duplicate_check: bool = False) -> None:
        self._repo = repo
        self._skip_duplicate_check = skip_duplicate_check

    def calculate_period_number(
        self,
        tenant_id: str,
        start: date | str,
        end: date | str,
        periodicity: Periodicity | str,
    ) -> NumberingResult:
        """Ordinal for ``start..end`` plus an optional coherence warning.

        Duplicate ordinals fail with ``DUPLICATE_ORDINAL`` and a cross-check
        mismatch with ``INTERNAL``. Repository failures propagate as
        :class:`PersistenceError`.
        """
        try:
            start_day = parse_iso_date(start)
            end_day = parse_iso_date(end)
        except PeriodValidationError as exc:
            return NumberingResult(
                ok=False, error=ServiceError(code=ErrorCode.VALIDATION, message=str(exc))
            )
        if end_day < start_day:
            return NumberingResult(
                ok=False,
                error=ServiceError(
                    code=ErrorCode.VALIDATION,
                    message=f"End date {end_day} precedes start date {start_day}",
                ),
            )

        try:
            resolved = coerce_periodicity(periodicity)
            number = compute_ordinal(start_day, resolved)
        except PeriodValidationError as exc:
            return NumberingResult(
                ok=False,
                error=ServiceError(code=ErrorCode.UNSUPPORTED_PERIODICITY, message=str(exc)),
            )
        except OrdinalCrossCheckError as exc:
            logger.error("%s", exc)
            return NumberingResult(
                ok=False,
                error=ServiceError(
                    code=ErrorCode.INTERNAL,
                    message="Period number could not be verified; left unnumbered",
                    detail={"primary": exc.primary, "verification": exc.verification},
                ),
            )

        year = ordinal_year(start_day, resolved)
        if self._skip_duplicate_check:
            logger.debug("Duplicate ordinal check skipped for %s #%d", resolved, number)
        elif self.check_duplicate_number(tenant_id, year, resolved, number):
            logger.warning(
                "Duplicate %s ordinal #%d for %s in %d", resolved, number, tenant_id, year
            )
            return NumberingResult(
                ok=False,
                error=ServiceError(
                    code=ErrorCode.DUPLICATE_ORDINAL,
                    message=f"A {resolved} period #{number} already exists for {year}",
                    detail={"number": number, "year": year, "periodicity": str(resolved)},
                ),
            )

        return NumberingResult(
            ok=True,
            number=number,
            warning=validate_period_coherence(start_day, end_day, resolved),
        )

    def check_duplicate_number(
        self,
        tenant_id: str,
        year: int,
        periodicity: Periodicity | str,
        number: int,
    ) -> bool:
        return self._repo.exists_with_ordinal_number(tenant_id, year, periodicity, number)
