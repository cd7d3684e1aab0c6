"""Tenant-aware period naming.

Combines the pure labelling functions with ordinal numbering: when a
tenant is known and numbering succeeds, a period gets a semantic name
("Quincena 14 del 2025"); otherwise it keeps its positional label
("1 - 15 Julio 2025").
"""

from __future__ import annotations

from datetime import date

from periodctl.domain.calendar import inclusive_day_count, try_parse_iso_date
from periodctl.domain.models import PeriodInfo
from periodctl.domain.naming import classify_by_day_count, positional_label, semantic_period_name
from periodctl.domain.types import Periodicity
from periodctl.services.numbering import PeriodNumberingService, ordinal_year


class PeriodNamingService:
    """Builds :class:`PeriodInfo` for a date range.

    Without a numbering service (or without a tenant) only positional
    labels are produced.
    """

    def __init__(self, numbering: PeriodNumberingService | None = None) -> None:
        self._numbering = numbering

    def generate_period_info(
        self,
        start: date | str | None,
        end: date | str | None,
        tenant_id: str | None = None,
        *,
        periodicity: Periodicity | str | None = None,
    ) -> PeriodInfo:
        """Label, apparent cadence and (with a tenant) ordinal for ``start..end``.

        *periodicity* overrides the day-count classification for numbering
        when the caller knows the tenant's cadence. Repository failures
        during numbering propagate as :class:`PersistenceError`.
        """
        start_day = try_parse_iso_date(start)
        end_day = try_parse_iso_date(end)
        raw_start = start.isoformat() if isinstance(start, date) else str(start or "")
        raw_end = end.isoformat() if isinstance(end, date) else str(end or "")

        if start_day is None or end_day is None or end_day < start_day:
            return PeriodInfo(
                label=f"{raw_start} - {raw_end}",
                start_date=raw_start,
                end_date=raw_end,
                is_valid=False,
                warning=f"Invalid period range: {raw_start} - {raw_end}",
            )

        day_count = inclusive_day_count(start_day, end_day)
        apparent = classify_by_day_count(day_count)
        label = positional_label(start_day, end_day)
        ordinal: int | None = None
        semantic: str | None = None
        warning: str | None = None

        if tenant_id and self._numbering is not None:
            numbered_as = Periodicity(periodicity) if periodicity else apparent
            result = self._numbering.calculate_period_number(
                tenant_id, start_day, end_day, numbered_as
            )
            if result.ok and result.number is not None:
                ordinal = result.number
                semantic = semantic_period_name(
                    ordinal, numbered_as, ordinal_year(start_day, numbered_as), label
                )
                label = semantic or label
                warning = result.warning
            elif result.error is not None:
                warning = result.error.message

        return PeriodInfo(
            label=label,
            periodicity=apparent,
            start_date=start_day.isoformat(),
            end_date=end_day.isoformat(),
            day_count=day_count,
            ordinal_number=ordinal,
            semantic_name=semantic,
            warning=warning,
        )
