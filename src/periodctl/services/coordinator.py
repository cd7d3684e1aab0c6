"""CalculationCoordinator: next, current and suggested periods.

Read-only: nothing here mutates the ledger, even when the anchoring
period is irregular (the irregularity is reported as a warning).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from periodctl.domain.errors import PeriodValidationError
from periodctl.domain.models import PayrollPeriod, PeriodBoundary
from periodctl.domain.naming import period_type_label, positional_label
from periodctl.domain.strategies import PeriodStrategy, coerce_periodicity, create_strategy
from periodctl.domain.types import Periodicity
from periodctl.services.base import BaseService
from periodctl.services.result import ErrorCode, ServiceResult, failure
from periodctl.services.telemetry import trace_span, traced


def _boundary_payload(boundary: PeriodBoundary, periodicity: Periodicity) -> dict[str, Any]:
    return {
        **boundary.to_dict(),
        "day_count": boundary.day_count,
        "periodicity": str(periodicity),
        "type_label": period_type_label(periodicity, boundary.day_count),
        "label": positional_label(boundary.start_date, boundary.end_date),
    }


class CalculationCoordinator(BaseService):
    """Chooses the right strategy and anchors it on persisted history."""

    def _strategy(self, periodicity: Periodicity | str) -> tuple[Periodicity, PeriodStrategy]:
        resolved = coerce_periodicity(periodicity)
        custom_days = self._ledger.settings.periods.custom_days
        return resolved, create_strategy(resolved, custom_days=custom_days)

    @traced
    def calculate_next_period(
        self,
        periodicity: Periodicity | str,
        tenant_id: str,
        *,
        today: date | None = None,
    ) -> ServiceResult:
        """Boundary of the period following the tenant's latest non-draft period.

        With no history the strategy's bootstrap period is returned.
        """
        op = "next_period"
        try:
            resolved, strategy = self._strategy(periodicity)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        warnings: list[str] = []
        with trace_span("find_anchor"):
            anchor = self._repo.find_most_recent_non_draft(tenant_id, resolved)

        if anchor is None or anchor.end_date is None:
            boundary = strategy.generate_first_period(today)
        else:
            check = strategy.validate_and_correct_period(anchor.start_date, anchor.end_date)
            if not check.is_valid:
                warnings.append(
                    f"Last period {anchor.display_name()} is irregular: {check.message}"
                )
            boundary = strategy.generate_next_consecutive_period(anchor.end_date)

        data = _boundary_payload(boundary, resolved)
        data["tenant_id"] = tenant_id
        data["anchor"] = _anchor_payload(anchor)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def calculate_current_period(
        self,
        periodicity: Periodicity | str,
        reference_date: date | None = None,
    ) -> ServiceResult:
        """Canonical period containing *reference_date* (default: today)."""
        op = "current_period"
        try:
            resolved, strategy = self._strategy(periodicity)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        reference = reference_date or date.today()
        data = _boundary_payload(strategy.generate_current_period(reference), resolved)
        data["reference_date"] = reference.isoformat()
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def suggest_period(
        self,
        tenant_id: str,
        periodicity: Periodicity | str,
        *,
        today: date | None = None,
    ) -> ServiceResult:
        """What the tenant should work on now.

        An existing draft or open period means ``continue``; otherwise the
        next period is suggested with ``create``.
        """
        op = "suggest_period"
        try:
            resolved = coerce_periodicity(periodicity)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        active = self._repo.find_active(tenant_id, resolved)
        if active is not None:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "action": "continue",
                    "message": f"Continue with active period {active.display_name()}",
                    "period": active.to_dict(),
                },
            )

        nxt = self.calculate_next_period(resolved, tenant_id, today=today)
        if not nxt.ok:
            return nxt.model_copy(update={"op": op})
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "action": "create",
                "message": f"Create period {nxt.data['label']}",
                "suggested": nxt.data,
            },
            warnings=list(nxt.warnings),
        )


def _anchor_payload(anchor: PayrollPeriod | None) -> dict[str, Any] | None:
    if anchor is None:
        return None
    return {"id": anchor.id, "range": anchor.range_text(), "label": anchor.label}
