"""DetectionService: classify a user-selected date range.

Outcomes, checked in order:

- ``invalid``: the range cannot be parsed or ends before it starts.
- ``continue``: a period with exactly this boundary already exists.
- ``conflict``: a non-closed period intersects the range. Never merged.
- ``create``: nothing stands in the way; label and ordinal are attached.

When the ledger is unreachable detection degrades to ``create`` with
tenant-agnostic info instead of blocking the caller.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel

from periodctl.domain.calendar import parse_iso_date
from periodctl.domain.errors import PeriodValidationError, PersistenceError
from periodctl.domain.models import PayrollPeriod, PeriodInfo
from periodctl.domain.types import CONFLICT_EXCLUDED_STATES, Periodicity
from periodctl.services.base import BaseService
from periodctl.services.naming import PeriodNamingService
from periodctl.services.numbering import PeriodNumberingService
from periodctl.services.result import ErrorCode, ServiceResult, failure
from periodctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from periodctl.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)

DetectionAction = Literal["continue", "conflict", "create", "invalid"]


class DetectionOutcome(BaseModel):
    """Structured result of :meth:`DetectionService.detect`."""

    model_config = {"frozen": True}

    action: DetectionAction
    message: str
    period: PayrollPeriod | None = None
    conflict: PayrollPeriod | None = None
    info: PeriodInfo | None = None
    offline: bool = False


class DetectionService(BaseService):
    """Decides whether a selected range continues, conflicts or creates."""

    def __init__(self, ledger: Ledger) -> None:
        super().__init__(ledger)
        numbering = PeriodNumberingService(
            ledger.periods,
            skip_duplicate_check=ledger.settings.numbering.skip_duplicate_check,
        )
        self._naming = PeriodNamingService(numbering)

    @traced
    def detect(
        self,
        tenant_id: str,
        start: date | str,
        end: date | str,
        *,
        periodicity: Periodicity | str | None = None,
    ) -> ServiceResult:
        op = "detect"
        try:
            start_day = parse_iso_date(start)
            end_day = parse_iso_date(end)
            if end_day < start_day:
                raise PeriodValidationError(
                    f"End date {end_day} precedes start date {start_day}"
                )
        except PeriodValidationError as exc:
            return failure(
                op,
                ErrorCode.VALIDATION,
                str(exc),
                data={"action": "invalid", "message": str(exc)},
            )

        warnings: list[str] = []
        try:
            outcome = self._classify(tenant_id, start_day, end_day, periodicity)
        except PersistenceError as exc:
            logger.warning("Detection degraded to offline mode: %s", exc)
            info = PeriodNamingService().generate_period_info(start_day, end_day)
            outcome = DetectionOutcome(
                action="create",
                message=f"Create period {info.label} (ledger unavailable, not checked)",
                info=info,
                offline=True,
            )
            warnings.append(f"Could not check existing periods: {exc}")

        if outcome.info is not None and outcome.info.warning:
            warnings.append(outcome.info.warning)

        self._dispatch_event(
            "post_detect",
            {
                "tenant_id": tenant_id,
                "action": outcome.action,
                "start": start_day.isoformat(),
                "end": end_day.isoformat(),
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=outcome.model_dump(mode="json", exclude_none=True),
            warnings=warnings,
        )

    def _classify(
        self,
        tenant_id: str,
        start: date,
        end: date,
        periodicity: Periodicity | str | None,
    ) -> DetectionOutcome:
        with trace_span("find_exact"):
            existing = self._repo.find_exact(tenant_id, start, end)
        if existing is not None:
            return DetectionOutcome(
                action="continue",
                message=f"Period {existing.display_name()} already exists; continue with it",
                period=existing,
            )

        with trace_span("find_overlapping"):
            overlapping = self._repo.find_overlapping(
                tenant_id, start, end, CONFLICT_EXCLUDED_STATES
            )
        if overlapping is not None:
            return DetectionOutcome(
                action="conflict",
                message=(
                    f"Range {start}..{end} overlaps {overlapping.state} period "
                    f"{overlapping.display_name()} ({overlapping.range_text()})"
                ),
                conflict=overlapping,
            )

        with trace_span("period_info"):
            info = self._naming.generate_period_info(
                start, end, tenant_id, periodicity=periodicity
            )
        message = f"Create period {info.label}"
        if info.warning:
            message = f"{message} ({info.warning})"
        return DetectionOutcome(action="create", message=message, info=info)


def outcome_from(result: ServiceResult) -> dict[str, Any]:
    """The ``{action, message, period?, conflict?}`` view of a detect result."""
    keys = ("action", "message", "period", "conflict")
    return {key: result.data[key] for key in keys if key in result.data}
