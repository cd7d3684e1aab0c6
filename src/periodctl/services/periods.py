"""PeriodService: create and list periods for a tenant."""

from __future__ import annotations

from datetime import date

from periodctl.domain.calendar import parse_iso_date
from periodctl.domain.errors import PeriodValidationError
from periodctl.domain.models import PayrollPeriod
from periodctl.domain.naming import parse_period_text, period_type_label
from periodctl.domain.strategies import coerce_periodicity
from periodctl.domain.types import Periodicity, PeriodState
from periodctl.services.base import BaseService
from periodctl.services.detection import DetectionService
from periodctl.services.naming import PeriodNamingService
from periodctl.services.numbering import PeriodNumberingService
from periodctl.services.result import ErrorCode, ServiceResult, failure
from periodctl.services.telemetry import traced


class PeriodService(BaseService):
    """Registry operations on top of detection and naming."""

    @traced
    def create_period(
        self,
        tenant_id: str,
        start: date | str,
        end: date | str,
        periodicity: Periodicity | str | None = None,
        state: PeriodState | str = PeriodState.DRAFT,
    ) -> ServiceResult:
        """Insert a period after detection clears it.

        Refuses exact matches (``EXACT_MATCH``) and overlaps with non-closed
        periods (``CONFLICT``). Numbering failures do not block creation;
        the period is stored without an ordinal and a warning is returned.
        """
        op = "create_period"
        try:
            resolved = coerce_periodicity(periodicity or self._ledger.settings.tenant.periodicity)
            resolved_state = PeriodState(state)
        except (PeriodValidationError, ValueError) as exc:
            return failure(op, ErrorCode.VALIDATION, str(exc))

        detection = DetectionService(self._ledger).detect(
            tenant_id, start, end, periodicity=resolved
        )
        if not detection.ok:
            return detection.model_copy(update={"op": op})

        action = detection.data["action"]
        if action == "continue":
            return failure(
                op,
                ErrorCode.EXACT_MATCH,
                detection.data["message"],
                data={"period": detection.data.get("period")},
            )
        if action == "conflict":
            return failure(
                op,
                ErrorCode.CONFLICT,
                detection.data["message"],
                data={"conflict": detection.data.get("conflict")},
            )

        info = detection.data.get("info", {})
        period = PayrollPeriod(
            tenant_id=tenant_id,
            start_date=parse_iso_date(start),
            end_date=parse_iso_date(end),
            periodicity=resolved,
            state=resolved_state,
            annual_ordinal_number=info.get("ordinal_number"),
            label=info.get("label", ""),
        )
        stored = self._repo.insert(period)

        warnings = list(detection.warnings)
        self._dispatch_event(
            "post_create",
            {
                "tenant_id": tenant_id,
                "period_id": stored.id,
                "start": stored.start_date.isoformat() if stored.start_date else "",
                "end": stored.end_date.isoformat() if stored.end_date else "",
                "periodicity": str(resolved),
                "ordinal_number": stored.annual_ordinal_number,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"period": stored.to_dict(), "info": info},
            warnings=warnings,
        )

    @traced
    def list_periods(
        self,
        tenant_id: str,
        periodicity: Periodicity | str | None = None,
    ) -> ServiceResult:
        op = "list_periods"
        if periodicity is not None:
            try:
                periodicity = coerce_periodicity(periodicity)
            except PeriodValidationError as exc:
                return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        periods = self._repo.list_all(tenant_id, periodicity)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "tenant_id": tenant_id,
                "count": len(periods),
                "items": [p.to_dict() for p in periods],
            },
        )

    @traced
    def describe_period(
        self,
        start: date | str | None = None,
        end: date | str | None = None,
        *,
        tenant_id: str | None = None,
        text: str | None = None,
    ) -> ServiceResult:
        """Label a range (or free text such as ``"1 al 15 de Mayo 2025"``).

        With a tenant the label is semantic and carries the ordinal.
        """
        op = "label"
        if text is not None:
            parsed = parse_period_text(text)
            if parsed.boundary is None:
                if parsed.periodicity is None:
                    msg = f"Unrecognised period text: {text!r}"
                    return failure(op, ErrorCode.VALIDATION, msg)
                return ServiceResult(
                    ok=True,
                    op=op,
                    data={
                        "text": text,
                        "periodicity": str(parsed.periodicity),
                        "type_label": period_type_label(parsed.periodicity),
                    },
                )
            start, end = parsed.boundary.start_date, parsed.boundary.end_date

        # Labelling an existing period must not flag its own ordinal.
        numbering = PeriodNumberingService(self._repo, skip_duplicate_check=True)
        info = PeriodNamingService(numbering).generate_period_info(start, end, tenant_id)
        data = info.model_dump(mode="json")
        if not info.is_valid:
            return failure(op, ErrorCode.VALIDATION, info.warning or "Invalid range", data=data)
        data["type_label"] = period_type_label(info.periodicity or "", info.day_count)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=[info.warning] if info.warning else [],
        )
