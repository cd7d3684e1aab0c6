"""IntegrityService: analyze, repair and verify a tenant's period sequence.

Repair is gated by a closed whitelist of critical defects. Irregular but
well-formed periods are reported and left alone; only boundaries that are
impossible (reversed, zero-length, unparseable) or that collide with the
previous period are rewritten. Runs are resumable rather than atomic:
each boundary update is its own transaction and failures are collected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from periodctl.domain.calendar import inclusive_day_count, next_day
from periodctl.domain.defects import DefectCategory, is_critical
from periodctl.domain.errors import PeriodValidationError, PersistenceError
from periodctl.domain.models import IntegrityReport, PayrollPeriod, PeriodBoundary
from periodctl.domain.strategies import PeriodStrategy, coerce_periodicity, create_strategy
from periodctl.domain.types import Periodicity
from periodctl.services.base import BaseService
from periodctl.services.result import ErrorCode, ServiceError, ServiceResult, failure
from periodctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Assessment:
    defect: DefectCategory
    reason: str
    suggested: PeriodBoundary | None

    @property
    def critical(self) -> bool:
        return is_critical(self.defect)


def _assess(
    period: PayrollPeriod,
    strategy: PeriodStrategy,
    stored_end: date | None,
    anchor_end: date | None,
) -> _Assessment | None:
    """Classify one period against its strategy and its predecessor.

    *stored_end* is the predecessor's end as persisted and alone decides
    ``critical_overlap``. *anchor_end* is where the sequence continues once
    earlier corrections are applied; it only shapes suggested boundaries.

    Returns None for a canonical period that does not collide with the
    previous one.
    """
    result = strategy.validate_and_correct_period(period.start_date, period.end_date)
    if result.is_valid or result.defect is None:
        return None

    defect = result.defect
    suggested = result.corrected_boundary
    reason = result.message

    if defect is DefectCategory.INVALID_DATES and suggested is None and anchor_end:
        suggested = strategy.generate_next_consecutive_period(anchor_end)
        reason = f"{reason}; rebuilt after previous period ending {anchor_end}"
    elif (
        defect is DefectCategory.IRREGULAR
        and stored_end is not None
        and period.start_date is not None
        and period.start_date <= stored_end
    ):
        defect = DefectCategory.CRITICAL_OVERLAP
        suggested = strategy.generate_next_consecutive_period(anchor_end or stored_end)
        reason = (
            f"Irregular period starts on {period.start_date}, on or before the "
            f"previous period's end {stored_end}"
        )
    elif (
        is_critical(defect)
        and anchor_end is not None
        and suggested is not None
        and suggested.start_date <= anchor_end
    ):
        suggested = strategy.generate_next_consecutive_period(anchor_end)
    return _Assessment(defect=defect, reason=reason, suggested=suggested)


def _stored_end(period: PayrollPeriod, fallback: date | None) -> date | None:
    """Latest persisted end so far; unusable dates leave *fallback* as is."""
    boundary = period.boundary
    if boundary is None:
        return fallback
    if fallback is None:
        return boundary.end_date
    return max(boundary.end_date, fallback)


def _end_after(period: PayrollPeriod, assessment: _Assessment | None) -> date | None:
    """End date the sequence continues from once *period* is handled."""
    if assessment is not None and assessment.critical and assessment.suggested is not None:
        return assessment.suggested.end_date
    if period.boundary is not None:
        return period.boundary.end_date
    return None


class IntegrityService(BaseService):
    """Whitelist-gated correction and gap/overlap verification."""

    def _strategy(self, periodicity: Periodicity | str) -> PeriodStrategy:
        return create_strategy(
            periodicity, custom_days=self._ledger.settings.periods.custom_days
        )

    @traced
    def analyze_incorrect_periods(
        self,
        tenant_id: str,
        periodicity: Periodicity | str | None = None,
    ) -> ServiceResult:
        """Read-only report of every non-canonical period.

        Each period is validated with its own cadence's strategy, so a
        tenant holding several cadences is analyzed per cadence.
        """
        op = "analyze_periods"
        if periodicity is not None:
            try:
                periodicity = coerce_periodicity(periodicity)
            except PeriodValidationError as exc:
                return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        with trace_span("list_periods"):
            periods = self._repo.list_all(tenant_id, periodicity)

        details: list[dict[str, Any]] = []
        warnings: list[str] = []
        strategies: dict[Periodicity, PeriodStrategy | None] = {}
        stored_end: dict[Periodicity, date | None] = {}
        anchor_end: dict[Periodicity, date | None] = {}

        for period in periods:
            cadence = period.periodicity
            if cadence not in strategies:
                try:
                    strategies[cadence] = self._strategy(cadence)
                except PeriodValidationError as exc:
                    strategies[cadence] = None
                    warnings.append(f"Skipping {cadence} periods: {exc}")
            strategy = strategies[cadence]
            if strategy is None:
                continue

            assessment = _assess(
                period, strategy, stored_end.get(cadence), anchor_end.get(cadence)
            )
            stored_end[cadence] = _stored_end(period, stored_end.get(cadence))
            anchor_end[cadence] = _end_after(period, assessment) or anchor_end.get(cadence)
            if assessment is None:
                continue
            details.append(
                {
                    "id": period.id,
                    "label": period.display_name(),
                    "periodicity": str(cadence),
                    "current": period.range_text(),
                    "suggested": str(assessment.suggested) if assessment.suggested else None,
                    "defect": str(assessment.defect),
                    "reason": assessment.reason,
                    "critical": assessment.critical,
                }
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "tenant_id": tenant_id,
                "total": len(periods),
                "incorrect": len(details),
                "details": details,
            },
            warnings=warnings,
        )

    @traced
    def auto_correct_corrupt_periods(
        self,
        tenant_id: str,
        periodicity: Periodicity | str,
    ) -> ServiceResult:
        """Rewrite the boundaries of critically defective periods only.

        Periods are visited in ascending start order. Overlaps are judged
        against the previous period as stored, so a correction never turns
        its neighbour critical; each correction only anchors the suggested
        boundary of the next one. Persistence failures are
        collected per period and the run continues.
        """
        op = "correct_periods"
        try:
            resolved = coerce_periodicity(periodicity)
            strategy = self._strategy(resolved)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        with trace_span("list_periods"):
            periods = self._repo.list_all(tenant_id, resolved)

        corrected: list[dict[str, Any]] = []
        skipped: list[dict[str, Any]] = []
        errors: list[str] = []
        error_codes: set[ErrorCode] = set()
        stored_end: date | None = None
        anchor_end: date | None = None

        for period in periods:
            assessment = _assess(period, strategy, stored_end, anchor_end)
            stored_end = _stored_end(period, stored_end)
            if assessment is None:
                anchor_end = _end_after(period, None) or anchor_end
                continue

            if not assessment.critical:
                skipped.append(
                    {
                        "id": period.id,
                        "label": period.display_name(),
                        "defect": str(assessment.defect),
                        "reason": assessment.reason,
                    }
                )
                anchor_end = _end_after(period, None) or anchor_end
                continue

            if assessment.suggested is None or period.id is None:
                errors.append(
                    f"Period {period.id} ({period.range_text()}): no previous period "
                    "to anchor a correction"
                )
                error_codes.add(ErrorCode.NO_ANCHOR)
                continue

            target = assessment.suggested
            try:
                with trace_span("update_boundary"):
                    self._repo.update_boundary(period.id, target.start_date, target.end_date)
            except PersistenceError as exc:
                errors.append(f"Period {period.id} ({period.range_text()}): {exc}")
                error_codes.add(ErrorCode.PERSISTENCE)
                anchor_end = _end_after(period, None) or anchor_end
                continue

            logger.info(
                "Corrected period %s from %s to %s (%s)",
                period.id,
                period.range_text(),
                target,
                assessment.defect,
            )
            corrected.append(
                {
                    "id": period.id,
                    "label": period.display_name(),
                    "from": period.range_text(),
                    "to": str(target),
                    "defect": str(assessment.defect),
                }
            )
            anchor_end = target.end_date

        summary = (
            f"Corrected {len(corrected)} of {len(periods)} {resolved} periods; "
            f"{len(skipped)} irregular left untouched; {len(errors)} errors"
        )
        data = {
            "tenant_id": tenant_id,
            "periodicity": str(resolved),
            "corrected_count": len(corrected),
            "corrected": corrected,
            "skipped": skipped,
            "errors": errors,
            "summary": summary,
        }
        warnings = list(errors)
        self._dispatch_event(
            "post_correct",
            {
                "tenant_id": tenant_id,
                "periodicity": str(resolved),
                "corrected_count": len(corrected),
                "error_count": len(errors),
            },
            warnings,
        )

        error = None
        if errors:
            code = ErrorCode.NO_ANCHOR
            if ErrorCode.PERSISTENCE in error_codes:
                code = ErrorCode.PERSISTENCE
            error = ServiceError(
                code=code,
                message=f"{len(errors)} period(s) could not be corrected",
                detail={"errors": errors},
            )
        return ServiceResult(ok=not errors, op=op, data=data, warnings=warnings, error=error)

    @traced
    def verify_integrity_after_correction(
        self,
        tenant_id: str,
        periodicity: Periodicity | str,
    ) -> ServiceResult:
        """Walk the sequence and report gaps and overlaps.

        ``end + 1 day`` must equal the next start: later is a gap, earlier
        is an overlap. Periods with unusable dates are reported as gaps.
        """
        op = "verify_periods"
        try:
            resolved = coerce_periodicity(periodicity)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))

        with trace_span("list_periods"):
            periods = self._repo.list_all(tenant_id, resolved)
        report = build_integrity_report(periods)

        warnings: list[str] = []
        self._dispatch_event(
            "post_verify",
            {
                "tenant_id": tenant_id,
                "periodicity": str(resolved),
                "is_valid": report.is_valid,
                "gaps": list(report.gaps),
                "overlaps": list(report.overlaps),
            },
            warnings,
        )

        data = {"tenant_id": tenant_id, "periodicity": str(resolved), **report.to_dict()}
        if report.is_valid:
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
        return failure(
            op,
            ErrorCode.INTEGRITY_VIOLATION,
            report.summary,
            data=data,
            warnings=warnings,
        )

    @traced
    def execute_integral_correction(
        self,
        tenant_id: str,
        periodicity: Periodicity | str,
    ) -> ServiceResult:
        """Analyze, correct and verify in one run.

        ``ok`` only when correction raised no errors and the resulting
        sequence verifies. Violations are reported, never retried.
        """
        op = "repair_periods"
        analysis = self.analyze_incorrect_periods(tenant_id, periodicity)
        if not analysis.ok:
            return analysis.model_copy(update={"op": op})
        correction = self.auto_correct_corrupt_periods(tenant_id, periodicity)
        verification = self.verify_integrity_after_correction(tenant_id, periodicity)

        summary = (
            f"Analyzed {analysis.data['total']} periods "
            f"({analysis.data['incorrect']} incorrect). "
            f"{correction.data.get('summary', '')}. "
            f"{verification.data.get('summary', '')}"
        )
        data = {
            "tenant_id": tenant_id,
            "periodicity": str(periodicity),
            "analysis": {
                "total": analysis.data["total"],
                "incorrect": analysis.data["incorrect"],
            },
            "correction": correction.data,
            "verification": {
                key: verification.data[key]
                for key in ("is_valid", "consecutive", "gaps", "overlaps", "period_count")
                if key in verification.data
            },
            "summary": summary,
        }
        warnings = [*analysis.warnings, *correction.warnings, *verification.warnings]

        error = correction.error or verification.error
        ok = correction.ok and verification.ok
        return ServiceResult(ok=ok, op=op, data=data, warnings=warnings, error=error)


def build_integrity_report(periods: list[PayrollPeriod]) -> IntegrityReport:
    """Gap/overlap report for periods already sorted ascending by start."""
    gaps: list[str] = []
    overlaps: list[str] = []
    previous: PayrollPeriod | None = None

    for period in periods:
        boundary = period.boundary
        if boundary is None:
            gaps.append(
                f"Period {period.display_name()} has unusable dates ({period.range_text()})"
            )
            continue
        if previous is not None and previous.end_date is not None:
            expected = next_day(previous.end_date)
            if boundary.start_date > expected:
                missing_end = boundary.start_date - timedelta(days=1)
                gaps.append(
                    f"Gap of {inclusive_day_count(expected, missing_end)} days between "
                    f"{previous.display_name()} and {period.display_name()} "
                    f"({expected}..{missing_end})"
                )
            elif boundary.start_date < expected:
                overlap_end = min(previous.end_date, boundary.end_date)
                overlaps.append(
                    f"Overlap between {previous.display_name()} and {period.display_name()} "
                    f"({boundary.start_date}..{overlap_end})"
                )
        previous_end = previous.end_date if previous is not None else None
        if previous_end is None or boundary.end_date >= previous_end:
            previous = period

    count = len(periods)
    if not gaps and not overlaps:
        summary = f"{count} periods verified: consecutive with no gaps or overlaps"
    else:
        summary = f"{len(gaps)} gaps and {len(overlaps)} overlaps found across {count} periods"
    return IntegrityReport(gaps=gaps, overlaps=overlaps, period_count=count, summary=summary)
