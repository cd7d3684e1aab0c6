"""MCP tools: detect_period, next_period, correct_periods, verify_periods.

Each tool has a ``<name>_impl`` function that takes the Ledger explicitly
and can be tested without the mcp package; :func:`register_tools` wraps
them with FastMCP decorators.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal

from periodctl.domain.errors import PersistenceError
from periodctl.domain.types import PUBLIC_PERIODICITIES
from periodctl.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from periodctl.infrastructure.ledger import Ledger

Cadence = Literal["weekly", "biweekly", "monthly"]


def _to_mcp_response(result: ServiceResult, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Envelope for a tool reply; *data* replaces ``result.data`` when given."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data if data is None else data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {"code": result.error.code, "message": result.error.message}
    return response


def _call(op: str, call: Callable[[], ServiceResult]) -> ServiceResult:
    try:
        return call()
    except PersistenceError as exc:
        return failure(op, ErrorCode.PERSISTENCE, str(exc))


def _reject_periodicity(op: str, periodicity: str) -> dict[str, Any] | None:
    if periodicity in PUBLIC_PERIODICITIES:
        return None
    allowed = ", ".join(PUBLIC_PERIODICITIES)
    msg = f"Unsupported periodicity {periodicity!r} (expected one of: {allowed})"
    return _to_mcp_response(failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, msg))


def detect_period_impl(ledger: Ledger, tenant_id: str, start: str, end: str) -> dict[str, Any]:
    """Classify a selected range as continue, conflict, create or invalid."""
    from periodctl.services.detection import DetectionService, outcome_from

    result = _call("detect", lambda: DetectionService(ledger).detect(tenant_id, start, end))
    return _to_mcp_response(result, outcome_from(result) if result.data else None)


def next_period_impl(ledger: Ledger, tenant_id: str, periodicity: str) -> dict[str, Any]:
    from periodctl.services.coordinator import CalculationCoordinator

    op = "next_period"
    rejected = _reject_periodicity(op, periodicity)
    if rejected is not None:
        return rejected
    result = _call(
        op,
        lambda: CalculationCoordinator(ledger).calculate_next_period(periodicity, tenant_id),
    )
    if not result.ok:
        return _to_mcp_response(result)
    return _to_mcp_response(result, {"start": result.data["start"], "end": result.data["end"]})


def correct_periods_impl(ledger: Ledger, tenant_id: str, periodicity: str) -> dict[str, Any]:
    from periodctl.services.integrity import IntegrityService

    op = "correct_periods"
    rejected = _reject_periodicity(op, periodicity)
    if rejected is not None:
        return rejected
    result = _call(
        op,
        lambda: IntegrityService(ledger).auto_correct_corrupt_periods(tenant_id, periodicity),
    )
    keys = ("corrected_count", "errors", "summary")
    return _to_mcp_response(result, {k: result.data[k] for k in keys if k in result.data})


def verify_periods_impl(ledger: Ledger, tenant_id: str, periodicity: str) -> dict[str, Any]:
    from periodctl.services.integrity import IntegrityService

    op = "verify_periods"
    rejected = _reject_periodicity(op, periodicity)
    if rejected is not None:
        return rejected
    result = _call(
        op,
        lambda: IntegrityService(ledger).verify_integrity_after_correction(
            tenant_id, periodicity
        ),
    )
    keys = ("is_valid", "consecutive", "gaps", "overlaps", "period_count", "summary")
    return _to_mcp_response(result, {k: result.data[k] for k in keys if k in result.data})


def register_tools(server: Any, ledger: Ledger) -> None:
    """Register the four period tools on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    def detect_period(tenant_id: str, start: str, end: str) -> dict[str, Any]:
        """Decide whether an ISO date range continues, conflicts with or creates a period."""
        return detect_period_impl(ledger, tenant_id, start, end)

    @server.tool()  # type: ignore[untyped-decorator]
    def next_period(tenant_id: str, periodicity: Cadence) -> dict[str, Any]:
        """Boundary of the period after the tenant's latest open or closed one."""
        return next_period_impl(ledger, tenant_id, periodicity)

    @server.tool()  # type: ignore[untyped-decorator]
    def correct_periods(tenant_id: str, periodicity: Cadence) -> dict[str, Any]:
        """Rewrite critically defective periods in start order."""
        return correct_periods_impl(ledger, tenant_id, periodicity)

    @server.tool()  # type: ignore[untyped-decorator]
    def verify_periods(tenant_id: str, periodicity: Cadence) -> dict[str, Any]:
        """Report gaps and overlaps in the tenant's period sequence."""
        return verify_periods_impl(ledger, tenant_id, periodicity)
