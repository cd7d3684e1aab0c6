"""Built-in audit plugin.

Writes one structured log line per lifecycle event to the
``periodctl.audit`` logger so every detection, insert and repair leaves a
trace, independent of any installed third-party plugin.
"""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("periodctl")


class AuditPlugin:
    """Logs lifecycle events through structlog."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("periodctl.audit")

    @hookimpl
    def post_detect(self, tenant_id: str, action: str, start: str, end: str) -> None:
        self._log.info("period.detected", tenant_id=tenant_id, action=action, start=start, end=end)

    @hookimpl
    def post_create(
        self,
        tenant_id: str,
        period_id: int,
        start: str,
        end: str,
        periodicity: str,
        ordinal_number: int | None,
    ) -> None:
        self._log.info(
            "period.created",
            tenant_id=tenant_id,
            period_id=period_id,
            start=start,
            end=end,
            periodicity=periodicity,
            ordinal_number=ordinal_number,
        )

    @hookimpl
    def post_correct(
        self,
        tenant_id: str,
        periodicity: str,
        corrected_count: int,
        error_count: int,
    ) -> None:
        self._log.info(
            "periods.corrected",
            tenant_id=tenant_id,
            periodicity=periodicity,
            corrected_count=corrected_count,
            error_count=error_count,
        )

    @hookimpl
    def post_verify(
        self,
        tenant_id: str,
        periodicity: str,
        is_valid: bool,
        gaps: list[str],
        overlaps: list[str],
    ) -> None:
        log = self._log.info if is_valid else self._log.warning
        log(
            "periods.verified",
            tenant_id=tenant_id,
            periodicity=periodicity,
            is_valid=is_valid,
            gaps=len(gaps),
            overlaps=len(overlaps),
        )
