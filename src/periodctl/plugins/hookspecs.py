"""Pluggy hook specifications for period lifecycle events."""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("periodctl")


class PeriodctlHookSpec:
    """Hook specifications for the periodctl plugin system."""

    @hookspec
    def post_detect(self, tenant_id: str, action: str, start: str, end: str) -> None:
        """Called after a selected range has been classified."""

    @hookspec
    def post_create(
        self,
        tenant_id: str,
        period_id: int,
        start: str,
        end: str,
        periodicity: str,
        ordinal_number: int | None,
    ) -> None:
        """Called after a period has been inserted."""

    @hookspec
    def post_correct(
        self,
        tenant_id: str,
        periodicity: str,
        corrected_count: int,
        error_count: int,
    ) -> None:
        """Called after an auto-correction run."""

    @hookspec
    def post_verify(
        self,
        tenant_id: str,
        periodicity: str,
        is_valid: bool,
        gaps: list[str],
        overlaps: list[str],
    ) -> None:
        """Called after a gap/overlap verification."""
