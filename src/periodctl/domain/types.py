"""Periodicity and period state enums.

``Periodicity`` is the closed cadence enum used by strategies, numbering
and persistence. ``PeriodState`` is owned by external collaborators; the
engine only reads it (conflict detection, next-period anchoring).
"""

from __future__ import annotations

from enum import StrEnum


class Periodicity(StrEnum):
    """Recurrence cadence of payroll periods."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class PeriodState(StrEnum):
    """Business state of a persisted period."""

    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


# Cadences accepted on the CLI and MCP surfaces.
PUBLIC_PERIODICITIES: tuple[str, ...] = (
    str(Periodicity.WEEKLY),
    str(Periodicity.BIWEEKLY),
    str(Periodicity.MONTHLY),
)

# States that can still collide with a newly selected range.
CONFLICT_EXCLUDED_STATES: frozenset[str] = frozenset({str(PeriodState.CLOSED)})
