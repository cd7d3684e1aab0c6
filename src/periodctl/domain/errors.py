"""Exception types raised across the engine.

Expected business conditions (conflicts, duplicate ordinals, irregular
periods) are never raised; they travel inside structured results. Only
malformed input, I/O failures and internal defects are exceptions.
"""

from __future__ import annotations


class PeriodValidationError(ValueError):
    """Malformed or impossible date range (unparseable date, start > end)."""


class PersistenceError(RuntimeError):
    """The period repository could not complete a read or write."""


class OrdinalCrossCheckError(AssertionError):
    """Two independent ordinal computations disagreed.

    This is an internal defect (formula drift), never a user-facing error.
    """

    def __init__(self, periodicity: str, primary: int, verification: int, start: str) -> None:
        self.periodicity = periodicity
        self.primary = primary
        self.verification = verification
        self.start = start
        super().__init__(
            f"Ordinal cross-check failed for {periodicity} period starting {start}: "
            f"primary={primary} verification={verification}"
        )
