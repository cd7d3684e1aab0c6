"""Defect categories found when validating a period boundary.

The auto-correction gate is a membership test against
:data:`CRITICAL_DEFECTS`. Anything outside that frozenset (notably
``IRREGULAR``) is reported but never rewritten.
"""

from __future__ import annotations

from enum import StrEnum


class DefectCategory(StrEnum):
    """Why a boundary is not a canonical window."""

    IRREGULAR = "irregular"
    END_BEFORE_START = "end_before_start"
    ZERO_LENGTH = "zero_length"
    INVALID_DATES = "invalid_dates"
    CRITICAL_OVERLAP = "critical_overlap"


CRITICAL_DEFECTS: frozenset[DefectCategory] = frozenset(
    {
        DefectCategory.END_BEFORE_START,
        DefectCategory.ZERO_LENGTH,
        DefectCategory.INVALID_DATES,
        DefectCategory.CRITICAL_OVERLAP,
    }
)


def is_critical(defect: DefectCategory | None) -> bool:
    """Whether *defect* is allowed to trigger an automatic rewrite."""
    return defect is not None and defect in CRITICAL_DEFECTS
