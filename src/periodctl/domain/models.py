"""Value objects and records for payroll periods.

All models are frozen pydantic models so they can cross the service
boundary (``ServiceResult.data``) via ``model_dump(mode="json")``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

from periodctl.domain.calendar import inclusive_day_count
from periodctl.domain.defects import DefectCategory, is_critical
from periodctl.domain.types import Periodicity, PeriodState


class PeriodBoundary(BaseModel):
    """Immutable ``start..end`` date range produced by strategies."""

    model_config = {"frozen": True}

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.end_date < self.start_date:
            msg = f"end_date {self.end_date} precedes start_date {self.start_date}"
            raise ValueError(msg)
        return self

    @property
    def day_count(self) -> int:
        return inclusive_day_count(self.start_date, self.end_date)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start_date.isoformat(), "end": self.end_date.isoformat()}

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()}..{self.end_date.isoformat()}"


class PayrollPeriod(BaseModel):
    """A persisted payroll period.

    ``start_date`` / ``end_date`` are optional only so that corrupt stored
    rows can be loaded, reported and repaired; new periods always carry both.
    """

    model_config = {"frozen": True}

    id: int | None = None
    tenant_id: str
    start_date: date | None
    end_date: date | None
    periodicity: Periodicity
    state: PeriodState = PeriodState.DRAFT
    annual_ordinal_number: int | None = None
    label: str = ""

    @property
    def boundary(self) -> PeriodBoundary | None:
        """The boundary, or None when the stored dates are unusable."""
        if self.start_date is None or self.end_date is None:
            return None
        if self.end_date < self.start_date:
            return None
        return PeriodBoundary(start_date=self.start_date, end_date=self.end_date)

    def range_text(self) -> str:
        start = self.start_date.isoformat() if self.start_date else "?"
        end = self.end_date.isoformat() if self.end_date else "?"
        return f"{start}..{end}"

    def display_name(self) -> str:
        return self.label or self.range_text()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ValidationResult(BaseModel):
    """Outcome of ``validate_and_correct_period``."""

    model_config = {"frozen": True}

    is_valid: bool
    message: str
    corrected_boundary: PeriodBoundary | None = None
    defect: DefectCategory | None = None

    @property
    def is_critical(self) -> bool:
        return is_critical(self.defect)


class PeriodInfo(BaseModel):
    """Display information derived from a date range."""

    model_config = {"frozen": True}

    label: str
    periodicity: Periodicity | None = None
    start_date: str
    end_date: str
    day_count: int = 0
    ordinal_number: int | None = None
    semantic_name: str | None = None
    is_valid: bool = True
    warning: str | None = None


class IntegrityReport(BaseModel):
    """Result of walking a tenant's period sequence for gaps and overlaps."""

    model_config = {"frozen": True}

    gaps: list[str] = Field(default_factory=list)
    overlaps: list[str] = Field(default_factory=list)
    period_count: int = 0
    summary: str = ""

    @property
    def is_valid(self) -> bool:
        return not self.gaps and not self.overlaps

    @property
    def consecutive(self) -> bool:
        return not self.gaps

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "consecutive": self.consecutive,
            "gaps": list(self.gaps),
            "overlaps": list(self.overlaps),
            "period_count": self.period_count,
            "summary": self.summary,
        }
