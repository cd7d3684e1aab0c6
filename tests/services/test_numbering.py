"""Tests for annual ordinal numbering."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from periodctl.domain.errors import OrdinalCrossCheckError, PeriodValidationError
from periodctl.domain.types import Periodicity
from periodctl.infrastructure.ledger import Ledger
from periodctl.services import numbering
from periodctl.services.numbering import (
    PeriodNumberingService,
    compute_ordinal,
    ordinal_year,
    validate_period_coherence,
)
from periodctl.services.result import ErrorCode


class TestComputeOrdinal:
    @pytest.mark.parametrize(
        ("start", "expected"),
        [
            ("2025-01-01", 1),
            ("2025-01-16", 2),
            ("2025-07-01", 13),
            ("2025-09-16", 18),
            ("2025-12-16", 24),
            ("2024-02-16", 4),
        ],
    )
    def test_biweekly(self, start: str, expected: int) -> None:
        assert compute_ordinal(date.fromisoformat(start), Periodicity.BIWEEKLY) == expected

    def test_monthly(self) -> None:
        assert compute_ordinal(date(2025, 3, 1), Periodicity.MONTHLY) == 3

    @pytest.mark.parametrize(
        ("start", "expected"),
        [("2025-01-06", 2), ("2024-12-30", 1), ("2025-01-05", 1), ("2026-12-28", 53)],
    )
    def test_weekly_uses_iso_weeks(self, start: str, expected: int) -> None:
        assert compute_ordinal(date.fromisoformat(start), Periodicity.WEEKLY) == expected

    def test_custom_has_no_ordinal(self) -> None:
        with pytest.raises(PeriodValidationError):
            compute_ordinal(date(2025, 1, 1), Periodicity.CUSTOM)

    def test_disagreeing_derivations_raise(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(numbering._FORMULAS, Periodicity.MONTHLY, lambda start: (3, 4))
        with pytest.raises(OrdinalCrossCheckError, match="monthly"):
            compute_ordinal(date(2025, 3, 1), Periodicity.MONTHLY)


class TestCoherence:
    def test_typical_ranges_have_no_warning(self) -> None:
        assert validate_period_coherence(date(2025, 1, 1), date(2025, 1, 15), "biweekly") is None
        assert validate_period_coherence(date(2025, 2, 1), date(2025, 2, 28), "monthly") is None

    def test_short_february_half_warns(self) -> None:
        warning = validate_period_coherence(date(2025, 2, 16), date(2025, 2, 28), "biweekly")
        assert warning == "biweekly period of 13 days is atypical (expected 14-16 days)"

    def test_eight_day_week_warns(self) -> None:
        warning = validate_period_coherence(date(2025, 1, 6), date(2025, 1, 13), "weekly")
        assert warning is not None
        assert "8 days" in warning

    def test_custom_is_never_atypical(self) -> None:
        assert validate_period_coherence(date(2025, 1, 1), date(2025, 1, 2), "custom") is None


class TestPeriodNumberingService:
    def test_number_with_no_history(self, ledger: Ledger) -> None:
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-01-01", "2025-01-15", "biweekly"
        )
        assert result.ok
        assert result.number == 1
        assert result.warning is None

    def test_coherence_warning_does_not_fail(self, ledger: Ledger) -> None:
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-02-16", "2025-02-28", "biweekly"
        )
        assert result.ok
        assert result.number == 4
        assert result.warning is not None

    def test_reversed_range(self, ledger: Ledger) -> None:
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-01-15", "2025-01-01", "biweekly"
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.VALIDATION

    def test_unparseable_date(self, ledger: Ledger) -> None:
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-13-01", "2025-01-15", "biweekly"
        )
        assert result.error is not None
        assert result.error.code == ErrorCode.VALIDATION

    def test_custom_is_unsupported(self, ledger: Ledger) -> None:
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-01-01", "2025-01-10", "custom"
        )
        assert result.error is not None
        assert result.error.code == ErrorCode.UNSUPPORTED_PERIODICITY

    def test_duplicate_ordinal(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        seed_period("2025-01-01", "2025-01-15", number=1)
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2025-01-02", "2025-01-14", "biweekly"
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.DUPLICATE_ORDINAL
        assert result.error.message == "A biweekly period #1 already exists for 2025"
        assert result.error.detail == {"number": 1, "year": 2025, "periodicity": "biweekly"}

    def test_duplicate_check_is_scoped(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", number=1)
        svc = PeriodNumberingService(ledger.periods)
        assert svc.calculate_period_number("other", "2025-01-01", "2025-01-15", "biweekly").ok
        assert svc.calculate_period_number("acme", "2026-01-01", "2026-01-15", "biweekly").ok
        assert svc.calculate_period_number("acme", "2025-01-01", "2025-01-31", "monthly").ok

    def test_skip_duplicate_check(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        seed_period("2025-01-01", "2025-01-15", number=1)
        svc = PeriodNumberingService(ledger.periods, skip_duplicate_check=True)
        result = svc.calculate_period_number("acme", "2025-01-01", "2025-01-15", "biweekly")
        assert result.ok
        assert result.number == 1

    def test_check_duplicate_number(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-03-01", "2025-03-31", periodicity="monthly", number=3)
        svc = PeriodNumberingService(ledger.periods)
        assert svc.check_duplicate_number("acme", 2025, "monthly", 3)
        assert not svc.check_duplicate_number("acme", 2025, "monthly", 4)

    def test_cross_check_mismatch_is_logged_not_raised(
        self, ledger: Ledger, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setitem(numbering._FORMULAS, Periodicity.MONTHLY, lambda start: (3, 4))
        svc = PeriodNumberingService(ledger.periods)
        with caplog.at_level(logging.ERROR, logger="periodctl.services.numbering"):
            result = svc.calculate_period_number("acme", "2025-03-01", "2025-03-31", "monthly")
        assert not result.ok
        assert result.number is None
        assert result.error is not None
        assert result.error.code == ErrorCode.INTERNAL
        assert result.error.detail == {"primary": 3, "verification": 4}
        assert any("cross-check failed" in r.getMessage() for r in caplog.records)


class TestWeeklyOrdinalYear:
    def test_ordinal_year_follows_iso_weeks(self) -> None:
        assert ordinal_year(date(2024, 12, 30), Periodicity.WEEKLY) == 2025
        assert ordinal_year(date(2024, 12, 30), Periodicity.BIWEEKLY) == 2024
        assert ordinal_year(date(2027, 1, 1), Periodicity.WEEKLY) == 2026

    def test_week_one_across_new_year_is_not_a_duplicate(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2024-01-01", "2024-01-07", periodicity="weekly", number=1)
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2024-12-30", "2025-01-05", "weekly"
        )
        assert result.ok
        assert result.number == 1

    def test_duplicate_week_in_same_iso_year(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2024-12-30", "2025-01-05", periodicity="weekly", number=1)
        result = PeriodNumberingService(ledger.periods).calculate_period_number(
            "acme", "2024-12-30", "2025-01-05", "weekly"
        )
        assert result.error is not None
        assert result.error.code == ErrorCode.DUPLICATE_ORDINAL
        assert result.error.message == "A weekly period #1 already exists for 2025"
