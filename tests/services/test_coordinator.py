"""Tests for CalculationCoordinator."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

from periodctl.infrastructure.ledger import Ledger
from periodctl.services.coordinator import CalculationCoordinator
from periodctl.services.result import ErrorCode


class TestNextPeriod:
    def test_no_history_bootstraps_first_half(self, ledger: Ledger) -> None:
        result = CalculationCoordinator(ledger).calculate_next_period(
            "biweekly", "acme", today=date(2025, 3, 20)
        )
        assert result.ok
        assert result.op == "next_period"
        assert (result.data["start"], result.data["end"]) == ("2025-03-01", "2025-03-15")
        assert result.data["anchor"] is None
        assert result.data["type_label"] == "Quincenal"

    def test_continues_after_latest_open_period(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="closed")
        latest = seed_period("2025-01-16", "2025-01-31", state="open")
        result = CalculationCoordinator(ledger).calculate_next_period("biweekly", "acme")
        assert (result.data["start"], result.data["end"]) == ("2025-02-01", "2025-02-15")
        assert result.data["anchor"]["id"] == latest.id
        assert result.data["label"] == "1 - 15 Febrero 2025"
        assert result.warnings == []

    def test_drafts_are_not_anchors(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="closed")
        seed_period("2025-01-16", "2025-01-31", state="draft")
        result = CalculationCoordinator(ledger).calculate_next_period("biweekly", "acme")
        assert result.data["start"] == "2025-01-16"

    def test_irregular_anchor_warns_without_mutating(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        anchor = seed_period("2025-01-01", "2025-01-10", state="open")
        result = CalculationCoordinator(ledger).calculate_next_period("biweekly", "acme")
        assert result.ok
        assert result.data["start"] == "2025-01-01"
        assert any("irregular" in w for w in result.warnings)
        stored = ledger.periods.get(anchor.id)
        assert stored is not None
        assert stored.end_date == date(2025, 1, 10)

    def test_corrupt_row_does_not_hijack_the_anchor(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        seed_raw("2025-01-01", "2025-01-15")
        latest = seed_raw("2025-01-16", "2025-01-31")
        seed_raw("2024-06-01", "garbage")
        result = CalculationCoordinator(ledger).calculate_next_period(
            "biweekly", "acme", today=date(2026, 10, 19)
        )
        assert (result.data["start"], result.data["end"]) == ("2025-02-01", "2025-02-15")
        assert result.data["anchor"]["id"] == latest

    def test_monthly_across_year(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        seed_period("2024-12-01", "2024-12-31", periodicity="monthly", state="closed")
        result = CalculationCoordinator(ledger).calculate_next_period("monthly", "acme")
        assert (result.data["start"], result.data["end"]) == ("2025-01-01", "2025-01-31")
        assert result.data["label"] == "Enero 2025"

    def test_cadences_are_independent(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-31", periodicity="monthly", state="closed")
        result = CalculationCoordinator(ledger).calculate_next_period(
            "weekly", "acme", today=date(2025, 1, 1)
        )
        assert (result.data["start"], result.data["end"]) == ("2024-12-30", "2025-01-05")

    def test_unknown_periodicity(self, ledger: Ledger) -> None:
        result = CalculationCoordinator(ledger).calculate_next_period("yearly", "acme")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.UNSUPPORTED_PERIODICITY


class TestCurrentPeriod:
    def test_contains_reference_date(self, ledger: Ledger) -> None:
        result = CalculationCoordinator(ledger).calculate_current_period(
            "monthly", date(2024, 2, 10)
        )
        assert (result.data["start"], result.data["end"]) == ("2024-02-01", "2024-02-29")
        assert result.data["day_count"] == 29
        assert result.data["reference_date"] == "2024-02-10"

    def test_defaults_to_today(self, ledger: Ledger) -> None:
        result = CalculationCoordinator(ledger).calculate_current_period("weekly")
        start = date.fromisoformat(result.data["start"])
        end = date.fromisoformat(result.data["end"])
        assert start <= date.today() <= end
        assert start.weekday() == 0


class TestSuggestPeriod:
    def test_active_period_is_continued(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="closed")
        active = seed_period("2025-01-16", "2025-01-31", state="draft")
        result = CalculationCoordinator(ledger).suggest_period("acme", "biweekly")
        assert result.data["action"] == "continue"
        assert result.data["period"]["id"] == active.id

    def test_suggests_next_when_all_closed(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="closed")
        result = CalculationCoordinator(ledger).suggest_period("acme", "biweekly")
        assert result.data["action"] == "create"
        assert result.data["suggested"]["start"] == "2025-01-16"

    def test_unknown_periodicity(self, ledger: Ledger) -> None:
        result = CalculationCoordinator(ledger).suggest_period("acme", "hourly")
        assert not result.ok
