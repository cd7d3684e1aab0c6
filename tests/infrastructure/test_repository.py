"""Tests for PeriodRepository."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest
from sqlalchemy import text

from periodctl.domain.errors import PersistenceError
from periodctl.domain.types import CONFLICT_EXCLUDED_STATES, Periodicity, PeriodState
from periodctl.infrastructure.ledger import Ledger


class TestLookups:
    def test_find_exact_is_tenant_scoped(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", tenant_id="other")
        mine = seed_period("2025-01-01", "2025-01-15")
        found = ledger.periods.find_exact("acme", date(2025, 1, 1), "2025-01-15")
        assert found is not None
        assert found.id == mine.id
        assert ledger.periods.find_exact("acme", "2025-01-01", "2025-01-16") is None

    def test_find_overlapping_inclusive_bounds(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15")
        assert ledger.periods.find_overlapping("acme", "2025-01-15", "2025-01-31") is not None
        assert ledger.periods.find_overlapping("acme", "2025-01-16", "2025-01-31") is None

    def test_find_overlapping_excludes_states(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="closed")
        repo = ledger.periods
        assert repo.find_overlapping("acme", "2025-01-10", "2025-01-20") is not None
        assert (
            repo.find_overlapping("acme", "2025-01-10", "2025-01-20", CONFLICT_EXCLUDED_STATES)
            is None
        )

    def test_most_recent_non_draft_orders_by_end(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-16", "2025-01-31", state="closed")
        seed_period("2025-01-01", "2025-01-15", state="open")
        seed_period("2025-02-01", "2025-02-15", state="draft")
        seed_period("2025-03-01", "2025-03-31", periodicity="monthly", state="closed")
        anchor = ledger.periods.find_most_recent_non_draft("acme", Periodicity.BIWEEKLY)
        assert anchor is not None
        assert anchor.end_date == date(2025, 1, 31)

    def test_find_active_prefers_latest_start(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-15", state="open")
        seed_period("2025-01-16", "2025-01-31", state="draft")
        seed_period("2025-02-01", "2025-02-15", state="closed")
        active = ledger.periods.find_active("acme", "biweekly")
        assert active is not None
        assert active.state is PeriodState.DRAFT
        assert active.start_date == date(2025, 1, 16)

    def test_list_all_puts_missing_starts_last(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        missing = seed_raw(None, "2025-01-10")
        seed_raw("2025-02-01", "2025-02-15")
        seed_raw("2025-01-01", "2025-01-15")
        periods = ledger.periods.list_all("acme")
        assert [p.start_date for p in periods[:2]] == [date(2025, 1, 1), date(2025, 2, 1)]
        assert periods[-1].id == missing
        assert periods[-1].boundary is None

    def test_list_all_filters_periodicity(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2025-01-01", "2025-01-31", periodicity="monthly")
        seed_period("2025-01-01", "2025-01-15")
        assert len(ledger.periods.list_all("acme")) == 2
        assert len(ledger.periods.list_all("acme", "monthly")) == 1


class TestWrites:
    def test_insert_assigns_id(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        period = seed_period("2025-01-01", "2025-01-15", number=1, label="Quincena 1 del 2025")
        assert period.id is not None
        stored = ledger.periods.get(period.id)
        assert stored == period

    def test_update_boundary(self, ledger: Ledger, seed_raw: Callable[..., int]) -> None:
        period_id = seed_raw("2025-01-15", "2025-01-01")
        ledger.periods.update_boundary(period_id, date(2025, 1, 1), "2025-01-15")
        stored = ledger.periods.get(period_id)
        assert stored is not None
        assert stored.range_text() == "2025-01-01..2025-01-15"

    def test_update_missing_period(self, ledger: Ledger) -> None:
        with pytest.raises(PersistenceError, match="not found"):
            ledger.periods.update_boundary(404, "2025-01-01", "2025-01-15")

    def test_insert_raw_keeps_garbage(self, ledger: Ledger, seed_raw: Callable[..., int]) -> None:
        period_id = seed_raw("31/01/2025", "2025-02-15")
        stored = ledger.periods.get(period_id)
        assert stored is not None
        assert stored.start_date is None
        assert stored.end_date == date(2025, 2, 15)
        with ledger.engine.connect() as conn:
            raw = conn.execute(
                text("SELECT start_date FROM payroll_periods WHERE id = :id"), {"id": period_id}
            ).scalar_one()
        assert raw == "31/01/2025"

    def test_unreadable_enum_is_persistence_error(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        period_id = seed_raw("2025-01-01", "2025-01-15", periodicity="fortnightly")
        with pytest.raises(PersistenceError, match="unreadable"):
            ledger.periods.get(period_id)


class TestOrdinalLookup:
    def test_same_year_only(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        seed_period("2024-01-01", "2024-01-15", number=1)
        repo = ledger.periods
        assert repo.exists_with_ordinal_number("acme", 2024, "biweekly", 1)
        assert not repo.exists_with_ordinal_number("acme", 2025, "biweekly", 1)
        assert not repo.exists_with_ordinal_number("acme", 2024, "monthly", 1)

    def test_weekly_matches_iso_year(
        self, ledger: Ledger, seed_period: Callable[..., Any]
    ) -> None:
        seed_period("2024-12-30", "2025-01-05", periodicity="weekly", number=1)
        repo = ledger.periods
        assert repo.exists_with_ordinal_number("acme", 2025, "weekly", 1)
        assert not repo.exists_with_ordinal_number("acme", 2024, "weekly", 1)

    def test_exclude_id(self, ledger: Ledger, seed_period: Callable[..., Any]) -> None:
        period = seed_period("2025-01-01", "2025-01-15", number=1)
        assert not ledger.periods.exists_with_ordinal_number(
            "acme", 2025, "biweekly", 1, exclude_id=period.id
        )


class TestFailures:
    def test_sql_errors_become_persistence_errors(self, ledger: Ledger) -> None:
        with ledger.engine.begin() as conn:
            conn.execute(text("DROP TABLE payroll_periods"))
        with pytest.raises(PersistenceError, match="list_all failed"):
            ledger.periods.list_all("acme")


class TestMalformedDates:
    def test_garbage_end_is_not_the_latest_anchor(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        seed_raw("2025-01-01", "2025-01-15")
        latest = seed_raw("2025-01-16", "2025-01-31")
        seed_raw("2024-06-01", "garbage")
        found = ledger.periods.find_most_recent_non_draft("acme", "biweekly")
        assert found is not None
        assert found.id == latest

    def test_impossible_day_is_skipped(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        latest = seed_raw("2025-01-16", "2025-01-31")
        seed_raw("2025-02-16", "2025-02-30")
        found = ledger.periods.find_most_recent_non_draft("acme", "biweekly")
        assert found is not None
        assert found.id == latest

    def test_garbage_end_overlaps_nothing(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        seed_raw("2025-01-01", "garbage", state="open")
        seed_raw("2025-01-16", "2025-02-30", state="open")
        assert ledger.periods.find_overlapping("acme", "2025-03-01", "2025-03-15") is None

    def test_valid_row_after_malformed_one_still_overlaps(
        self, ledger: Ledger, seed_raw: Callable[..., int]
    ) -> None:
        seed_raw("2025-03-01", "2025-03-99", state="open")
        real = seed_raw("2025-03-05", "2025-03-20", state="open")
        found = ledger.periods.find_overlapping("acme", "2025-03-10", "2025-03-15")
        assert found is not None
        assert found.id == real
