"""Shared pytest fixtures for periodctl tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from periodctl.config.settings import PeriodSettings
from periodctl.domain.models import PayrollPeriod
from periodctl.domain.types import Periodicity, PeriodState
from periodctl.infrastructure.ledger import Ledger
from periodctl.services.telemetry import disable_telemetry

TENANT = "acme"

SeedPeriod = Callable[..., PayrollPeriod]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host PERIODCTL_* variables, telemetry and log handlers out of tests."""
    for key in list(os.environ):
        if key.startswith("PERIODCTL_"):
            monkeypatch.delenv(key, raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    disable_telemetry()
    # CLI invocations install a stderr handler bound to the runner's stream.
    root.handlers[:] = handlers


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> PeriodSettings:
    """Settings rooted at a temp directory with no config file."""
    return PeriodSettings.from_cli(root=tmp_path)


@pytest.fixture
def ledger(settings: PeriodSettings) -> Iterator[Ledger]:
    """Ledger on a temp SQLite file; no event bus until a test attaches one."""
    led = Ledger(settings)
    try:
        yield led
    finally:
        led.close()


@pytest.fixture
def seed_period(ledger: Ledger) -> SeedPeriod:
    """Insert a period directly through the repository, bypassing detection."""

    def _seed(
        start: str,
        end: str,
        *,
        periodicity: Periodicity | str = Periodicity.BIWEEKLY,
        state: PeriodState | str = PeriodState.OPEN,
        tenant_id: str = TENANT,
        number: int | None = None,
        label: str = "",
    ) -> PayrollPeriod:
        period = PayrollPeriod(
            tenant_id=tenant_id,
            start_date=date.fromisoformat(start),
            end_date=date.fromisoformat(end),
            periodicity=Periodicity(periodicity),
            state=PeriodState(state),
            annual_ordinal_number=number,
            label=label,
        )
        return ledger.periods.insert(period)

    return _seed


@pytest.fixture
def seed_raw(ledger: Ledger) -> Callable[..., int]:
    """Insert a legacy row verbatim (malformed dates allowed)."""

    def _seed(start: str | None, end: str | None, **values: Any) -> int:
        row = {
            "tenant_id": TENANT,
            "start_date": start,
            "end_date": end,
            "periodicity": "biweekly",
            "state": "closed",
        }
        row.update(values)
        return ledger.periods.insert_raw(row)

    return _seed


@pytest.fixture
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from an empty temp directory so the ledger lands there.

    Use via ``@pytest.mark.usefixtures("_isolated")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
