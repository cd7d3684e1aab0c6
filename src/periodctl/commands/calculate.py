"""Commands: next, current and suggested periods."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PERIODICITY_CHOICE, PeriodCommand

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext

_ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])

periodicity_option = click.option(
    "--periodicity",
    type=PERIODICITY_CHOICE,
    default=None,
    help="Cadence (default: [tenant] periodicity).",
)
today_option = click.option(
    "--today",
    type=_ISO_DATE,
    default=None,
    help="Pretend today is this date (YYYY-MM-DD).",
)


def _cadence(app: AppContext, periodicity: str | None) -> str:
    return periodicity.lower() if periodicity else app.settings.tenant.periodicity


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


@click.command(
    "next",
    cls=PeriodCommand,
    examples="""\
  periodctl --tenant acme next
  periodctl --tenant acme next --periodicity weekly
  periodctl --tenant acme --json next --today 2025-03-10""",
)
@periodicity_option
@today_option
@click.pass_obj
def next_cmd(app: AppContext, periodicity: str | None, today: datetime | None) -> None:
    """Period following the tenant's latest open or closed period."""
    from periodctl.services.coordinator import CalculationCoordinator

    tenant_id = app.require_tenant("next_period")
    app.run(
        "next_period",
        lambda: CalculationCoordinator(app.ledger).calculate_next_period(
            _cadence(app, periodicity), tenant_id, today=_as_date(today)
        ),
    )


@click.command(
    cls=PeriodCommand,
    examples="""\
  periodctl current
  periodctl current --periodicity monthly --date 2025-02-10""",
)
@periodicity_option
@click.option("--date", "reference", type=_ISO_DATE, default=None, help="Reference date.")
@click.pass_obj
def current(app: AppContext, periodicity: str | None, reference: datetime | None) -> None:
    """Canonical period containing a date (default: today)."""
    from periodctl.services.coordinator import CalculationCoordinator

    app.run(
        "current_period",
        lambda: CalculationCoordinator(app.ledger).calculate_current_period(
            _cadence(app, periodicity), _as_date(reference)
        ),
    )


@click.command(
    cls=PeriodCommand,
    examples="""\
  periodctl --tenant acme suggest
  periodctl --tenant acme --json suggest --periodicity weekly""",
)
@periodicity_option
@today_option
@click.pass_obj
def suggest(app: AppContext, periodicity: str | None, today: datetime | None) -> None:
    """Continue the active period, or propose the next one."""
    from periodctl.services.coordinator import CalculationCoordinator

    tenant_id = app.require_tenant("suggest_period")
    app.run(
        "suggest_period",
        lambda: CalculationCoordinator(app.ledger).suggest_period(
            tenant_id, _cadence(app, periodicity), today=_as_date(today)
        ),
    )
