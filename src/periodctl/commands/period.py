"""Command group: the period registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PERIODICITY_CHOICE, PeriodGroup

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext


@click.group(
    cls=PeriodGroup,
    examples="""\
  periodctl --tenant acme period create 2025-01-01 2025-01-15
  periodctl --tenant acme period create 2025-01-16 2025-01-31 --state open
  periodctl --tenant acme period list --periodicity biweekly""",
)
def period() -> None:
    """Create and list payroll periods."""


@period.command(
    examples="""\
  periodctl --tenant acme period create 2025-02-01 2025-02-28 --periodicity monthly"""
)
@click.argument("start")
@click.argument("end")
@click.option(
    "--periodicity",
    type=PERIODICITY_CHOICE,
    default=None,
    help="Cadence (default: [tenant] periodicity).",
)
@click.option(
    "--state",
    type=click.Choice(["draft", "open", "closed"]),
    default="draft",
    show_default=True,
    help="Initial state.",
)
@click.pass_obj
def create(
    app: AppContext, start: str, end: str, periodicity: str | None, state: str
) -> None:
    """Register START..END unless it duplicates or overlaps a live period."""
    from periodctl.services.periods import PeriodService

    tenant_id = app.require_tenant("create_period")
    app.run(
        "create_period",
        lambda: PeriodService(app.ledger).create_period(
            tenant_id,
            start,
            end,
            periodicity.lower() if periodicity else None,
            state,
        ),
    )


@period.command("list")
@click.option("--periodicity", type=PERIODICITY_CHOICE, default=None, help="Filter by cadence.")
@click.pass_obj
def list_cmd(app: AppContext, periodicity: str | None) -> None:
    """List the tenant's periods in start order."""
    from periodctl.services.periods import PeriodService

    tenant_id = app.require_tenant("list_periods")
    app.run(
        "list_periods",
        lambda: PeriodService(app.ledger).list_periods(
            tenant_id, periodicity.lower() if periodicity else None
        ),
    )
