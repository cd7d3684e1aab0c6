"""Command: classify a selected date range against the ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PERIODICITY_CHOICE, PeriodCommand

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext


@click.command(
    cls=PeriodCommand,
    examples="""\
  periodctl --tenant acme detect 2025-01-01 2025-01-15
  periodctl --json detect 2025-02-01 2025-02-28 --periodicity monthly""",
)
@click.argument("start")
@click.argument("end")
@click.option(
    "--periodicity",
    type=PERIODICITY_CHOICE,
    default=None,
    help="Number the range as this cadence (default: inferred from its length).",
)
@click.pass_obj
def detect(app: AppContext, start: str, end: str, periodicity: str | None) -> None:
    """Decide whether START..END continues, conflicts with or creates a period."""
    from periodctl.services.detection import DetectionService

    tenant_id = app.require_tenant("detect")
    app.run(
        "detect",
        lambda: DetectionService(app.ledger).detect(
            tenant_id, start, end, periodicity=periodicity.lower() if periodicity else None
        ),
    )
