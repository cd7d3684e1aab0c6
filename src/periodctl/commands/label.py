"""Command: human label and ordinal for a range or free text."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PeriodCommand

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext


@click.command(
    cls=PeriodCommand,
    examples="""\
  periodctl label 2025-01-01 2025-01-15
  periodctl --tenant acme label 2025-03-01 2025-03-31
  periodctl label --text "1 al 15 de Mayo 2025"
  periodctl label --text quincenal""",
)
@click.argument("start", required=False)
@click.argument("end", required=False)
@click.option("--text", default=None, help="Parse a textual period instead of dates.")
@click.pass_obj
def label(app: AppContext, start: str | None, end: str | None, text: str | None) -> None:
    """Label START..END (semantic, with ordinal, when a tenant is set)."""
    from periodctl.services.periods import PeriodService
    from periodctl.services.result import ErrorCode, failure

    if text is None and (start is None or end is None):
        app.emit(failure("label", ErrorCode.VALIDATION, "Pass START and END, or --text"))
    app.run(
        "label",
        lambda: PeriodService(app.ledger).describe_period(
            start, end, tenant_id=app.settings.tenant_id, text=text
        ),
    )
