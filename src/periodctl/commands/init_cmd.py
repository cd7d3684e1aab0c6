"""Command: create ``periodctl.toml`` and the ledger (named to avoid the builtin)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PERIODICITY_CHOICE, PeriodCommand

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext


@click.command(
    "init",
    cls=PeriodCommand,
    examples="""\
  periodctl init
  periodctl init ./payroll --default-tenant acme --periodicity monthly
  periodctl init --db-path /var/lib/periodctl/periods.db --force""",
)
@click.argument("path", required=False, default=".")
@click.option("--default-tenant", default=None, help="Tenant used when --tenant is omitted.")
@click.option(
    "--periodicity",
    type=PERIODICITY_CHOICE,
    default="biweekly",
    show_default=True,
    help="Default payroll cadence.",
)
@click.option("--db-path", default=None, help="Ledger location, relative to PATH.")
@click.option("--force", is_flag=True, help="Overwrite an existing periodctl.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    default_tenant: str | None,
    periodicity: str,
    db_path: str | None,
    force: bool,
) -> None:
    """Initialize a periodctl workspace in PATH."""
    from periodctl.services.init import DEFAULT_DB_PATH, InitService

    root = Path(path).resolve()
    app.run(
        "init",
        lambda: InitService.init_ledger(
            root,
            tenant_id=default_tenant or app.settings.tenant_override,
            periodicity=periodicity.lower(),
            db_path=db_path or DEFAULT_DB_PATH,
            force=force,
        ),
    )
