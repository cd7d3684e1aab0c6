"""Root CLI group for periodctl: global flags and command registration."""

from __future__ import annotations

import click

from periodctl import __version__
from periodctl.commands import register_commands
from periodctl.commands._base import PeriodGroup
from periodctl.commands._context import AppContext
from periodctl.config.settings import PeriodSettings


@click.group(cls=PeriodGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="periodctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and telemetry spans.")
@click.option("--log-json", is_flag=True, help="JSON log lines on stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Use this periodctl.toml.")
@click.option("--tenant", "tenant", default=None, help="Tenant to operate on.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    tenant: str | None,
) -> None:
    """periodctl: payroll period lifecycle engine."""
    settings = PeriodSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        tenant_override=tenant,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
