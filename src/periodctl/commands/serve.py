"""Command: run the MCP tool server (needs the ``mcp`` extra)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PeriodCommand

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext


@click.command(
    cls=PeriodCommand,
    examples="""\
  # stdio transport, or whatever [mcp] transport says
  periodctl serve

  periodctl serve --transport streamable-http --host 0.0.0.0 --port 9000
  periodctl serve --transport sse""",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default=None,
    help="MCP transport (default: [mcp] transport).",
)
@click.option("--host", default=None, help="Bind address for HTTP transports.")
@click.option("--port", type=int, default=None, help="Listen port for HTTP transports.")
@click.pass_obj
def serve(app: AppContext, transport: str | None, host: str | None, port: int | None) -> None:
    """Expose detect/next/correct/verify as MCP tools."""
    from periodctl.mcp.server import create_server, mcp_available

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install periodctl[mcp]", err=True)
        raise SystemExit(1)
    if not app.settings.mcp.enabled:
        click.echo("MCP server disabled by [mcp] enabled = false", err=True)
        raise SystemExit(1)

    cfg = app.settings.mcp
    server = create_server(app.settings, host=host or cfg.host, port=port or cfg.port)
    server.run(transport=transport or cfg.transport)
