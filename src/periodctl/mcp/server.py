"""FastMCP server setup.

The ``mcp`` package is an optional extra; :data:`mcp_available` tells the
``serve`` command whether it can start. stdio is the default transport;
SSE and streamable HTTP bind to *host*:*port*.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from periodctl.config.settings import PeriodSettings

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["create_server", "mcp_available"]


def create_server(
    settings: PeriodSettings | None = None,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> Any:
    """Open a Ledger for *settings* and register the period tools on it.

    Raises:
        RuntimeError: The ``mcp`` extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install periodctl[mcp]"
        raise RuntimeError(msg)

    from periodctl.config.settings import PeriodSettings
    from periodctl.infrastructure.ledger import Ledger
    from periodctl.mcp.tools import register_tools

    ledger = Ledger(settings or PeriodSettings.from_cli())
    ledger.init_event_bus()

    server = _FastMCP("periodctl", host=host, port=port)
    register_tools(server, ledger)
    return server
