"""Rich Console factory and theme for periodctl output.

Consoles render into a StringIO buffer so that ``format_result()`` keeps
returning a plain string. Rich disables color codes by itself when not
attached to a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PERIOD_THEME = Theme(
    {
        "pc.ok": "bold green",
        "pc.error": "bold red",
        "pc.warning": "bold yellow",
        "pc.op": "bold cyan",
        "pc.key": "dim",
        "pc.id": "bold blue",
        "pc.label": "bold",
        "pc.range": "cyan",
        "pc.state.draft": "yellow",
        "pc.state.open": "green",
        "pc.state.closed": "dim",
        "pc.critical": "bold red",
        "pc.irregular": "yellow",
    }
)

_STATE_STYLES: dict[str, str] = {
    "draft": "pc.state.draft",
    "open": "pc.state.open",
    "closed": "pc.state.closed",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PERIOD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Rendered text of a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_state(state: str) -> str:
    return _STATE_STYLES.get(state, "")
