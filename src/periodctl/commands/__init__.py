"""Subcommand modules for periodctl.

:func:`register_commands` imports lazily so ``periodctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the two groups and the standalone commands to *cli*."""
    from periodctl.commands.integrity import integrity
    from periodctl.commands.period import period

    cli.add_command(period)
    cli.add_command(integrity)

    from periodctl.commands.calculate import current, next_cmd, suggest
    from periodctl.commands.detect import detect
    from periodctl.commands.init_cmd import init_cmd
    from periodctl.commands.label import label
    from periodctl.commands.serve import serve

    cli.add_command(init_cmd)
    cli.add_command(detect)
    cli.add_command(next_cmd)
    cli.add_command(current)
    cli.add_command(suggest)
    cli.add_command(label)
    cli.add_command(serve)
