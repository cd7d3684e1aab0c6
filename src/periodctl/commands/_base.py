"""Click base classes that add an eager ``--examples`` flag.

``--help`` stays short; ``--examples`` prints worked invocations and exits.
"""

from __future__ import annotations

from typing import Any

import click

PERIODICITY_CHOICE = click.Choice(["weekly", "biweekly", "monthly"], case_sensitive=False)


def _examples_option(examples: str) -> click.Option:
    def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show,
        help="Show usage examples and exit.",
    )


class PeriodCommand(click.Command):
    """A command accepting ``examples=`` in its decorator."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class PeriodGroup(click.Group):
    """A group whose subcommands default to :class:`PeriodCommand`."""

    command_class = PeriodCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))
