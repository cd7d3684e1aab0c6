"""AppContext: state shared by every periodctl command.

Built once by the root group and handed to subcommands with
``@click.pass_obj``. Owns the lazily opened :class:`Ledger` and routes
results to stdout or stderr with the right exit code.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from periodctl.domain.errors import PersistenceError
from periodctl.output.formatters import OutputSettings, format_result
from periodctl.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from periodctl.config.settings import PeriodSettings
    from periodctl.infrastructure.ledger import Ledger


class AppContext:
    """Settings, ledger and output routing for one invocation.

    The ledger is opened on first use so ``--help``, ``--version`` and
    ``--examples`` never touch the database.
    """

    def __init__(self, settings: PeriodSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None

        from periodctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from periodctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def ledger(self) -> Ledger:
        if self._ledger is None:
            from periodctl.infrastructure.ledger import Ledger

            self._ledger = Ledger(self.settings)
            self._ledger.init_event_bus()
        return self._ledger

    def require_tenant(self, op: str) -> str:
        """The tenant in effect, or exit 1 with a ``VALIDATION`` error."""
        tenant_id = self.settings.tenant_id
        if not tenant_id:
            msg = "No tenant: pass --tenant or set [tenant] default_id"
            self.emit(failure(op, ErrorCode.VALIDATION, msg))
        assert tenant_id is not None
        return tenant_id

    def run(self, op: str, call: Callable[[], ServiceResult]) -> None:
        """Invoke *call* and emit its result.

        A :class:`PersistenceError` escaping the service becomes a
        ``PERSISTENCE`` failure instead of a traceback.
        """
        try:
            result = call()
        except PersistenceError as exc:
            result = failure(op, ErrorCode.PERSISTENCE, str(exc))
        self.emit(result)

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with status 1.

        Outside JSON mode, warnings of a successful result are echoed to
        stderr so piped stdout stays clean.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
