"""Command group: analyze, correct, verify and repair period sequences."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from periodctl.commands._base import PERIODICITY_CHOICE, PeriodGroup

if TYPE_CHECKING:
    from periodctl.commands._context import AppContext

_periodicity = click.option(
    "--periodicity",
    type=PERIODICITY_CHOICE,
    default=None,
    help="Cadence (default: [tenant] periodicity).",
)


def _cadence(app: AppContext, periodicity: str | None) -> str:
    return periodicity.lower() if periodicity else app.settings.tenant.periodicity


@click.group(
    cls=PeriodGroup,
    examples="""\
  periodctl --tenant acme integrity analyze
  periodctl --tenant acme integrity correct --periodicity biweekly
  periodctl --tenant acme integrity verify
  periodctl --tenant acme --json integrity repair""",
)
def integrity() -> None:
    """Find and fix non-canonical, overlapping or missing periods."""


@integrity.command()
@click.option("--periodicity", type=PERIODICITY_CHOICE, default=None, help="Only this cadence.")
@click.pass_obj
def analyze(app: AppContext, periodicity: str | None) -> None:
    """Report every non-canonical period (read-only)."""
    from periodctl.services.integrity import IntegrityService

    tenant_id = app.require_tenant("analyze_periods")
    app.run(
        "analyze_periods",
        lambda: IntegrityService(app.ledger).analyze_incorrect_periods(
            tenant_id, periodicity.lower() if periodicity else None
        ),
    )


@integrity.command()
@_periodicity
@click.pass_obj
def correct(app: AppContext, periodicity: str | None) -> None:
    """Rewrite critically defective periods; irregular ones are left alone."""
    from periodctl.services.integrity import IntegrityService

    tenant_id = app.require_tenant("correct_periods")
    app.run(
        "correct_periods",
        lambda: IntegrityService(app.ledger).auto_correct_corrupt_periods(
            tenant_id, _cadence(app, periodicity)
        ),
    )


@integrity.command()
@_periodicity
@click.pass_obj
def verify(app: AppContext, periodicity: str | None) -> None:
    """Check the sequence for gaps and overlaps (exit 1 when found)."""
    from periodctl.services.integrity import IntegrityService

    tenant_id = app.require_tenant("verify_periods")
    app.run(
        "verify_periods",
        lambda: IntegrityService(app.ledger).verify_integrity_after_correction(
            tenant_id, _cadence(app, periodicity)
        ),
    )


@integrity.command()
@_periodicity
@click.pass_obj
def repair(app: AppContext, periodicity: str | None) -> None:
    """Analyze, correct and verify in one run."""
    from periodctl.services.integrity import IntegrityService

    tenant_id = app.require_tenant("repair_periods")
    app.run(
        "repair_periods",
        lambda: IntegrityService(app.ledger).execute_integral_correction(
            tenant_id, _cadence(app, periodicity)
        ),
    )
