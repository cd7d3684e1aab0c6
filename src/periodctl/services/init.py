"""InitService: lay down ``periodctl.toml`` and an empty ledger."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from periodctl.config.discovery import CONFIG_FILENAME
from periodctl.domain.errors import PeriodValidationError, PersistenceError
from periodctl.domain.strategies import coerce_periodicity
from periodctl.domain.types import PUBLIC_PERIODICITIES
from periodctl.infrastructure.database.engine import init_database
from periodctl.infrastructure.database.migrations import (
    current_revision,
    stamp_head,
    upgrade_head,
)
from periodctl.services.result import ErrorCode, ServiceResult, failure
from periodctl.services.telemetry import traced

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = ".periodctl/periods.db"


def render_config(*, db_path: str, tenant_id: str | None, periodicity: str) -> str:
    """Sparse ``periodctl.toml``: only the values chosen at init time."""
    lines = ["[database]", f"path = {json.dumps(db_path)}", "", "[tenant]"]
    if tenant_id:
        lines.append(f"default_id = {json.dumps(tenant_id)}")
    lines.append(f"periodicity = {json.dumps(periodicity)}")
    return "\n".join(lines) + "\n"


class InitService:
    """Stateless: there is no ledger to inject before one exists."""

    @staticmethod
    @traced
    def init_ledger(
        root: Path,
        *,
        tenant_id: str | None = None,
        periodicity: str = "biweekly",
        db_path: str = DEFAULT_DB_PATH,
        force: bool = False,
    ) -> ServiceResult:
        op = "init"
        config_path = root / CONFIG_FILENAME
        if config_path.exists() and not force:
            return failure(
                op,
                ErrorCode.VALIDATION,
                f"{config_path} already exists (use --force to overwrite)",
            )
        try:
            resolved = coerce_periodicity(periodicity)
        except PeriodValidationError as exc:
            return failure(op, ErrorCode.UNSUPPORTED_PERIODICITY, str(exc))
        if resolved not in PUBLIC_PERIODICITIES:
            return failure(
                op,
                ErrorCode.UNSUPPORTED_PERIODICITY,
                f"{resolved} cannot be a tenant default",
            )

        root.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            render_config(db_path=db_path, tenant_id=tenant_id, periodicity=str(resolved)),
            encoding="utf-8",
        )

        database = Path(db_path).expanduser()
        if not database.is_absolute():
            database = root / database
        existed = database.exists()
        try:
            if existed and current_revision(database) is not None:
                # Re-init keeps the rows and brings the schema up to date.
                upgrade_head(database)
            else:
                # New file, or tables created by a command before any init.
                init_database(database).dispose()
                stamp_head(database)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot create ledger at {database}: {exc}") from exc
        logger.info("Initialized ledger at %s", database)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(root),
                "config_path": str(config_path),
                "db_path": str(database),
                "tenant_id": tenant_id,
                "periodicity": str(resolved),
                "upgraded": existed,
            },
        )
