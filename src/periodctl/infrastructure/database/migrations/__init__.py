"""Alembic migrations for the period ledger.

Programmatic configuration only; no alembic.ini is needed. The revision
scripts live next to this module.
"""

from __future__ import annotations

from pathlib import Path

from alembic.config import Config


def build_config(db_url: str) -> Config:
    """Build an Alembic Config pointing at our migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def stamp_head(db_path: Path) -> None:
    """Mark a freshly created database as being at the head revision."""
    from alembic import command

    command.stamp(build_config(f"sqlite:///{db_path}"), "head")


def upgrade_head(db_path: Path) -> None:
    """Apply any pending revisions to the database at *db_path*."""
    from alembic import command

    command.upgrade(build_config(f"sqlite:///{db_path}"), "head")


def current_revision(db_path: Path) -> str | None:
    """Revision the database is stamped at, or None for an unversioned file."""
    from alembic.runtime.migration import MigrationContext
    from sqlalchemy import create_engine, pool

    engine = create_engine(f"sqlite:///{db_path}", poolclass=pool.NullPool)
    try:
        with engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()
    finally:
        engine.dispose()
