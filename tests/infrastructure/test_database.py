"""Tests for the SQLite engine and Alembic helpers."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import inspect, text

from periodctl.infrastructure.database.engine import init_database
from periodctl.infrastructure.database.migrations import (
    build_config,
    current_revision,
    stamp_head,
    upgrade_head,
)


class TestEngine:
    def test_wal_mode(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "nested" / "ledger.db")
        try:
            with engine.connect() as conn:
                mode = conn.execute(text("PRAGMA journal_mode")).scalar_one()
            assert mode == "wal"
        finally:
            engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "ledger.db"
        init_database(db_path).dispose()
        engine = init_database(db_path)
        try:
            assert "payroll_periods" in inspect(engine).get_table_names()
        finally:
            engine.dispose()


class TestMigrations:
    def test_build_config(self) -> None:
        cfg = build_config("sqlite:///x.db")
        assert cfg.get_main_option("sqlalchemy.url") == "sqlite:///x.db"
        script_location = cfg.get_main_option("script_location")
        assert script_location is not None
        assert (Path(script_location) / "env.py").is_file()

    def test_upgrade_from_empty_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "ledger.db"
        upgrade_head(db_path)
        assert current_revision(db_path) == "001_baseline"
        engine = init_database(db_path)
        try:
            indexes = {ix["name"] for ix in inspect(engine).get_indexes("payroll_periods")}
        finally:
            engine.dispose()
        assert "ix_payroll_periods_tenant_range" in indexes

    def test_stamp_then_upgrade_is_noop(self, tmp_path: Path) -> None:
        db_path = tmp_path / "ledger.db"
        init_database(db_path).dispose()
        assert current_revision(db_path) is None
        stamp_head(db_path)
        upgrade_head(db_path)
        assert current_revision(db_path) == "001_baseline"
