"""SQLite database engine and schema via SQLAlchemy Core."""

from periodctl.infrastructure.database.engine import create_db_engine, init_database
from periodctl.infrastructure.database.schema import metadata, payroll_periods

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "payroll_periods",
]
