"""SQLAlchemy Core table definitions for the period ledger.

Dates are stored as ISO ``YYYY-MM-DD`` text and are nullable so that
corrupt legacy rows can still be loaded, reported and repaired. Ordinal
uniqueness is enforced by the numbering service, not by a constraint,
for the same reason.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

payroll_periods = Table(
    "payroll_periods",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", Text, nullable=False),
    Column("start_date", Text),
    Column("end_date", Text),
    Column("periodicity", Text, nullable=False),
    Column("state", Text, nullable=False, default="draft", server_default="draft"),
    Column("annual_ordinal_number", Integer),
    Column("label", Text, nullable=False, default="", server_default=""),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index(
    "ix_payroll_periods_tenant_periodicity_start",
    payroll_periods.c.tenant_id,
    payroll_periods.c.periodicity,
    payroll_periods.c.start_date,
)
Index(
    "ix_payroll_periods_tenant_range",
    payroll_periods.c.tenant_id,
    payroll_periods.c.start_date,
    payroll_periods.c.end_date,
)
