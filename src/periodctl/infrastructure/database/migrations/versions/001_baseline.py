"""Baseline schema: the payroll_periods table.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Databases created by ``periodctl init`` are stamped at this revision
without running it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "payroll_periods",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("tenant_id", sa.Text, nullable=False),
        sa.Column("start_date", sa.Text),
        sa.Column("end_date", sa.Text),
        sa.Column("periodicity", sa.Text, nullable=False),
        sa.Column("state", sa.Text, nullable=False, server_default="draft"),
        sa.Column("annual_ordinal_number", sa.Integer),
        sa.Column("label", sa.Text, nullable=False, server_default=""),
        sa.Column("created", sa.Text, nullable=False),
        sa.Column("modified", sa.Text, nullable=False),
    )
    op.create_index(
        "ix_payroll_periods_tenant_periodicity_start",
        "payroll_periods",
        ["tenant_id", "periodicity", "start_date"],
    )
    op.create_index(
        "ix_payroll_periods_tenant_range",
        "payroll_periods",
        ["tenant_id", "start_date", "end_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_payroll_periods_tenant_range", table_name="payroll_periods")
    op.drop_index("ix_payroll_periods_tenant_periodicity_start", table_name="payroll_periods")
    op.drop_table("payroll_periods")
