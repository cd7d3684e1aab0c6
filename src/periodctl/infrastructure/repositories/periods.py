"""Repository for persisted payroll periods.

All SQL for the ``payroll_periods`` table lives here. Every SQLAlchemy
failure is re-raised as :class:`PersistenceError` so callers deal with a
single I/O error type.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Generator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from periodctl.domain.calendar import iso_year_bounds, try_parse_iso_date
from periodctl.domain.errors import PersistenceError
from periodctl.domain.models import PayrollPeriod
from periodctl.domain.types import Periodicity, PeriodState
from periodctl.infrastructure.database.schema import payroll_periods

logger = logging.getLogger(__name__)

_T = payroll_periods.c

# Shape of an ISO ``YYYY-MM-DD`` date; legacy rows may hold any text.
_ISO_GLOB = "[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _iso(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else value


@contextmanager
def _guard(operation: str) -> Generator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("Period repository %s failed: %s", operation, exc)
        raise PersistenceError(f"{operation} failed: {exc}") from exc


def _is_iso(column: Any) -> Any:
    return column.op("GLOB")(_ISO_GLOB)


def _row_to_period(row: RowMapping) -> PayrollPeriod:
    try:
        periodicity = Periodicity(row["periodicity"])
        state = PeriodState(row["state"])
    except ValueError as exc:
        raise PersistenceError(f"Period {row['id']} has an unreadable record: {exc}") from exc
    return PayrollPeriod(
        id=row["id"],
        tenant_id=row["tenant_id"],
        start_date=try_parse_iso_date(row["start_date"]),
        end_date=try_parse_iso_date(row["end_date"]),
        periodicity=periodicity,
        state=state,
        annual_ordinal_number=row["annual_ordinal_number"],
        label=row["label"] or "",
    )


class PeriodRepository:
    """Encapsulates SQL for reading and writing payroll periods."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch_one(self, operation: str, stmt: Any) -> PayrollPeriod | None:
        with _guard(operation), self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_to_period(row) if row is not None else None

    def _fetch_first_usable(
        self,
        operation: str,
        stmt: Any,
        usable: Callable[[PayrollPeriod], bool],
    ) -> PayrollPeriod | None:
        """First row of *stmt* passing *usable*.

        Rows shaped like dates but not valid ones (``2025-02-30``) get past
        the SQL filter and are skipped here.
        """
        with _guard(operation), self._engine.connect() as conn:
            for row in conn.execute(stmt).mappings():
                period = _row_to_period(row)
                if usable(period):
                    return period
                logger.debug("Skipping period %s with unusable dates", period.id)
        return None

    def get(self, period_id: int) -> PayrollPeriod | None:
        return self._fetch_one("get", select(payroll_periods).where(_T.id == period_id))

    def find_exact(
        self, tenant_id: str, start: date | str, end: date | str
    ) -> PayrollPeriod | None:
        """Period of *tenant_id* with exactly this boundary, if any."""
        stmt = (
            select(payroll_periods)
            .where(
                _T.tenant_id == tenant_id,
                _T.start_date == _iso(start),
                _T.end_date == _iso(end),
            )
            .order_by(_T.id)
        )
        return self._fetch_one("find_exact", stmt)

    def find_overlapping(
        self,
        tenant_id: str,
        start: date | str,
        end: date | str,
        excluded_states: Collection[str] = (),
    ) -> PayrollPeriod | None:
        """First period (by start) intersecting ``start..end``.

        Periods whose state is in *excluded_states* are ignored. Rows without
        a usable boundary never match.
        """
        conditions = [
            _T.tenant_id == tenant_id,
            _is_iso(_T.start_date),
            _is_iso(_T.end_date),
            _T.start_date <= _iso(end),
            _T.end_date >= _iso(start),
        ]
        if excluded_states:
            conditions.append(_T.state.not_in(list(excluded_states)))
        stmt = select(payroll_periods).where(and_(*conditions)).order_by(_T.start_date, _T.id)
        return self._fetch_first_usable(
            "find_overlapping", stmt, lambda p: p.boundary is not None
        )

    def find_most_recent_non_draft(
        self, tenant_id: str, periodicity: Periodicity | str
    ) -> PayrollPeriod | None:
        """Latest open or closed period with a usable end date."""
        stmt = (
            select(payroll_periods)
            .where(
                _T.tenant_id == tenant_id,
                _T.periodicity == str(periodicity),
                _T.state != str(PeriodState.DRAFT),
                _is_iso(_T.end_date),
            )
            .order_by(_T.end_date.desc(), _T.id.desc())
        )
        return self._fetch_first_usable(
            "find_most_recent_non_draft", stmt, lambda p: p.end_date is not None
        )

    def find_active(
        self, tenant_id: str, periodicity: Periodicity | str
    ) -> PayrollPeriod | None:
        """Latest draft or open period, ordered by start date."""
        stmt = (
            select(payroll_periods)
            .where(
                _T.tenant_id == tenant_id,
                _T.periodicity == str(periodicity),
                _T.state.in_([str(PeriodState.DRAFT), str(PeriodState.OPEN)]),
            )
            .order_by(_T.start_date.desc(), _T.id.desc())
        )
        return self._fetch_one("find_active", stmt)

    def list_all(
        self, tenant_id: str, periodicity: Periodicity | str | None = None
    ) -> list[PayrollPeriod]:
        """All periods of a tenant ascending by start; missing starts sort last."""
        stmt = select(payroll_periods).where(_T.tenant_id == tenant_id)
        if periodicity is not None:
            stmt = stmt.where(_T.periodicity == str(periodicity))
        stmt = stmt.order_by(_T.start_date.is_(None), _T.start_date, _T.id)
        with _guard("list_all"), self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_period(row) for row in rows]

    def update_boundary(self, period_id: int, start: date | str, end: date | str) -> None:
        """Rewrite the boundary of one period in its own transaction."""
        stmt = (
            update(payroll_periods)
            .where(_T.id == period_id)
            .values(start_date=_iso(start), end_date=_iso(end), modified=_now_iso())
        )
        with _guard("update_boundary"), self._engine.begin() as conn:
            updated = conn.execute(stmt).rowcount
        if updated == 0:
            raise PersistenceError(f"Period {period_id} not found")

    def insert(self, period: PayrollPeriod) -> PayrollPeriod:
        """Persist *period* and return it with its assigned id."""
        now = _now_iso()
        values = {
            "tenant_id": period.tenant_id,
            "start_date": period.start_date.isoformat() if period.start_date else None,
            "end_date": period.end_date.isoformat() if period.end_date else None,
            "periodicity": str(period.periodicity),
            "state": str(period.state),
            "annual_ordinal_number": period.annual_ordinal_number,
            "label": period.label,
            "created": now,
            "modified": now,
        }
        with _guard("insert"), self._engine.begin() as conn:
            result = conn.execute(insert(payroll_periods).values(**values))
            new_id = result.inserted_primary_key[0] if result.inserted_primary_key else None
        return period.model_copy(update={"id": new_id})

    def exists_with_ordinal_number(
        self,
        tenant_id: str,
        year: int,
        periodicity: Periodicity | str,
        number: int,
        *,
        exclude_id: int | None = None,
    ) -> bool:
        """Whether *number* is already used for this tenant, cadence and year.

        Weekly periods are matched by ISO year, the year their week number
        counts within.
        """
        if str(periodicity) == Periodicity.WEEKLY:
            first, last = iso_year_bounds(year)
        else:
            first, last = date(year, 1, 1), date(year, 12, 31)
        stmt = select(func.count(_T.id)).where(
            _T.tenant_id == tenant_id,
            _T.periodicity == str(periodicity),
            _T.annual_ordinal_number == number,
            _T.start_date >= first.isoformat(),
            _T.start_date <= last.isoformat(),
        )
        if exclude_id is not None:
            stmt = stmt.where(_T.id != exclude_id)
        with _guard("exists_with_ordinal_number"), self._engine.connect() as conn:
            count = conn.execute(stmt).scalar_one()
        return bool(count)

    def insert_raw(self, values: dict[str, Any]) -> int:
        """Insert a row as-is, bypassing model validation.

        Loads legacy rows verbatim, malformed dates included, so that they
        can be analysed and repaired afterwards.
        """
        now = _now_iso()
        row = {"state": str(PeriodState.DRAFT), "label": "", "created": now, "modified": now}
        row.update(values)
        with _guard("insert_raw"), self._engine.begin() as conn:
            result = conn.execute(insert(payroll_periods).values(**row))
            new_id = result.inserted_primary_key[0]
        return int(new_id)
