from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.office_fields import OFFICE_FIELDS
from ..models.office_record import OfficeRecord
from ..models.validation import ErrorCategory, Severity, ValidationError

"""Row-by-row office INSERT.

One parameterized statement per record, no surrounding transaction: the
connection runs in autocommit mode, so each successful row is committed on its
own and a rejected row leaves the others untouched. Failures are returned as
`database` findings instead of being raised.
"""

__all__ = [
    "PersistOutcome",
    "build_insert_sql",
    "count_rows",
    "insert_columns",
    "insert_params",
    "persist_offices",
]

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

# Fixed leading columns, followed by every column of OFFICE_FIELDS
_KEY_COLUMNS = ("CountryID", "OfficeID")


@dataclass
class PersistOutcome:
    records_imported: int = 0
    errors: list[ValidationError] = field(default_factory=list)


def insert_columns() -> list[str]:
    return [*_KEY_COLUMNS, *(spec.column for spec in OFFICE_FIELDS)]


def build_insert_sql(table: str) -> str:
    """INSERT statement with one %s placeholder per column (table name checked)."""
    if not _TABLE_NAME.match(table):
        raise ValueError(f"invalid table name: {table!r}")
    columns = insert_columns()
    cols_sql = ", ".join(f'"{c}"' for c in columns)
    placeholders = ", ".join(["%s"] * len(columns))
    return f"INSERT INTO {table} ({cols_sql}) VALUES ({placeholders})"


def insert_params(record: OfficeRecord, country_id: int, office_id: uuid.UUID) -> tuple[Any, ...]:
    values = record.column_values()
    return (country_id, str(office_id), *(values[spec.column] for spec in OFFICE_FIELDS))


def persist_offices(
    cursor: Any,
    records: Iterable[OfficeRecord],
    country_id: int,
    table: str = "office",
    on_row: Callable[[OfficeRecord, bool], None] | None = None,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
) -> PersistOutcome:
    """Insert each record independently.

    Parameters
    ----------
    cursor: DB-API cursor (psycopg2) of an autocommit connection
    records: reconciled records, every one with office_code and office_desc set
    country_id: CountryID bound on every row
    table: target table
    on_row: called after each attempt with (record, succeeded)
    id_factory: OfficeID generator
    """
    sql = build_insert_sql(table)
    outcome = PersistOutcome()
    for record in records:
        params = insert_params(record, country_id, id_factory())
        try:
            cursor.execute(sql, params)
        except Exception as e:
            logger.warning("row=%d office_code=%s insert failed: %s", record.row_number, record.office_code, e)
            outcome.errors.append(
                ValidationError(
                    row=record.row_number,
                    field="database",
                    value=record.office_code,
                    message=f"Database error: {e}",
                    severity=Severity.ADVISORY,
                    category=ErrorCategory.PERSISTENCE,
                )
            )
            succeeded = False
        else:
            outcome.records_imported += 1
            succeeded = True
        if on_row is not None:
            on_row(record, succeeded)
    return outcome


def count_rows(cursor: Any, tables: Sequence[str]) -> list[int]:
    """SELECT COUNT(*) for each table, in order."""
    counts = []
    for table in tables:
        if not _TABLE_NAME.match(table):
            raise ValueError(f"invalid table name: {table!r}")
        cursor.execute(f"SELECT COUNT(*) FROM {table}")
        row = cursor.fetchone()
        counts.append(int(row[0]) if row else 0)
    return counts
