# Shared pytest fixtures and test doubles
from __future__ import annotations

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from office_import.excel.reader import RawRecord
from office_import.logging.init import reset_logging

HEADER = [
    "OfficeCode", "OfficeDesc", "OfficePAddress", "OfficeBussAdd", "OfficeTel", "OfficeFax",
    "OfficeBank", "OfficeBranch", "OfficeBranchNo", "OfficeBankAcc", "OfficeRegNo",
    "OfficeTaxNo", "OfficeURL", "OfficeEmail",
]


class FakeCursor:
    """DB-API cursor double: records statements, fails inserts for chosen codes."""

    def __init__(
        self,
        fail_codes: set[str] | None = None,
        counts: list[int] | None = None,
        fail_statements: set[int] | None = None,
    ) -> None:
        self.executed: list[tuple[str, Any]] = []
        self.fail_codes = fail_codes or set()
        self.fail_statements = fail_statements or set()  # 1-based statement numbers
        self.counts = list(counts or [])
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        self.executed.append((sql, params))
        if len(self.executed) in self.fail_statements:
            raise Exception(f"syntax error in statement {len(self.executed)}")
        if params and sql.startswith("INSERT") and params[2] in self.fail_codes:
            raise Exception(f'duplicate key value violates unique constraint "office_code_key" ({params[2]})')

    def fetchone(self) -> tuple[int] | None:
        return (self.counts.pop(0),) if self.counts else None

    def close(self) -> None:
        self.closed = True

    @property
    def inserts(self) -> list[tuple[Any, ...]]:
        return [params for sql, params in self.executed if sql.startswith("INSERT")]


class FakeDb:
    """Stand-in for DatabaseSession: hands out one shared FakeCursor."""

    def __init__(self, cursor: FakeCursor | None = None, connect_error: Exception | None = None) -> None:
        self.cursor_obj = cursor or FakeCursor()
        self.connect_error = connect_error
        self.cursor_requests = 0

    @contextmanager
    def cursor(self) -> Iterator[FakeCursor]:
        self.cursor_requests += 1
        if self.connect_error is not None:
            raise self.connect_error
        yield self.cursor_obj


class FakeConnection:
    """psycopg2 connection double for DatabaseSession / ImplementationSession."""

    def __init__(self, dsn: str, cursor: FakeCursor) -> None:
        self.dsn = dsn
        self.autocommit = False
        self.closed = False
        self._cursor = cursor

    def cursor(self) -> FakeCursor:
        return self._cursor

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Callable replacing psycopg2.connect; remembers every connection made."""

    def __init__(self, cursor: FakeCursor | None = None, error: Exception | None = None) -> None:
        self.cursor = cursor or FakeCursor()
        self.error = error
        self.connections: list[FakeConnection] = []

    def __call__(self, dsn: str) -> FakeConnection:
        if self.error is not None:
            raise self.error
        conn = FakeConnection(dsn, self.cursor)
        self.connections.append(conn)
        return conn


def make_reader(rows: list[dict[str, Any]], row_offset: int = 3):
    """Reader double returning the given header->value rows as RawRecords."""
    calls: list[Path] = []

    def reader(path: Path, skip_rows: int = 1, row_offset: int | None = row_offset) -> list[RawRecord]:
        calls.append(path)
        return [RawRecord(row_number=i + row_offset, values=dict(r)) for i, r in enumerate(rows)]

    reader.calls = calls  # type: ignore[attr-defined]
    return reader


def make_office_xlsx(path: Path, rows: list[list[object]], title: str = "GreatSoft Office Import") -> Path:
    """Write an office workbook: title row, header row, then the given data rows."""
    data = [[title] + [None] * (len(HEADER) - 1), HEADER]
    for r in rows:
        data.append(list(r) + [None] * (len(HEADER) - len(r)))
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(data).to_excel(writer, sheet_name="Office", header=False, index=False)
    return path


@pytest.fixture(autouse=True)
def _fresh_logging() -> Iterator[None]:
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Iterator[Path]:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """country_id: 7
skip_rows: 1
null_sentinels: ["NULL", "(NULL)"]
tables:
  office: office
  employee: employee
  client: client
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def fake_db() -> FakeDb:
    return FakeDb()
