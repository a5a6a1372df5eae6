from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the office importer.

Pure domain models; YAML parsing and schema validation live in
office_import/config/loader.py.
"""

DEFAULT_NULL_SENTINELS = frozenset({"NULL"})
# Header / template rows that sometimes survive the spreadsheet reader
DEFAULT_TEMPLATE_CODES = frozenset({"OfficeCode", "Data", "Context"})


def first_data_row(skip_rows: int) -> int:
    """1-based file row of the first data row: skipped rows, then the header row."""
    return skip_rows + 2


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class TableConfig:
    """Target / status table names."""
    office: str = "office"
    employee: str = "employee"
    client: str = "client"


@dataclass(frozen=True)
class ImportSettings:
    """Per-session settings of the office import pipeline."""
    country_id: int = 1
    skip_rows: int = 1  # Leading rows before the header row
    row_offset: int | None = None  # File row number of the first data row (None: skip_rows + 2)
    null_sentinels: frozenset[str] = DEFAULT_NULL_SENTINELS  # upper-cased
    template_codes: frozenset[str] = DEFAULT_TEMPLATE_CODES
    office_table: str = "office"

    @property
    def data_row_offset(self) -> int:
        return self.row_offset if self.row_offset is not None else first_data_row(self.skip_rows)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object loaded from config/import.yml."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    settings: ImportSettings = field(default_factory=ImportSettings)
    tables: TableConfig = field(default_factory=TableConfig)
