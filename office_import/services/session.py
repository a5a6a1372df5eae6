from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

import psycopg2

from ..db.connection import DEFAULT_PORT, DatabaseSession, build_dsn, resolve_dsn
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig, ImportSettings, TableConfig
from ..models.import_result import ImplementationStatus, ImportResult, LicensingResult
from .licensing import run_licensing_script
from .orchestrator import import_offices
from .status import get_status

"""Implementation session: the connection handle plus the per-session
settings (country id, tables) shared by every operation.

configure_connection() must run first (or the session is built from config
with from_config()); every other operation raises NotConfiguredError until
then.
"""

__all__ = [
    "NotConfiguredError",
    "ImplementationSession",
]

logger = logging.getLogger(__name__)


class NotConfiguredError(Exception):
    def __init__(self) -> None:
        super().__init__("Database not configured. Call configure_database first.")


class ImplementationSession:
    def __init__(
        self,
        settings: ImportSettings | None = None,
        tables: TableConfig | None = None,
        *,
        connect: Callable[..., Any] = psycopg2.connect,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.settings = settings or ImportSettings()
        self.tables = tables or TableConfig(office=self.settings.office_table)
        self._connect = connect
        self._db: DatabaseSession | None = None
        self._error_log = error_log if error_log is not None else ErrorLogBuffer()

    @classmethod
    def from_config(cls, cfg: AppConfig, *, connect: Callable[..., Any] = psycopg2.connect) -> ImplementationSession:
        """Session bound to the configured database; connects on first use."""
        session = cls(cfg.settings, cfg.tables, connect=connect)
        session._db = DatabaseSession(resolve_dsn(cfg.database), connect=connect)
        return session

    @property
    def configured(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> DatabaseSession:
        if self._db is None:
            raise NotConfiguredError()
        return self._db

    def configure_connection(
        self,
        server: str,
        database: str,
        user: str,
        password: str,
        port: int | None = None,
        country_id: int = 1,
    ) -> str:
        """Open the session connection and set the country id.

        Raises whatever the driver raises when the connection cannot be made;
        the previous connection (if any) is released first.
        """
        self.close()
        db = DatabaseSession(
            build_dsn(host=server, database=database, user=user, password=password, port=port or DEFAULT_PORT),
            connect=self._connect,
        )
        db.connection()
        self._db = db
        self.settings = replace(self.settings, country_id=country_id)
        logger.info("connected to %s country_id=%d", db.description, country_id)
        return (
            f"✓ Connected to PostgreSQL: {server}/{database}\n"
            f"✓ Country ID set to: {country_id}\n\n"
            "Ready for implementation!"
        )

    def run_licensing_script(self, script_path: Path | str) -> LicensingResult:
        return run_licensing_script(script_path, self.db)

    def import_office_records(self, source_path: Path | str) -> ImportResult:
        return import_offices(source_path, self.db, self.settings, error_log=self._error_log)

    def get_status(self) -> ImplementationStatus:
        return get_status(self.db, self.tables)

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None

    def __enter__(self) -> ImplementationSession:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
