from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2.extensions import make_dsn

from ..models.config_models import DatabaseConfig

"""PostgreSQL connection handle.

One DatabaseSession per tool session: the connection is opened lazily on first
use, switched to autocommit (row-by-row inserts commit independently) and
closed on close() / context exit, including error paths.
"""

__all__ = [
    "DEFAULT_PORT",
    "DatabaseSession",
    "build_dsn",
    "resolve_dsn",
]

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5432


def build_dsn(
    host: str,
    database: str,
    user: str,
    password: str | None = None,
    port: int | None = None,
) -> str:
    kwargs: dict[str, Any] = {
        "host": host,
        "port": port or DEFAULT_PORT,
        "user": user,
        "dbname": database,
    }
    if password:
        kwargs["password"] = password
    return make_dsn(**kwargs)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Resolve connection parameters.

    Priority:
        1. DATABASE_URL / PGDSN environment variables, then database.dsn
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE environment variables
        3. config/import.yml database section
        4. built-in defaults (localhost:5432, postgres/postgres)
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    port_env = os.getenv("PGPORT")
    return build_dsn(
        host=os.getenv("PGHOST", db_cfg.host or "localhost"),
        port=int(port_env) if port_env else db_cfg.port,
        user=os.getenv("PGUSER", db_cfg.user or "postgres"),
        password=os.getenv("PGPASSWORD", db_cfg.password or ""),
        database=os.getenv("PGDATABASE", db_cfg.database or "postgres"),
    )


def _describe(dsn: str) -> str:
    """host/dbname for log lines (never the password)."""
    try:
        params = psycopg2.extensions.parse_dsn(dsn)
    except psycopg2.ProgrammingError:
        return "<unparsable dsn>"
    return f"{params.get('host', 'localhost')}/{params.get('dbname', '')}"


class DatabaseSession:
    """Lazily connected, explicitly released psycopg2 connection."""

    def __init__(self, dsn: str, connect: Callable[..., Any] = psycopg2.connect) -> None:
        self.dsn = dsn
        self._connect = connect
        self._conn: Any | None = None

    @property
    def description(self) -> str:
        return _describe(self.dsn)

    @property
    def connected(self) -> bool:
        return self._conn is not None and not getattr(self._conn, "closed", False)

    def connection(self) -> Any:
        if not self.connected:
            logger.debug("connecting to %s", self.description)
            conn = self._connect(self.dsn)
            conn.autocommit = True
            self._conn = conn
        return self._conn

    @contextmanager
    def cursor(self) -> Iterator[Any]:
        cur = self.connection().cursor()
        try:
            yield cur
        finally:
            cur.close()

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except psycopg2.Error as e:  # pragma: no cover
            logger.warning("error while closing connection to %s: %s", self.description, e)

    def __enter__(self) -> DatabaseSession:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
