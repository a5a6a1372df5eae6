from .connection import DatabaseSession, build_dsn, resolve_dsn
from .office_insert import PersistOutcome, count_rows, persist_offices

__all__ = ["DatabaseSession", "PersistOutcome", "build_dsn", "count_rows", "persist_offices", "resolve_dsn"]
