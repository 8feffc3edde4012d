"""SQLite dialect."""
from __future__ import annotations

from crudql.compile.base import SQLDialect


class SQLiteDialect(SQLDialect):
    """Renders statements for Python's built-in ``sqlite3`` module.

    Parameter style: ``?`` (``qmark``).

    Note: SQLite has no ``TRUNCATE``; an unconditional ``DELETE`` is used.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def placeholder(self) -> str:
        return "?"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def table_exists_sql(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?"

    def truncate_sql(self, table: str) -> str:
        return f"DELETE FROM {table}"
