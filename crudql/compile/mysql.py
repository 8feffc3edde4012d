"""MySQL dialect."""

from __future__ import annotations

from crudql.compile.base import SQLDialect


class MySQLDialect(SQLDialect):
    """Renders statements for MySQL / MariaDB.

    Parameter style: ``%s`` (``format``) - compatible with ``PyMySQL`` and
    ``mysql-connector-python`` positional execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def placeholder(self) -> str:
        return "%s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def table_exists_sql(self) -> str:
        return "SHOW TABLES LIKE %s"

    def truncate_sql(self, table: str) -> str:
        return f"TRUNCATE TABLE {table}"
