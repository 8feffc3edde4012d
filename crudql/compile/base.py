"""Statement abstractions: BuiltStatement, NoOpStatement and the SQLDialect ABC.

The Template Method pattern (GoF) is used:
- ``SQLDialect`` defines the dialect-specific steps the builder needs.
- ``SQLiteDialect`` and ``MySQLDialect`` override them (positional
  placeholder style, identifier quoting, catalogue queries).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

from crudql.errors import InvalidInputError

#: What a statement is for; selects how the client consumes the cursor.
StatementKind = Literal[
    "insert",
    "update",
    "delete",
    "select_count",
    "select_row",
    "select_all",
    "raw",
]


@dataclass(frozen=True)
class BuiltStatement:
    """The output of a successful build.

    Attributes:
        sql: The SQL text with positional placeholders.
        params: Bound values, in placeholder order.  Literal markers never
            appear here.
        dialect: The dialect the placeholders were rendered for.
        kind: The operation the statement performs.
    """

    sql: str
    params: tuple[Any, ...]
    dialect: str
    kind: StatementKind = "raw"

    def __bool__(self) -> bool:
        return True

    def __iter__(self):
        # Allows ``sql, params = builder.build_insert(...)``.
        yield self.sql
        yield self.params


@dataclass(frozen=True)
class NoOpStatement:
    """Returned instead of a statement when the input cannot produce one.

    Falsy, so ``if not stmt:`` detects it.  It carries no SQL text.

    Attributes:
        error: The input problem that prevented the build.
    """

    error: InvalidInputError

    def __bool__(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return str(self.error)

    def raise_error(self) -> None:
        """Raise the stored :class:`~crudql.errors.InvalidInputError`."""
        raise self.error


class SQLDialect(ABC):
    """Abstract base for dialect-specific rendering.

    Subclasses implement the dialect-specific methods; the
    ``StatementBuilder`` and ``Client`` use this interface via the
    Strategy / Template Method patterns.
    """

    @abstractmethod
    def placeholder(self) -> str:
        """Return the positional placeholder for one bound parameter."""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (table or column name).

        Returns:
            Quoted identifier.
        """

    @abstractmethod
    def table_exists_sql(self) -> str:
        """Return a query taking the table name as its only bound parameter.

        The query yields at least one row when the table exists.
        """

    @abstractmethod
    def truncate_sql(self, table: str) -> str:
        """Return the statement that removes every row from ``table``.

        Args:
            table: Already-quoted table name.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (``'mysql'`` or ``'sqlite'``)."""

    def placeholders(self, count: int) -> str:
        """Return ``count`` comma-separated placeholders (for ``IN (...)`` lists)."""
        return ", ".join(self.placeholder() for _ in range(count))
