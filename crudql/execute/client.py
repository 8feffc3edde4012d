"""Execution adapter: runs built statements through a DB-API 2.0 driver.

``Client`` owns one connection, a :class:`~crudql.compile.builder.StatementBuilder`
for its dialect, and the per-client query counter.  It is the only part of
crudQL that performs I/O.

Error policy
------------
- Builder input that produced a :class:`~crudql.compile.base.NoOpStatement`
  is rejected with its :class:`~crudql.errors.InvalidInputError` before the
  driver is called.
- Driver exceptions are logged and re-raised as
  :class:`~crudql.errors.StatementError` (or
  :class:`~crudql.errors.ConnectionUnavailableError` when connecting fails),
  chained to the original exception.
- "No rows" is ``None`` / ``[]``, never an error.

Thread safety
-------------
One lock guards the counter increment, the driver call and result
consumption, so a client may be shared between threads.  Every execution
method accepts ``timeout`` (seconds) bounding the wait for that lock.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Collection, Iterable, Mapping
from typing import Any, TypeVar

from crudql.compile.base import BuiltStatement, NoOpStatement
from crudql.compile.builder import BuildResult, StatementBuilder, normalize_params
from crudql.errors import (
    ConnectionUnavailableError,
    ExecutionTimeoutError,
    StatementError,
)
from crudql.execute import shapes
from crudql.execute.connectors import Connector, ConnectorFactory
from crudql.log import QueryLogger
from crudql.schema.config import ClientConfig

T = TypeVar("T")

_WRITE_KINDS = frozenset({"insert", "update", "delete", "raw"})


class Client:
    """A database client for common CRUD operations.

    Args:
        config: Connection settings, or a mapping accepted by
            :meth:`ClientConfig.from_mapping`.
        connection: An already-open DB-API connection.  When omitted the
            connector registered for ``config.target`` opens one.
        builder: Statement builder to use; defaults to one for
            ``config.target``.
        connector: Connector overriding the registered one.

    Example::

        client = Client({"target": "sqlite", "database": "app.db"})
        user_id = client.insert("users", {"name": "Bennett", "created": "NOW()"})
        user = client.get_row("SELECT name FROM users WHERE id = ?", [user_id])
        client.update("users", {"name": "Not Bennett"}, {"id": user_id}, limit=1)
    """

    def __init__(
        self,
        config: ClientConfig | Mapping[str, Any] | None = None,
        connection: Any = None,
        builder: StatementBuilder | None = None,
        connector: Connector | None = None,
    ) -> None:
        if config is None:
            config = ClientConfig()
        elif not isinstance(config, ClientConfig):
            config = ClientConfig.from_mapping(config)
        self.config = config
        self.builder = builder or StatementBuilder(dialect=config.target)
        self._connector = connector or ConnectorFactory.create(config.target)
        self._errors = self._connector.error_types
        self._log = QueryLogger()
        self._lock = threading.Lock()
        self._counter = 0
        self._cursor: Any = None
        self._conn: Any = connection if connection is not None else self._open()

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def _open(self) -> Any:
        self._log.log_connection(f"open {self.config.target}:{self.config.database}")
        try:
            return self._connector.connect(self.config)
        except self._errors as exc:
            self._log.log_error("connect", exc)
            raise ConnectionUnavailableError(f"Could not connect: {exc}") from exc

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self) -> None:
        """Close the connection.  Safe to call more than once."""
        with self._lock:
            if self._conn is None:
                return
            self._close_cursor()
            conn, self._conn = self._conn, None
        self._log.log_connection("close")
        conn.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Structured writes
    # ------------------------------------------------------------------

    def insert(
        self, table: str, fields: Mapping[str, Any], *, timeout: float | None = None
    ) -> int | None:
        """Insert one row and return the generated id (``None`` if there is none).

        Raises:
            EmptyFieldsError: If ``fields`` is empty.
            StatementError: If the driver fails.
        """
        return self.execute(self.builder.build_insert(table, fields), timeout=timeout)

    def update(
        self,
        table: str,
        fields: Mapping[str, Any],
        where: Mapping[str, Any] | None = None,
        limit: Any = None,
        *,
        timeout: float | None = None,
    ) -> int:
        """Update rows and return the affected row count.

        Raises:
            EmptyFieldsError: If ``fields`` is empty.
            InvalidLimitError: If ``limit`` is not a non-negative integer.
            StatementError: If the driver fails.
        """
        stmt = self.builder.build_update(table, fields, where, limit)
        return self.execute(stmt, timeout=timeout)

    def delete(
        self,
        table: str,
        where: Mapping[str, Any],
        limit: Any = None,
        *,
        timeout: float | None = None,
    ) -> int:
        """Delete rows matching ``where`` and return the affected row count.

        Raises:
            MissingConditionError: If ``where`` is empty.
            StatementError: If the driver fails.
        """
        return self.execute(self.builder.build_delete(table, where, limit), timeout=timeout)

    # ------------------------------------------------------------------
    # Raw SQL
    # ------------------------------------------------------------------

    def query(self, sql: str, params: Any = (), *, timeout: float | None = None) -> int | None:
        """Run arbitrary SQL; return the last insert id or ``None``."""
        return self.execute(self.builder.build_raw(sql, params), timeout=timeout)

    def get_results(self, sql: str, params: Any = (), *, timeout: float | None = None) -> list[Any]:
        """Return every row produced by ``sql``."""
        return self.execute(self.builder.build_select_all(sql, params), timeout=timeout)

    def get_row(self, sql: str, params: Any = (), *, timeout: float | None = None) -> Any | None:
        """Return the first row produced by ``sql``, or ``None``."""
        return self.execute(self.builder.build_select_row(sql, params), timeout=timeout)

    def num_rows(self, sql: str, params: Any = (), *, timeout: float | None = None) -> Any | None:
        """Return the first column of the first row (e.g. a ``COUNT``), or ``None``."""
        return self.execute(self.builder.build_select_count(sql, params), timeout=timeout)

    def in_placeholders(self, values: Collection[Any]) -> str:
        """Return placeholders for an ``IN (...)`` list; see ``StatementBuilder``."""
        return self.builder.in_placeholders(values)

    # ------------------------------------------------------------------
    # Schema helpers
    # ------------------------------------------------------------------

    def table_exists(self, name: str, *, timeout: float | None = None) -> bool:
        """Return ``True`` if ``name`` is an existing table."""
        stmt = self.builder.build_select_row(self.builder.dialect.table_exists_sql(), (name,))
        return self.execute(stmt, timeout=timeout) is not None

    def list_fields(self, table: str, *, timeout: float | None = None) -> list[str]:
        """Return the column names of ``table`` in declaration order."""
        stmt = self.builder.build_raw(f"SELECT * FROM {self._quote(table)} LIMIT 0")
        return self._run(stmt, shapes.column_names, timeout)

    def num_fields(self, table: str, *, timeout: float | None = None) -> int:
        """Return the number of columns in ``table``."""
        return len(self.list_fields(table, timeout=timeout))

    def truncate(self, tables: str | Iterable[str], *, timeout: float | None = None) -> int:
        """Remove every row from each table; return how many were emptied.

        Stops at the first failing table and raises.
        """
        if isinstance(tables, str):
            tables = [tables]
        truncated = 0
        for table in tables:
            sql = self.builder.dialect.truncate_sql(self._quote(table))
            self._run(self.builder.build_raw(sql), lambda cursor: None, timeout)
            truncated += 1
        return truncated

    # ------------------------------------------------------------------
    # Counters and last-statement state
    # ------------------------------------------------------------------

    def total_queries(self) -> int:
        """Return the number of statements executed by this client."""
        return self._counter

    def lastid(self) -> int | None:
        """Return the id generated by the most recent statement, if any."""
        return shapes.last_insert_id(self._cursor) if self._cursor is not None else None

    def affected(self) -> int:
        """Return the row count of the most recent statement."""
        return shapes.affected_rows(self._cursor) if self._cursor is not None else 0

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, statement: BuildResult, *, timeout: float | None = None) -> Any:
        """Execute a built statement and adapt the result by its kind.

        ========================  ==================================
        kind                      result
        ========================  ==================================
        ``insert`` / ``raw``      last insert id or ``None``
        ``update`` / ``delete``   affected row count
        ``select_count``          first column of first row or ``None``
        ``select_row``            first row or ``None``
        ``select_all``            list of rows
        ========================  ==================================

        Raises:
            InvalidInputError: If ``statement`` is a :class:`NoOpStatement`.
            ExecutionTimeoutError: If the connection is busy past ``timeout``.
            ConnectionUnavailableError: If the client is closed.
            StatementError: If the driver fails.
        """
        if isinstance(statement, NoOpStatement):
            statement.raise_error()
        shape = self.config.result_shape
        consumers: dict[str, Callable[[Any], Any]] = {
            "insert": shapes.last_insert_id,
            "raw": shapes.last_insert_id,
            "update": shapes.affected_rows,
            "delete": shapes.affected_rows,
            "select_count": shapes.fetch_scalar,
            "select_row": lambda cursor: shapes.fetch_one(cursor, shape),
            "select_all": lambda cursor: shapes.fetch_all(cursor, shape),
        }
        return self._run(statement, consumers[statement.kind], timeout)

    def _run(
        self,
        statement: BuiltStatement,
        consume: Callable[[Any], T],
        timeout: float | None,
    ) -> T:
        if not self._lock.acquire(timeout=-1 if timeout is None else timeout):
            raise ExecutionTimeoutError(timeout)
        try:
            if self._conn is None:
                raise ConnectionUnavailableError(
                    "The client connection is closed.", sql=statement.sql
                )
            self._counter += 1
            params = normalize_params(statement.params)
            self._log.log_query(statement.sql, params)
            try:
                self._close_cursor()
                self._cursor = cursor = self._conn.cursor()
                if params:
                    cursor.execute(statement.sql, params)
                else:
                    # No bindings: format-style drivers must not interpolate the text.
                    cursor.execute(statement.sql)
                result = consume(cursor)
                if statement.kind in _WRITE_KINDS:
                    self._conn.commit()
            except self._errors as exc:
                self._log.log_error(statement.kind, exc)
                self._rollback()
                raise StatementError(
                    f"Query execution failed: {exc}", sql=statement.sql, params=params
                ) from exc
            return result
        finally:
            self._lock.release()

    def _rollback(self) -> None:
        try:
            self._conn.rollback()
        except self._errors as exc:
            self._log.logger.warning("Rollback failed: %s", exc)

    def _close_cursor(self) -> None:
        if self._cursor is None:
            return
        cursor, self._cursor = self._cursor, None
        try:
            cursor.close()
        except self._errors as exc:
            self._log.logger.warning("Closing cursor failed: %s", exc)

    def _quote(self, table: str) -> str:
        return self.builder.dialect.quote_identifier(table.strip())


