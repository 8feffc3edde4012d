"""Core CRUD intent → SQL statement building.

``StatementBuilder`` is the top-level orchestrator.  It wires together the
clause-level sub-builders, then assembles the statement.  All
dialect-specific behaviour is delegated to the injected ``SQLDialect``.

Sub-builder hierarchy
---------------------
StatementBuilder
  ├── ValueBuilder         (clause_builders.py)
  ├── InsertValuesBuilder  (clause_builders.py)
  ├── AssignmentBuilder    (clause_builders.py)
  ├── ConditionBuilder     (clause_builders.py)
  └── LimitBuilder         (clause_builders.py)

Parameter ordering
------------------
A single :class:`~crudql.compile.context.ParamAccumulator` is created per
``build_*`` call and shared by every sub-builder, which render clauses in
text order.  For an UPDATE that means SET values first, then WHERE values.

Invalid input
-------------
Structurally invalid input (no fields, a DELETE without a condition, a bad
LIMIT, an unregistered literal) never raises from a ``build_*`` method: a
falsy :class:`~crudql.compile.base.NoOpStatement` carrying the error is
returned instead, and no SQL text is produced.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sized
from typing import Any

from crudql.compile.base import BuiltStatement, NoOpStatement, SQLDialect, StatementKind
from crudql.compile.clause_builders import (
    AssignmentBuilder,
    ConditionBuilder,
    InsertValuesBuilder,
    LimitBuilder,
    ValueBuilder,
)
from crudql.compile.context import BuildContext, ParamAccumulator
from crudql.compile.registry import DialectFactory
from crudql.errors import EmptyFieldsError, InvalidInputError, MissingConditionError
from crudql.schema.literals import DEFAULT_LITERALS, Classified, LiteralRegistry, classify

#: Either outcome of a ``build_*`` call.
BuildResult = BuiltStatement | NoOpStatement


class StatementBuilder:
    """Builds parameterized INSERT / UPDATE / DELETE statements.

    Args:
        dialect: Dialect instance or registered dialect name.  Defaults to
            ``"sqlite"`` (``?`` placeholders).
        registry: SQL tokens that may be written verbatim.
        match_marker_strings: When ``True`` (default) a plain string equal to
            a registered token, e.g. ``"NOW()"``, is written verbatim.  Set to
            ``False`` to require explicit :class:`SQLLiteral` values.
        quote_identifiers: Quote table and column names using the dialect's
            rules.  Off by default; identifiers are interpolated as given
            (after stripping whitespace), so they must come from trusted code.

    Example::

        builder = StatementBuilder()
        stmt = builder.build_insert("users", {"name": "Bennett", "created": "NOW()"})
        stmt.sql     # 'INSERT INTO users (name, created) VALUES (?, NOW())'
        stmt.params  # ('Bennett',)
    """

    def __init__(
        self,
        dialect: SQLDialect | str = "sqlite",
        registry: LiteralRegistry = DEFAULT_LITERALS,
        match_marker_strings: bool = True,
        quote_identifiers: bool = False,
    ) -> None:
        if isinstance(dialect, str):
            dialect = DialectFactory.create(dialect)
        self._ctx = BuildContext(
            dialect=dialect,
            registry=registry,
            match_marker_strings=match_marker_strings,
            quote_identifiers=quote_identifiers,
        )
        self._limit = LimitBuilder()

    @property
    def dialect(self) -> SQLDialect:
        return self._ctx.dialect

    @property
    def registry(self) -> LiteralRegistry:
        return self._ctx.registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, value: Any) -> Classified:
        """Classify ``value`` as a verbatim literal or a bound parameter.

        Raises:
            UnknownLiteralError: For an explicit literal outside the registry.
        """
        return classify(value, self._ctx.registry, self._ctx.match_marker_strings)

    def build_insert(self, table: str, fields: Mapping[str, Any]) -> BuildResult:
        """Build ``INSERT INTO <table> (<cols>) VALUES (<values>)``.

        Args:
            table: Target table name.
            fields: Column → value mapping; iteration order is column order.

        Returns:
            A :class:`BuiltStatement`, or a :class:`NoOpStatement` when
            ``fields`` is empty.
        """
        try:
            if not fields:
                raise EmptyFieldsError("INSERT", str(table))
            runtime = ParamAccumulator()
            sub = self._make_sub_builders(runtime)
            table_sql = self._ctx.identifier(table)
            sql = f"INSERT INTO {table_sql} {sub['values'].build(fields)}"
        except InvalidInputError as exc:
            return NoOpStatement(exc)
        return self._statement(sql, runtime, "insert")

    def build_update(
        self,
        table: str,
        fields: Mapping[str, Any],
        where: Mapping[str, Any] | None = None,
        limit: Any = None,
    ) -> BuildResult:
        """Build ``UPDATE <table> SET ... [WHERE ...] [LIMIT n]``.

        An empty or missing ``where`` updates every row; that is allowed and
        left to the caller.

        Args:
            table: Target table name.
            fields: Column → new value mapping.
            where: Column → value equalities joined with ``AND``.
            limit: Optional maximum number of rows.  ``0``, ``""`` and
                ``None`` all mean "no LIMIT clause", so ``limit=0`` does
                not restrict the update to zero rows; combined with an empty
                ``where`` it updates the whole table.

        Returns:
            A :class:`BuiltStatement`, or a :class:`NoOpStatement` when
            ``fields`` is empty or ``limit`` is invalid.
        """
        try:
            if not fields:
                raise EmptyFieldsError("UPDATE", str(table))
            runtime = ParamAccumulator()
            sub = self._make_sub_builders(runtime)
            parts = [
                f"UPDATE {self._ctx.identifier(table)}",
                f"SET {sub['set'].build(fields)}",
            ]
            if where:
                parts.append(f"WHERE {sub['where'].build(where)}")
            limit_sql = self._limit.build(limit)
            if limit_sql:
                parts.append(limit_sql)
        except InvalidInputError as exc:
            return NoOpStatement(exc)
        return self._statement(" ".join(parts), runtime, "update")

    def build_delete(
        self,
        table: str,
        where: Mapping[str, Any],
        limit: Any = None,
    ) -> BuildResult:
        """Build ``DELETE FROM <table> WHERE ... [LIMIT n]``.

        A condition is always required; see ``Client.truncate`` for emptying
        a table.
        As with :meth:`build_update`, ``limit=0`` means no LIMIT clause.

        Returns:
            A :class:`BuiltStatement`, or a :class:`NoOpStatement` when
            ``where`` is empty or ``limit`` is invalid.
        """
        try:
            if not where:
                raise MissingConditionError(str(table))
            runtime = ParamAccumulator()
            sub = self._make_sub_builders(runtime)
            parts = [
                f"DELETE FROM {self._ctx.identifier(table)}",
                f"WHERE {sub['where'].build(where)}",
            ]
            limit_sql = self._limit.build(limit)
            if limit_sql:
                parts.append(limit_sql)
        except InvalidInputError as exc:
            return NoOpStatement(exc)
        return self._statement(" ".join(parts), runtime, "delete")

    def build_select_count(self, sql: str, params: Any = ()) -> BuiltStatement:
        """Wrap raw SQL whose first column of the first row is wanted."""
        return self._passthrough(sql, params, "select_count")

    def build_select_row(self, sql: str, params: Any = ()) -> BuiltStatement:
        """Wrap raw SQL whose first row is wanted."""
        return self._passthrough(sql, params, "select_row")

    def build_select_all(self, sql: str, params: Any = ()) -> BuiltStatement:
        """Wrap raw SQL whose rows are all wanted."""
        return self._passthrough(sql, params, "select_all")

    def build_raw(self, sql: str, params: Any = ()) -> BuiltStatement:
        """Wrap arbitrary raw SQL."""
        return self._passthrough(sql, params, "raw")

    def in_placeholders(self, values: Collection[Any]) -> str:
        """Return one placeholder per value, comma-separated, for ``IN (...)``.

        ``values`` must be a sized collection, since the same values are
        passed again as bindings.  One-shot iterators raise ``TypeError``.

        Usage::

            ids = [1, 48, 51]
            sql = f"SELECT name FROM users WHERE id IN ({builder.in_placeholders(ids)})"
            client.get_results(sql, ids)
        """
        if not isinstance(values, Sized):
            raise TypeError(
                "in_placeholders() needs a sized collection; materialise "
                "iterators with list() first."
            )
        return self._ctx.dialect.placeholders(len(values))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _statement(
        self, sql: str, runtime: ParamAccumulator, kind: StatementKind
    ) -> BuiltStatement:
        return BuiltStatement(
            sql=sql,
            params=tuple(runtime.params),
            dialect=self._ctx.dialect.dialect_name,
            kind=kind,
        )

    def _passthrough(self, sql: str, params: Any, kind: StatementKind) -> BuiltStatement:
        return BuiltStatement(
            sql=sql,
            params=normalize_params(params),
            dialect=self._ctx.dialect.dialect_name,
            kind=kind,
        )

    def _make_sub_builders(self, runtime: ParamAccumulator) -> dict:
        value_builder = ValueBuilder(self._ctx, runtime)
        return {
            "value": value_builder,
            "values": InsertValuesBuilder(self._ctx, value_builder),
            "set": AssignmentBuilder(self._ctx, value_builder),
            "where": ConditionBuilder(self._ctx, value_builder),
        }


def normalize_params(params: Any) -> tuple[Any, ...]:
    """Turn caller-supplied bindings into a positional tuple.

    ``None`` means no bindings; a lone scalar (including a string) becomes a
    one-element tuple; any other sequence keeps its order.
    """
    if params is None:
        return ()
    if isinstance(params, (str, bytes, bytearray)) or not isinstance(params, Iterable):
        return (params,)
    if isinstance(params, Mapping):
        raise TypeError("Bindings are positional; pass a sequence, not a mapping.")
    return tuple(params)
