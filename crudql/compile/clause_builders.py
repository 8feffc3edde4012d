"""Clause-level SQL builders.

Each class handles exactly one SQL fragment.  All of them render values
through a shared :class:`ValueBuilder`, which writes placeholders into the
text and bound values into the statement's :class:`ParamAccumulator` in
the same step, so the two can never drift apart.

Classes
-------
ValueBuilder        - one value: literal token or placeholder
InsertValuesBuilder - ``(<columns>) VALUES (<values>)``
AssignmentBuilder   - ``<col> = <value>, ...`` (UPDATE ... SET)
ConditionBuilder    - ``<col> = <value> AND ...`` (WHERE)
LimitBuilder        - ``LIMIT <n>``
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from crudql.compile.context import BuildContext, ParamAccumulator
from crudql.errors import InvalidLimitError
from crudql.schema.literals import SQLLiteral, classify


class ValueBuilder:
    """Renders a single field or condition value."""

    def __init__(self, ctx: BuildContext, runtime: ParamAccumulator) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, value: Any) -> str:
        classified = classify(
            value, self._ctx.registry, self._ctx.match_marker_strings
        )
        if isinstance(classified, SQLLiteral):
            return classified.token
        return self._runtime.add_value(classified.value, self._ctx.dialect.placeholder())


class InsertValuesBuilder:
    """Builds ``(a, b) VALUES (?, NOW())`` for an INSERT."""

    def __init__(self, ctx: BuildContext, value_builder: ValueBuilder) -> None:
        self._ctx = ctx
        self._value = value_builder

    def build(self, fields: Mapping[str, Any]) -> str:
        columns: list[str] = []
        values: list[str] = []
        for column, value in fields.items():
            columns.append(self._ctx.identifier(column))
            values.append(self._value.build(value))
        return f"({', '.join(columns)}) VALUES ({', '.join(values)})"


class AssignmentBuilder:
    """Builds the ``a = ?, b = NOW()`` list of an UPDATE."""

    def __init__(self, ctx: BuildContext, value_builder: ValueBuilder) -> None:
        self._ctx = ctx
        self._value = value_builder

    def build(self, fields: Mapping[str, Any]) -> str:
        parts = [
            f"{self._ctx.identifier(column)} = {self._value.build(value)}"
            for column, value in fields.items()
        ]
        return ", ".join(parts)


class ConditionBuilder:
    """Builds an AND-conjunction of equalities, in input order."""

    def __init__(self, ctx: BuildContext, value_builder: ValueBuilder) -> None:
        self._ctx = ctx
        self._value = value_builder

    def build(self, where: Mapping[str, Any]) -> str:
        parts = [
            f"{self._ctx.identifier(column)} = {self._value.build(value)}"
            for column, value in where.items()
        ]
        return " AND ".join(parts)


class LimitBuilder:
    """Builds ``LIMIT n`` from a caller-supplied row limit.

    ``None``, ``0`` and ``""`` mean "no limit" and produce no clause.  Any
    other value must be a non-negative integer (or a string / integral
    float spelling one); it is converted with ``int`` before it reaches the
    text.
    """

    @staticmethod
    def coerce(limit: Any) -> int | None:
        """Return the integer limit, or ``None`` when no clause is wanted.

        Raises:
            InvalidLimitError: If ``limit`` is not a non-negative integer.
        """
        if limit is None or limit == "":
            return None
        if isinstance(limit, bool):
            raise InvalidLimitError(limit)
        if isinstance(limit, int):
            value = limit
        elif isinstance(limit, float):
            if not math.isfinite(limit) or not limit.is_integer():
                raise InvalidLimitError(limit)
            value = int(limit)
        elif isinstance(limit, str):
            text = limit.strip()
            if not text.isdecimal():
                raise InvalidLimitError(limit)
            value = int(text)
        else:
            raise InvalidLimitError(limit)
        if value < 0:
            raise InvalidLimitError(limit)
        return value or None

    def build(self, limit: Any) -> str:
        value = self.coerce(limit)
        return f"LIMIT {value}" if value is not None else ""
