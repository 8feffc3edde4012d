"""Build context value objects.

``BuildContext`` packages the static ``(dialect, registry, options)`` data
clump shared by ``StatementBuilder`` and every clause-level sub-builder.
``ParamAccumulator`` is the per-statement parameter state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from crudql.compile.base import SQLDialect
from crudql.errors import InvalidIdentifierError
from crudql.schema.literals import LiteralRegistry


@dataclass(frozen=True)
class BuildContext:
    """Immutable context for statement building.

    Attributes:
        dialect: Dialect-specific renderer.
        registry: SQL tokens allowed verbatim in statement text.
        match_marker_strings: Treat plain strings equal to a registered
            token as literals.
        quote_identifiers: Quote table and column names with the dialect's
            quoting rules.
    """

    dialect: SQLDialect
    registry: LiteralRegistry
    match_marker_strings: bool = True
    quote_identifiers: bool = False

    def identifier(self, name: Any) -> str:
        """Render a table or column name.

        Names are stripped of surrounding whitespace and interpolated into
        the text; they are never bound.

        Raises:
            InvalidIdentifierError: If ``name`` is not a non-empty string.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidIdentifierError(name)
        name = name.strip()
        if self.quote_identifiers:
            return self.dialect.quote_identifier(name)
        return name


@dataclass
class ParamAccumulator:
    """Collects bound values for one statement, in placeholder order."""

    params: list[Any] = field(default_factory=list)

    def add_value(self, value: Any, placeholder: str) -> str:
        """Store a bound value and return the placeholder standing in for it."""
        self.params.append(value)
        return placeholder
