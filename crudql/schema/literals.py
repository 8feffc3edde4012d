"""Typed values for statement building: SQL literals vs. bound parameters.

Every value handed to the builder ends up as exactly one of two things:

``SQLLiteral``
    A whitelisted SQL token (``NOW()``, ``NULL`` ...) written verbatim into
    the statement text.  Never bound.

``BoundParam``
    Anything else.  Emitted as a positional placeholder and appended to the
    parameter sequence.

Usage::

    from crudql.schema.literals import NOW, classify

    classify(NOW)            # SQLLiteral(token='NOW()')
    classify("NOW()")        # SQLLiteral(token='NOW()')  (exact match)
    classify("now()")        # BoundParam(value='now()')
    classify(42)             # BoundParam(value=42)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from crudql.errors import UnknownLiteralError

_FROZEN = ConfigDict(extra="forbid", frozen=True)


class SQLLiteral(BaseModel):
    """A raw SQL token spliced into the statement text: ``SQLLiteral("NOW()")``."""

    model_config = _FROZEN

    token: str

    def __init__(self, token: str | None = None, **data: Any) -> None:
        if token is not None:
            data["token"] = token
        super().__init__(**data)

    def __str__(self) -> str:
        return self.token


class BoundParam(BaseModel):
    """A value passed to the driver separately from the SQL text."""

    model_config = _FROZEN

    value: Any

    def __init__(self, value: Any = None, **data: Any) -> None:
        data.setdefault("value", value)
        super().__init__(**data)


#: Result of :func:`classify`.
Classified = Union[SQLLiteral, BoundParam]


class LiteralRegistry:
    """A closed, immutable set of SQL tokens that may be written verbatim.

    Membership is a byte-exact test: ``"NOW()"`` matches, ``"now()"`` and
    ``" NOW()"`` do not.  Registries never change after construction;
    :meth:`extend` returns a new one.

    Args:
        tokens: The allowed tokens.
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens: frozenset[str] = frozenset(tokens)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token in self._tokens

    def __iter__(self):
        return iter(sorted(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"LiteralRegistry({sorted(self._tokens)!r})"

    def contains(self, token: object) -> bool:
        """Return ``True`` if ``token`` is exactly one of the registered tokens."""
        return token in self

    def extend(self, *tokens: str) -> "LiteralRegistry":
        """Return a new registry with ``tokens`` added."""
        return LiteralRegistry(self._tokens | frozenset(tokens))

    @property
    def tokens(self) -> frozenset[str]:
        return self._tokens


#: The markers recognised out of the box.
DEFAULT_LITERALS = LiteralRegistry(
    ["NOW()", "TIMESTAMP()", "UNIX_TIMESTAMP()", "NULL"]
)

NOW = SQLLiteral("NOW()")
TIMESTAMP = SQLLiteral("TIMESTAMP()")
UNIX_TIMESTAMP = SQLLiteral("UNIX_TIMESTAMP()")
NULL = SQLLiteral("NULL")


def classify(
    value: Any,
    registry: LiteralRegistry = DEFAULT_LITERALS,
    match_strings: bool = True,
) -> Classified:
    """Decide whether ``value`` is written verbatim or bound as a parameter.

    Args:
        value: The field or condition value.
        registry: Tokens allowed to appear verbatim.
        match_strings: When ``True`` a plain ``str`` equal to a registered
            token is treated as that literal.  When ``False`` only explicit
            :class:`SQLLiteral` values are spliced, so the string ``"NULL"``
            is bound as text.

    Returns:
        A :class:`SQLLiteral` or a :class:`BoundParam`.

    Raises:
        UnknownLiteralError: If ``value`` is a :class:`SQLLiteral` whose
            token is not in ``registry``.
    """
    if isinstance(value, SQLLiteral):
        if value.token not in registry:
            raise UnknownLiteralError(value.token, list(registry))
        return value
    if isinstance(value, BoundParam):
        return value
    if match_strings and value in registry:
        return SQLLiteral(value)
    return BoundParam(value)
