"""Dialect registry.

``DialectFactory``
    Central registry for :class:`~crudql.compile.base.SQLDialect`
    implementations.  Register a new dialect once; ``StatementBuilder`` and
    ``Client`` look it up by name.

Usage::

    from crudql.compile.registry import DialectFactory

    @DialectFactory.register("postgres")
    class PostgresDialect(SQLDialect):
        ...

    dialect = DialectFactory.create("postgres")
"""

from __future__ import annotations

from crudql.compile.base import SQLDialect
from crudql.registry import Registry


class DialectFactory(Registry[SQLDialect]):
    """Registry mapping dialect names to :class:`SQLDialect` classes."""

    label = "dialect"
