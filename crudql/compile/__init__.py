"""crudQL statement building layer: CRUD intent → parameterized SQL."""
from crudql.compile.base import BuiltStatement, NoOpStatement, SQLDialect
from crudql.compile.builder import StatementBuilder
from crudql.compile.mysql import MySQLDialect
from crudql.compile.sqlite import SQLiteDialect

__all__ = [
    "BuiltStatement",
    "NoOpStatement",
    "SQLDialect",
    "StatementBuilder",
    "MySQLDialect",
    "SQLiteDialect",
]
