"""crudQL – parameterized CRUD statements over any DB-API driver.

Build statements. Don't concatenate them.

Public API
----------
``StatementBuilder``
    Turn a table name plus a column → value mapping into SQL text and an
    ordered parameter tuple.  Whitelisted SQL literals (``NOW()``,
    ``NULL`` ...) are written verbatim; every other value is bound.

``Client``
    Own a connection, execute built statements and adapt the cursor into
    the result the caller wants (last insert id, affected rows, one row,
    all rows, a scalar).

Re-exported types
-----------------
``BuiltStatement``, ``NoOpStatement``, ``SQLLiteral``, ``BoundParam``,
``LiteralRegistry``, ``ClientConfig``, and all error classes.

Extensibility
-------------
New dialects can be registered via::

    from crudql.compile.registry import DialectFactory

    @DialectFactory.register("postgres")
    class PostgresDialect(SQLDialect):
        ...

and a matching connector via ``ConnectorFactory``.  After registration,
``Client`` picks both up for any ``ClientConfig`` with that ``target``.
"""

from __future__ import annotations

from crudql.compile.base import BuiltStatement, NoOpStatement, SQLDialect
from crudql.compile.builder import StatementBuilder
from crudql.compile.mysql import MySQLDialect
from crudql.compile.registry import DialectFactory
from crudql.compile.sqlite import SQLiteDialect
from crudql.errors import (
    ConfigError,
    ConnectionUnavailableError,
    DriverError,
    EmptyFieldsError,
    ExecutionTimeoutError,
    InvalidIdentifierError,
    InvalidInputError,
    InvalidLimitError,
    MissingConditionError,
    StatementError,
    UnknownLiteralError,
    crudQLError,
)
from crudql.execute.client import Client
from crudql.execute.connectors import (
    Connector,
    ConnectorFactory,
    MySQLConnector,
    SQLiteConnector,
)
from crudql.schema.config import ClientConfig
from crudql.schema.literals import (
    DEFAULT_LITERALS,
    NOW,
    NULL,
    TIMESTAMP,
    UNIX_TIMESTAMP,
    BoundParam,
    LiteralRegistry,
    SQLLiteral,
    classify,
)

# ---------------------------------------------------------------------------
# Register built-in dialects and connectors
# ---------------------------------------------------------------------------

DialectFactory.register_class("mysql", MySQLDialect)
DialectFactory.register_class("sqlite", SQLiteDialect)
ConnectorFactory.register_class("mysql", MySQLConnector)
ConnectorFactory.register_class("sqlite", SQLiteConnector)

__all__ = [
    # Core
    "StatementBuilder",
    "Client",
    "connect",
    # Statements
    "BuiltStatement",
    "NoOpStatement",
    # Literals
    "SQLLiteral",
    "BoundParam",
    "LiteralRegistry",
    "DEFAULT_LITERALS",
    "NOW",
    "TIMESTAMP",
    "UNIX_TIMESTAMP",
    "NULL",
    "classify",
    # Configuration
    "ClientConfig",
    # Dialects and connectors
    "SQLDialect",
    "DialectFactory",
    "MySQLDialect",
    "SQLiteDialect",
    "Connector",
    "ConnectorFactory",
    "MySQLConnector",
    "SQLiteConnector",
    # Errors
    "crudQLError",
    "InvalidInputError",
    "EmptyFieldsError",
    "MissingConditionError",
    "InvalidLimitError",
    "UnknownLiteralError",
    "InvalidIdentifierError",
    "ConfigError",
    "DriverError",
    "ConnectionUnavailableError",
    "StatementError",
    "ExecutionTimeoutError",
]


def connect(**options) -> Client:
    """Open a :class:`Client` from keyword options.

    Unknown options are ignored::

        db = crudql.connect(host="localhost", user="root", password="root",
                            database="app", results="object")

    Raises:
        ConfigError: If a recognised option has an invalid value.
        ConnectionUnavailableError: If the driver cannot connect.
    """
    return Client(ClientConfig.from_mapping(options))
