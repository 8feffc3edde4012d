"""crudQL schema models: SQL literals, bound parameters, client configuration."""
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

__all__ = [
    "ClientConfig",
    "DEFAULT_LITERALS",
    "NOW",
    "NULL",
    "TIMESTAMP",
    "UNIX_TIMESTAMP",
    "BoundParam",
    "LiteralRegistry",
    "SQLLiteral",
    "classify",
]
