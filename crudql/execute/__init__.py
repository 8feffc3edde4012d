"""crudQL execution layer: built statements → DB-API driver → result shapes."""
from crudql.execute.client import Client
from crudql.execute.connectors import (
    Connector,
    ConnectorFactory,
    MySQLConnector,
    SQLiteConnector,
)

__all__ = [
    "Client",
    "Connector",
    "ConnectorFactory",
    "MySQLConnector",
    "SQLiteConnector",
]
