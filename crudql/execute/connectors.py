"""Driver connectors (how a :class:`ClientConfig` becomes a DB-API connection).

Each connector knows how to open a connection for one target and which
exception classes its driver raises.  ``ConnectorFactory`` mirrors
:class:`~crudql.compile.registry.DialectFactory`: register once, look up by
``config.target``.

The MySQL connector needs the optional dependency::

    pip install "crudql[mysql]"
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from typing import Any

from crudql.errors import ConfigError
from crudql.registry import Registry
from crudql.schema.config import ClientConfig


class Connector(ABC):
    """Opens DB-API 2.0 connections for one backend."""

    @abstractmethod
    def connect(self, config: ClientConfig) -> Any:
        """Open and return a new connection.

        Raises:
            Exception: Whatever the driver raises; the client wraps it.
        """

    @property
    @abstractmethod
    def error_types(self) -> tuple[type[BaseException], ...]:
        """Exception classes raised by the driver for database failures."""


class SQLiteConnector(Connector):
    """Connects with the standard-library ``sqlite3`` module.

    ``config.database`` is the file path; empty means ``:memory:``.
    """

    def connect(self, config: ClientConfig) -> sqlite3.Connection:
        timeout = config.connect_timeout if config.connect_timeout is not None else 5.0
        # Access is serialised by the client's lock.
        return sqlite3.connect(
            config.database or ":memory:",
            timeout=timeout,
            check_same_thread=False,
        )

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        # sqlite3 raises OverflowError and ValueError while binding values.
        return (sqlite3.Error, OverflowError, ValueError)


class MySQLConnector(Connector):
    """Connects with ``PyMySQL``.

    ``SET NAMES <charset>`` is issued on connect, and autocommit stays off;
    the client commits after each write.
    """

    def connect(self, config: ClientConfig) -> Any:
        pymysql = self._driver()
        options: dict[str, Any] = {
            "host": config.host,
            "user": config.user,
            "password": config.password,
            "database": config.database,
            "port": config.port,
            "charset": config.charset,
            "init_command": f"SET NAMES {config.charset}",
            "autocommit": False,
        }
        if config.connect_timeout is not None:
            options["connect_timeout"] = config.connect_timeout
        return pymysql.connect(**options)

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        return (self._driver().Error,)

    @staticmethod
    def _driver() -> Any:
        try:
            import pymysql
        except ImportError as exc:
            raise ConfigError(
                "The 'mysql' target requires PyMySQL: pip install \"crudql[mysql]\"",
                option="target",
            ) from exc
        return pymysql


class ConnectorFactory(Registry[Connector]):
    """Registry mapping connection targets to :class:`Connector` classes."""

    label = "connection target"
