"""Logging helpers for crudQL.

crudQL logs through the standard :mod:`logging` package under the
``crudql`` logger and installs only a ``NullHandler``; applications decide
where records go::

    import logging
    logging.getLogger("crudql").setLevel(logging.DEBUG)
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

ROOT_LOGGER_NAME = "crudql"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the ``crudql`` namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class QueryLogger:
    """Logger for statement execution and connection lifecycle."""

    def __init__(self, name: str = "crudql.execute") -> None:
        self.logger = get_logger(name)

    def log_query(self, query: str, params: Sequence[Any] | None = None) -> None:
        """Log a statement about to be executed."""
        if params:
            self.logger.debug("SQL Query: %s | Params: %r", query, tuple(params))
        else:
            self.logger.debug("SQL Query: %s", query)

    def log_connection(self, operation: str) -> None:
        """Log connection operations (open, close)."""
        self.logger.debug("Database connection: %s", operation)

    def log_error(self, operation: str, error: BaseException) -> None:
        """Log a driver failure with its traceback."""
        self.logger.error("Database error in %s: %s", operation, error, exc_info=error)
