"""Custom exception hierarchy for crudQL.

All public errors inherit from crudQLError so callers can catch the base
class for any crudQL-specific failure.

Two families matter to callers:

``InvalidInputError``
    The caller handed the builder something structurally wrong (no fields
    to write, no condition for a DELETE, a non-integer LIMIT).  These are
    programming errors and are raised before the driver is touched.

``DriverError``
    The database driver failed (connectivity, syntax, constraint
    violation).  The original driver exception is kept as ``__cause__`` so
    callers can make retry decisions; crudQL itself never retries.
"""
from __future__ import annotations

from typing import Any


class crudQLError(Exception):
    """Base exception for all crudQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code.
        details: Extra context for logging or error responses.
    """

    code: str = "CRUDQL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


# ---------------------------------------------------------------------------
# Invalid input (caller logic errors)
# ---------------------------------------------------------------------------


class InvalidInputError(crudQLError):
    """Raised when structured input cannot produce a statement."""

    code = "INVALID_INPUT"


class EmptyFieldsError(InvalidInputError):
    """Raised when an INSERT or UPDATE has no fields to write."""

    def __init__(self, operation: str, table: str) -> None:
        super().__init__(
            f"{operation} on table '{table}' requires at least one field.",
            code="EMPTY_FIELDS",
            details={"operation": operation, "table": table},
        )


class MissingConditionError(InvalidInputError):
    """Raised when a DELETE has no WHERE condition.

    Full-table deletes must go through ``Client.truncate``.
    """

    def __init__(self, table: str) -> None:
        super().__init__(
            f"DELETE on table '{table}' requires a condition; use truncate() "
            "to empty the whole table.",
            code="MISSING_CONDITION",
            details={"table": table},
        )


class InvalidLimitError(InvalidInputError):
    """Raised when a LIMIT value is not a non-negative integer."""

    def __init__(self, limit: Any) -> None:
        super().__init__(
            f"LIMIT must be a non-negative integer, got {limit!r}.",
            code="INVALID_LIMIT",
            details={"limit": repr(limit)},
        )


class UnknownLiteralError(InvalidInputError):
    """Raised when an explicit SQL literal is not in the literal registry."""

    def __init__(self, token: str, allowed_tokens: list[str]) -> None:
        super().__init__(
            f"SQL literal '{token}' is not registered.",
            code="UNKNOWN_LITERAL",
            details={"token": token, "allowed_tokens": allowed_tokens},
        )


class InvalidIdentifierError(InvalidInputError):
    """Raised when a table or column name is empty."""

    def __init__(self, identifier: Any) -> None:
        super().__init__(
            f"Invalid SQL identifier: {identifier!r}.",
            code="INVALID_IDENTIFIER",
            details={"identifier": repr(identifier)},
        )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(crudQLError):
    """Raised when client configuration is unusable.

    Args:
        message: Human-readable description.
        option: The configuration key at fault, if any.
    """

    code = "CONFIG_ERROR"

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message, details={"option": option} if option else None)
        self.option = option


# ---------------------------------------------------------------------------
# Driver failures
# ---------------------------------------------------------------------------


class DriverError(crudQLError):
    """Raised when the database driver fails to run a statement.

    Args:
        message: Human-readable description.
        sql: The SQL text being executed, if any.
        params: The bound parameters, if any.
    """

    code = "DRIVER_ERROR"

    def __init__(
        self,
        message: str,
        sql: str | None = None,
        params: tuple[Any, ...] | None = None,
    ) -> None:
        super().__init__(message, details={"sql": sql} if sql else None)
        self.sql = sql
        self.params = params


class ConnectionUnavailableError(DriverError):
    """Raised when no usable connection exists (never opened or closed)."""

    code = "CONNECTION_UNAVAILABLE"


class StatementError(DriverError):
    """Raised when the driver rejects or fails a statement."""

    code = "STATEMENT_ERROR"


class ExecutionTimeoutError(crudQLError):
    """Raised when the shared connection could not be acquired in time."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"Timed out after {timeout}s waiting for the database connection.",
            code="EXECUTION_TIMEOUT",
            details={"timeout": timeout},
        )
        self.timeout = timeout
