"""Pydantic model for client connection settings.

Settings are passed to the :class:`~crudql.execute.client.Client`
constructor; there is no process-wide settings map.  Unknown keys are
ignored so a larger application config dict can be handed over as-is::

    config = ClientConfig.from_mapping({
        "host": "localhost",
        "user": "root",
        "password": "root",
        "database": "app",
        "results": "object",
        "debug": True,          # ignored
    })
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from crudql.errors import ConfigError

#: How rows are handed back to callers.
ResultShape = Literal["structured", "associative"]

# Legacy spellings of the result shape.
_SHAPE_ALIASES: dict[str, str] = {
    "object": "structured",
    "obj": "structured",
    "assoc": "associative",
    "array": "associative",
    "dict": "associative",
}


class ClientConfig(BaseModel):
    """Connection and result settings for a single client.

    Attributes:
        host: Database server host.
        user: Login user.
        password: Login password.
        database: Database (schema) name; for SQLite the file path or
            ``":memory:"``.
        result_shape: ``"structured"`` rows support attribute access,
            ``"associative"`` rows are plain dicts.  ``results`` is accepted
            as an alias.
        charset: Connection character set.
        target: Registered dialect and connector name (``"mysql"``,
            ``"sqlite"`` or a custom registration).
        port: Server port (ignored for SQLite).
        connect_timeout: Seconds to wait when opening the connection.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    host: str = ""
    user: str = ""
    password: str = Field(default="", repr=False)
    database: str = ""
    result_shape: ResultShape = Field(
        default="structured",
        validation_alias=AliasChoices("result_shape", "results", "resultShape"),
    )
    charset: str = "utf8"
    target: str = "mysql"
    port: int = 3306
    connect_timeout: float | None = None

    @field_validator("result_shape", mode="before")
    @classmethod
    def _normalize_shape(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _SHAPE_ALIASES.get(v.lower(), v.lower())
        return v

    @field_validator("target", mode="before")
    @classmethod
    def _check_target(cls, v: Any) -> Any:
        from crudql.compile.registry import DialectFactory

        if isinstance(v, str) and v not in DialectFactory.registered_targets():
            raise ValueError(
                f"unknown target '{v}'; registered: {DialectFactory.registered_targets()}"
            )
        return v

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from a plain mapping, ignoring unknown keys.

        Raises:
            ConfigError: If a recognised option has an invalid value.
        """
        try:
            return cls.model_validate(dict(options))
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            option = ".".join(str(p) for p in first.get("loc", ())) or None
            raise ConfigError(
                f"Invalid client configuration: {first.get('msg', exc)}",
                option=option,
            ) from exc

    @classmethod
    def from_env(
        cls,
        prefix: str = "CRUDQL_",
        env_file: str | Path | None = None,
    ) -> "ClientConfig":
        """Build a config from ``{prefix}HOST``, ``{prefix}USER`` ... variables.

        Names are matched case-insensitively.  Values are validated by
        :meth:`from_mapping`, so a bad value raises :class:`ConfigError`.

        Args:
            prefix: Environment variable prefix.
            env_file: Optional dotenv file read in addition to the process
                environment.
        """
        settings = ClientEnvSettings(_env_prefix=prefix, _env_file=env_file)
        return cls.from_mapping(settings.model_dump(exclude_none=True))


class ClientEnvSettings(BaseSettings):
    """Raw client options read from the environment.

    Every field stays a string here; :class:`ClientConfig` does the typing.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUDQL_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str | None = None
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    database: str | None = None
    result_shape: str | None = None
    charset: str | None = None
    target: str | None = None
    port: str | None = None
    connect_timeout: str | None = None
