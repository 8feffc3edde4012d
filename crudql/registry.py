"""Name → class registries.

``Registry`` holds the register / create / list mechanics shared by
:class:`~crudql.compile.registry.DialectFactory` and
:class:`~crudql.execute.connectors.ConnectorFactory`.  Each subclass gets
its own table and a ``label`` used in error messages.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar, Generic, TypeVar

from crudql.errors import ConfigError

T = TypeVar("T")


class Registry(Generic[T]):
    """Registry mapping names to classes that are instantiated without arguments."""

    label: ClassVar[str] = "entry"
    _entries: ClassVar[dict[str, type]]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._entries = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[T]], type[T]]:
        """Decorator that registers a class under ``name``."""

        def decorator(entry_cls: type[T]) -> type[T]:
            cls._entries[name] = entry_cls
            return entry_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, entry_cls: type[T]) -> None:
        """Register a class without using the decorator form."""
        cls._entries[name] = entry_cls

    @classmethod
    def create(cls, name: str) -> T:
        """Instantiate the class registered for ``name``.

        Raises:
            ConfigError: If nothing is registered for ``name``.
        """
        entry_cls = cls._entries.get(name)
        if entry_cls is None:
            raise ConfigError(
                f"Unsupported {cls.label}: '{name}'. "
                f"Registered: {cls.registered_targets()}.",
                option="target",
            )
        return entry_cls()

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered names."""
        return sorted(cls._entries)
