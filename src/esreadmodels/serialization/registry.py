"""
Type tag registry for read models.

Every stored document carries the type tag of the class that produced it.
The registry maps tags back to classes when documents are loaded, and
classes to tags when they are saved.

Usage:
    @register_read_model
    class OrderSummary(ReadModel):
        ...

    @register_read_model(type_name="order.summary", registry=registry)
    class OrderSummaryV2(ReadModel):
        ...

    registry.get("order.summary")  # -> OrderSummaryV2
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar, overload

if TYPE_CHECKING:
    from esreadmodels.readmodels.base import ReadModel

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound="ReadModel")


class ReadModelTypeNotFoundError(KeyError):
    """
    Raised when a stored type tag has no registered class.

    Attributes:
        type_name: The unknown tag
        available_types: Tags registered at the time of the lookup
    """

    def __init__(self, type_name: str, available_types: list[str]) -> None:
        self.type_name = type_name
        self.available_types = available_types
        known = ", ".join(available_types) or "none"
        super().__init__(
            f"No read model registered for type tag '{type_name}' (registered: {known})"
        )


class DuplicateReadModelTypeError(ValueError):
    """Raised when a type tag is already taken by another class."""

    def __init__(
        self,
        type_name: str,
        existing_class: type[ReadModel],
        new_class: type[ReadModel],
    ) -> None:
        self.type_name = type_name
        self.existing_class = existing_class
        self.new_class = new_class
        super().__init__(
            f"Type tag '{type_name}' already belongs to {existing_class.__qualname__}, "
            f"cannot assign it to {new_class.__qualname__}"
        )


class ReadModelRegistry:
    """
    Thread-safe two-way mapping between type tags and read model classes.

    Registering the same class under the same tag again is a no-op. A
    class registered under several tags is saved under the first one.

    The module-level ``default_registry`` is used unless a serializer is
    given its own registry, which tests do for isolation.
    """

    def __init__(self) -> None:
        self._by_tag: dict[str, type[ReadModel]] = {}
        self._by_class: dict[type[ReadModel], str] = {}
        self._lock = threading.RLock()

    def register(
        self,
        model_class: type[TModel],
        type_name: str | None = None,
    ) -> type[TModel]:
        """
        Register ``model_class`` under ``type_name`` or its ``type_name()``.

        Returns:
            ``model_class``, so this works as a decorator

        Raises:
            DuplicateReadModelTypeError: If the tag belongs to another class
        """
        tag = type_name if type_name is not None else model_class.type_name()

        with self._lock:
            existing = self._by_tag.get(tag)
            if existing is model_class:
                return model_class
            if existing is not None:
                raise DuplicateReadModelTypeError(tag, existing, model_class)

            self._by_tag[tag] = model_class
            self._by_class.setdefault(model_class, tag)

        logger.debug(
            "Registered read model %s as '%s'",
            model_class.__qualname__,
            tag,
            extra={"readmodel_type": tag},
        )
        return model_class

    def get(self, type_name: str) -> type[ReadModel]:
        """
        Resolve a stored type tag.

        Raises:
            ReadModelTypeNotFoundError: If nothing is registered under the tag
        """
        with self._lock:
            model_class = self._by_tag.get(type_name)
            if model_class is None:
                raise ReadModelTypeNotFoundError(type_name, sorted(self._by_tag))
            return model_class

    def type_name_of(self, model_class: type[ReadModel]) -> str | None:
        """Tag ``model_class`` is registered under, or None."""
        with self._lock:
            return self._by_class.get(model_class)

    def unregister(self, type_name: str) -> bool:
        """Drop a tag. Returns False if it was not registered."""
        with self._lock:
            model_class = self._by_tag.pop(type_name, None)
            if model_class is None:
                return False
            if self._by_class.get(model_class) == type_name:
                del self._by_class[model_class]
            return True

    def list_types(self) -> list[str]:
        with self._lock:
            return sorted(self._by_tag)

    def __contains__(self, type_name: object) -> bool:
        with self._lock:
            return type_name in self._by_tag

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_tag)


default_registry = ReadModelRegistry()


@overload
def register_read_model(model_class: type[TModel]) -> type[TModel]: ...


@overload
def register_read_model(
    model_class: None = None,
    *,
    type_name: str | None = None,
    registry: ReadModelRegistry | None = None,
) -> Callable[[type[TModel]], type[TModel]]: ...


def register_read_model(
    model_class: type[TModel] | None = None,
    *,
    type_name: str | None = None,
    registry: ReadModelRegistry | None = None,
) -> type[TModel] | Callable[[type[TModel]], type[TModel]]:
    """Class decorator registering a read model, usable with or without arguments."""
    target = registry if registry is not None else default_registry

    if model_class is not None:
        return target.register(model_class, type_name)
    return lambda cls: target.register(cls, type_name)


__all__ = [
    "DuplicateReadModelTypeError",
    "ReadModelRegistry",
    "ReadModelTypeNotFoundError",
    "default_registry",
    "register_read_model",
]
