"""
Read model serializers.

A serializer turns a read model into a ``{"class": ..., "payload": ...}``
pair and back. The ``class`` entry is a type tag resolved through a
:class:`ReadModelRegistry`; the payload is the JSON-compatible body that
ends up as the document source in the index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypedDict, runtime_checkable

from pydantic import ValidationError

from esreadmodels.exceptions import SerializationError
from esreadmodels.serialization.registry import ReadModelRegistry, default_registry

if TYPE_CHECKING:
    from esreadmodels.readmodels.base import ReadModel


# Wire form of a read model: type tag plus payload ("class" is a keyword,
# hence the functional syntax)
SerializedReadModel = TypedDict(
    "SerializedReadModel",
    {"class": str, "payload": dict[str, Any]},
)


@runtime_checkable
class ReadModelSerializer(Protocol):
    """
    Protocol for converting read models to and from their wire form.

    Example:
        >>> serializer: ReadModelSerializer = PydanticReadModelSerializer()
        >>> data = serializer.serialize(summary)
        >>> data["class"]
        'OrderSummary'
        >>> serializer.deserialize(data) == summary
        True
    """

    def type_tag(self, model_class: type[ReadModel]) -> str:
        """Return the tag recorded for instances of ``model_class``."""
        ...

    def serialize(self, model: ReadModel) -> SerializedReadModel:
        """Convert a read model to its type tag and payload."""
        ...

    def deserialize(self, data: SerializedReadModel) -> ReadModel:
        """Rebuild a read model from its type tag and payload."""
        ...


class PydanticReadModelSerializer:
    """
    Serializer for pydantic-based read models.

    Payloads are produced with ``model_dump(mode="json")`` so UUIDs,
    datetimes and decimals survive the trip through the search backend.
    Classes are registered on first use, either through ``type_tag()`` or
    through ``serialize()``.

    Args:
        registry: Registry used to resolve type tags (defaults to the
            module-level registry)
    """

    def __init__(self, registry: ReadModelRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry

    @property
    def registry(self) -> ReadModelRegistry:
        return self._registry

    def type_tag(self, model_class: type[ReadModel]) -> str:
        registered = self._registry.type_name_of(model_class)
        if registered is not None:
            return registered
        self._registry.register(model_class)
        return model_class.type_name()

    def serialize(self, model: ReadModel) -> SerializedReadModel:
        return {
            "class": self.type_tag(type(model)),
            "payload": model.model_dump(mode="json"),
        }

    def deserialize(self, data: SerializedReadModel) -> ReadModel:
        """
        Rebuild a read model from its wire form.

        Raises:
            ReadModelTypeNotFoundError: If the tag is not registered
            SerializationError: If the payload does not validate
        """
        type_name = data["class"]
        model_class = self._registry.get(type_name)
        try:
            return model_class.model_validate(data["payload"])
        except ValidationError as e:
            raise SerializationError(type_name, str(e)) from e


__all__ = [
    "PydanticReadModelSerializer",
    "ReadModelSerializer",
    "SerializedReadModel",
]
