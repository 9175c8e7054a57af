"""
Serialization utilities for esreadmodels.

Read models travel to and from the search backend as a type tag plus a
JSON-compatible payload. The registry resolves tags back to classes.

Example:
    >>> from esreadmodels.serialization import PydanticReadModelSerializer
    >>>
    >>> serializer = PydanticReadModelSerializer()
    >>> data = serializer.serialize(summary)
    >>> restored = serializer.deserialize(data)
"""

from esreadmodels.serialization.registry import (
    DuplicateReadModelTypeError,
    ReadModelRegistry,
    ReadModelTypeNotFoundError,
    default_registry,
    register_read_model,
)
from esreadmodels.serialization.serializer import (
    PydanticReadModelSerializer,
    ReadModelSerializer,
    SerializedReadModel,
)

__all__ = [
    "DuplicateReadModelTypeError",
    "PydanticReadModelSerializer",
    "ReadModelRegistry",
    "ReadModelSerializer",
    "ReadModelTypeNotFoundError",
    "SerializedReadModel",
    "default_registry",
    "register_read_model",
]
