"""
esreadmodels - Elasticsearch storage for read models.

This library provides:
- Read model repositories on Elasticsearch with exact-match filtering
- A single-type-per-index guard enforced before any request is sent
- Zero-downtime reindexing by switching an alias between physical indices
- Pydantic-based serialization with a type registry
- Optional OpenTelemetry tracing
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("esreadmodels")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from esreadmodels.client import check_connection, create_client
from esreadmodels.config import ElasticsearchConfig
from esreadmodels.exceptions import (
    ConfigurationError,
    EsReadModelsError,
    SerializationError,
)
from esreadmodels.locks import (
    InMemoryLockManager,
    LockAcquisitionError,
    LockInfo,
    LockManager,
    alias_lock_key,
)
from esreadmodels.readmodels import (
    DEFAULT_PAGE_SIZE,
    AliasingElasticsearchReadModelRepository,
    AliasingElasticsearchRepositoryFactory,
    ElasticsearchReadModelRepository,
    ElasticsearchRepositoryFactory,
    InMemoryReadModelRepository,
    PhysicalIndexNotFoundError,
    ReadModel,
    ReadModelError,
    ReadModelRepository,
    ReadModelTypeMismatchError,
    RepositoryFactory,
)
from esreadmodels.serialization import (
    DuplicateReadModelTypeError,
    PydanticReadModelSerializer,
    ReadModelRegistry,
    ReadModelSerializer,
    ReadModelTypeNotFoundError,
    SerializedReadModel,
    default_registry,
    register_read_model,
)

__all__ = [
    "__version__",
    # Configuration and client
    "ElasticsearchConfig",
    "create_client",
    "check_connection",
    # Exceptions
    "EsReadModelsError",
    "ConfigurationError",
    "SerializationError",
    "ReadModelError",
    "ReadModelTypeMismatchError",
    "PhysicalIndexNotFoundError",
    "ReadModelTypeNotFoundError",
    "DuplicateReadModelTypeError",
    "LockAcquisitionError",
    # Read models
    "ReadModel",
    "ReadModelRepository",
    "RepositoryFactory",
    "ElasticsearchReadModelRepository",
    "AliasingElasticsearchReadModelRepository",
    "ElasticsearchRepositoryFactory",
    "AliasingElasticsearchRepositoryFactory",
    "InMemoryReadModelRepository",
    "DEFAULT_PAGE_SIZE",
    # Serialization
    "ReadModelSerializer",
    "PydanticReadModelSerializer",
    "SerializedReadModel",
    "ReadModelRegistry",
    "default_registry",
    "register_read_model",
    # Locks
    "LockManager",
    "LockInfo",
    "InMemoryLockManager",
    "alias_lock_key",
]
