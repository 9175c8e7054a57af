"""
Read model persistence on Elasticsearch.

Read models are denormalized views of application state optimized for
querying. This module stores them as documents in an Elasticsearch index,
one read model class per index, and supports rebuilding an index behind an
alias without downtime.

Key Components:
    ReadModel: Pydantic base class for read model definitions
    ReadModelRepository: Protocol for read model persistence
    ElasticsearchReadModelRepository: Repository over a single index
    AliasingElasticsearchReadModelRepository: Adds alias-based reindexing
    ElasticsearchRepositoryFactory: Binds repositories to index names
    InMemoryReadModelRepository: In-memory implementation for testing

Exceptions:
    ReadModelError: Base exception for read model operations
    ReadModelTypeMismatchError: Raised when saving a model of another type

Example:
    >>> from esreadmodels import create_client
    >>> from esreadmodels.readmodels import (
    ...     ElasticsearchRepositoryFactory,
    ...     ReadModel,
    ... )
    >>>
    >>> class OrderSummary(ReadModel):
    ...     order_number: str
    ...     status: str
    ...
    >>> factory = ElasticsearchRepositoryFactory(create_client())
    >>> repo = factory.create("order_summaries", OrderSummary, ["status"])
    >>> await repo.create_index()
    >>> await repo.save(OrderSummary(id="o-1", order_number="ORD-001", status="shipped"))
    >>> shipped = await repo.find_by({"status": "shipped"})
    >>> missing = await repo.find("o-404")  # None, not an error
"""

from esreadmodels.readmodels.aliasing import AliasingElasticsearchReadModelRepository
from esreadmodels.readmodels.base import ReadModel
from esreadmodels.readmodels.elasticsearch import (
    DEFAULT_PAGE_SIZE,
    ElasticsearchReadModelRepository,
)
from esreadmodels.readmodels.exceptions import (
    PhysicalIndexNotFoundError,
    ReadModelError,
    ReadModelTypeMismatchError,
)
from esreadmodels.readmodels.factory import (
    AliasingElasticsearchRepositoryFactory,
    ElasticsearchRepositoryFactory,
)
from esreadmodels.readmodels.in_memory import InMemoryReadModelRepository
from esreadmodels.readmodels.query import (
    TYPE_FIELD,
    keyword_mapping,
    match_all,
    term_conjunction,
)
from esreadmodels.readmodels.repository import ReadModelRepository, RepositoryFactory

__all__ = [
    # Base class
    "ReadModel",
    # Protocols
    "ReadModelRepository",
    "RepositoryFactory",
    # Elasticsearch implementations
    "ElasticsearchReadModelRepository",
    "AliasingElasticsearchReadModelRepository",
    "DEFAULT_PAGE_SIZE",
    # Factories
    "ElasticsearchRepositoryFactory",
    "AliasingElasticsearchRepositoryFactory",
    # In-memory implementation
    "InMemoryReadModelRepository",
    # Query building
    "TYPE_FIELD",
    "keyword_mapping",
    "match_all",
    "term_conjunction",
    # Exceptions
    "ReadModelError",
    "ReadModelTypeMismatchError",
    "PhysicalIndexNotFoundError",
]
