"""
Protocols for read model repositories and repository factories.

Read model repositories persist and query read models written by
projection code. They abstract away backend details so the same
projection works against Elasticsearch in production and an in-memory
store in tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from esreadmodels.readmodels.base import ReadModel

# Type variable for read model types
TModel = TypeVar("TModel", bound=ReadModel)


@runtime_checkable
class ReadModelRepository(Protocol[TModel]):
    """
    Protocol for read model persistence.

    A repository is bound to exactly one read model class. All methods are
    async.

    Type Parameters:
        TModel: The read model type this repository manages

    Key Design Decisions:
        - `save()` uses upsert semantics keyed by the model identity
        - `find()` returns None for a missing document instead of raising
        - `remove()` is idempotent: removing a missing document is a no-op
        - `find_by({})` returns no results rather than the whole index
        - Result ordering is unspecified and result size is bounded

    Example:
        >>> repo: ReadModelRepository[OrderSummary] = InMemoryReadModelRepository(OrderSummary)
        >>> await repo.save(OrderSummary(id="o-1", order_number="ORD-001", status="pending"))
        >>> summary = await repo.find("o-1")
    """

    async def save(self, model: TModel) -> None:
        """
        Insert or replace a read model.

        Args:
            model: The read model to save

        Raises:
            ReadModelTypeMismatchError: If the model is not of the bound type
        """
        ...

    async def find(self, id: Any) -> TModel | None:
        """
        Find a read model by identity.

        Args:
            id: Identity value; converted with ``str()``

        Returns:
            The read model if found, None otherwise
        """
        ...

    async def find_by(self, fields: Mapping[str, Any]) -> list[TModel]:
        """
        Find read models matching every field/value pair exactly.

        Args:
            fields: Mapping of field name to exact value

        Returns:
            Matching read models; empty when ``fields`` is empty
        """
        ...

    async def find_all(self) -> list[TModel]:
        """Return all read models (up to the repository page size)."""
        ...

    async def remove(self, id: Any) -> None:
        """
        Remove a read model by identity.

        Removing a read model that does not exist is not an error.
        """
        ...


@runtime_checkable
class RepositoryFactory(Protocol):
    """
    Protocol for factories binding a repository to an index and a type.

    Example:
        >>> factory = ElasticsearchRepositoryFactory(client)
        >>> repo = factory.create("orders", OrderSummary, ["status"])
    """

    def create(
        self,
        name: str,
        model_class: type[TModel],
        not_analyzed_fields: Iterable[str] = (),
    ) -> ReadModelRepository[TModel]:
        """
        Create a repository.

        Args:
            name: Index (or alias) name
            model_class: Read model class the repository is bound to
            not_analyzed_fields: Fields to index for exact matching
        """
        ...
