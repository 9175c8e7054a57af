"""Factories assembling Elasticsearch read model repositories."""

from __future__ import annotations

from collections.abc import Iterable

from elasticsearch import AsyncElasticsearch

from esreadmodels.locks.interface import LockManager
from esreadmodels.readmodels.aliasing import AliasingElasticsearchReadModelRepository
from esreadmodels.readmodels.elasticsearch import ElasticsearchReadModelRepository, TModel
from esreadmodels.serialization.serializer import PydanticReadModelSerializer, ReadModelSerializer


class ElasticsearchRepositoryFactory:
    """
    Creates Elasticsearch repositories sharing one client and serializer.

    Example:
        >>> factory = ElasticsearchRepositoryFactory(create_client())
        >>> orders = factory.create("orders", OrderSummary, ["status"])
        >>> customers = factory.create("customers", CustomerView)
    """

    def __init__(
        self,
        client: AsyncElasticsearch,
        serializer: ReadModelSerializer | None = None,
        *,
        with_type_discriminator: bool = True,
        enable_tracing: bool = True,
    ) -> None:
        self._client = client
        self._serializer = serializer or PydanticReadModelSerializer()
        self._with_type_discriminator = with_type_discriminator
        self._enable_tracing = enable_tracing

    def create(
        self,
        name: str,
        model_class: type[TModel],
        not_analyzed_fields: Iterable[str] = (),
    ) -> ElasticsearchReadModelRepository[TModel]:
        return ElasticsearchReadModelRepository(
            self._client,
            model_class,
            name,
            not_analyzed_fields,
            serializer=self._serializer,
            with_type_discriminator=self._with_type_discriminator,
            enable_tracing=self._enable_tracing,
        )


class AliasingElasticsearchRepositoryFactory(ElasticsearchRepositoryFactory):
    """Creates repositories that support alias-based reindexing."""

    def __init__(
        self,
        client: AsyncElasticsearch,
        serializer: ReadModelSerializer | None = None,
        *,
        with_type_discriminator: bool = True,
        lock_manager: LockManager | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(
            client,
            serializer,
            with_type_discriminator=with_type_discriminator,
            enable_tracing=enable_tracing,
        )
        self._lock_manager = lock_manager

    def create(
        self,
        name: str,
        model_class: type[TModel],
        not_analyzed_fields: Iterable[str] = (),
    ) -> AliasingElasticsearchReadModelRepository[TModel]:
        return AliasingElasticsearchReadModelRepository(
            self._client,
            model_class,
            name,
            not_analyzed_fields,
            serializer=self._serializer,
            with_type_discriminator=self._with_type_discriminator,
            lock_manager=self._lock_manager,
            enable_tracing=self._enable_tracing,
        )
