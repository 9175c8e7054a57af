"""
Alias-based reindexing for Elasticsearch read model repositories.

Consumers read through a stable alias. A rebuild fills a new physical
index (``<alias><suffix>``) and then repoints the alias in one batched
request, so readers never see a missing or half-empty index.

Typical rebuild:
    >>> repo = AliasingElasticsearchReadModelRepository(client, OrderSummary, "orders")
    >>> suffix = f"_{int(time.time())}"
    >>> rebuild = repo.physical_repository(suffix)
    >>> await rebuild.create_index()
    >>> for summary in replayed_summaries:
    ...     await rebuild.save(summary)
    >>> await repo.switch_to_new_index(suffix)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from elasticsearch import AsyncElasticsearch

from esreadmodels.locks.interface import LockManager, alias_lock_key
from esreadmodels.locks.memory import default_lock_manager
from esreadmodels.observability import Tracer
from esreadmodels.observability.attributes import ATTR_OLD_INDEX_COUNT, ATTR_PHYSICAL_INDEX
from esreadmodels.readmodels.elasticsearch import (
    ElasticsearchReadModelRepository,
    TModel,
    response_body,
)
from esreadmodels.readmodels.exceptions import PhysicalIndexNotFoundError
from esreadmodels.serialization.serializer import ReadModelSerializer

logger = logging.getLogger(__name__)


class AliasingElasticsearchReadModelRepository(ElasticsearchReadModelRepository[TModel]):
    """
    Repository whose index name is an alias over swappable physical indices.

    Reads and writes behave exactly as in ElasticsearchReadModelRepository,
    addressed to the alias. Two operations are added:

    - ``create_index_with_alias(suffix)`` creates ``<alias><suffix>`` with
      the alias already attached, in a single request.
    - ``switch_to_new_index(suffix)`` moves the alias onto
      ``<alias><suffix>`` and deletes every index it pointed to before.

    Switches of the same alias are serialized through ``lock_manager``.
    The default manager only coordinates within one process; pass a
    PostgreSQLLockManager when several processes may switch the alias.
    """

    def __init__(
        self,
        client: AsyncElasticsearch,
        model_class: type[TModel],
        index: str | None = None,
        not_analyzed_fields: Iterable[str] = (),
        *,
        serializer: ReadModelSerializer | None = None,
        with_type_discriminator: bool = True,
        lock_manager: LockManager | None = None,
        lock_timeout: float | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the aliasing repository.

        Args:
            client: Async Elasticsearch client
            model_class: The ReadModel subclass this repository will manage
            index: Alias name (defaults to ``model_class.index_name()``)
            not_analyzed_fields: Fields to map as exact-match keywords
            serializer: Read model serializer
            with_type_discriminator: Store and filter on the type tag
            lock_manager: Lock manager serializing switches of this alias
            lock_timeout: Seconds to wait for the switch lock (None = forever)
            tracer: Optional tracer
            enable_tracing: Whether to enable OpenTelemetry tracing
        """
        super().__init__(
            client,
            model_class,
            index,
            not_analyzed_fields,
            serializer=serializer,
            with_type_discriminator=with_type_discriminator,
            tracer=tracer,
            enable_tracing=enable_tracing,
        )
        self._lock_manager = lock_manager or default_lock_manager
        self._lock_timeout = lock_timeout

    @property
    def alias(self) -> str:
        return self._index

    def physical_index_name(self, suffix: str) -> str:
        """Name of the physical index created for ``suffix``."""
        return f"{self._index}{suffix}"

    def physical_repository(self, suffix: str) -> ElasticsearchReadModelRepository[TModel]:
        """
        Plain repository bound to the physical index for ``suffix``.

        Used to create and fill a new index before switching the alias.
        """
        return ElasticsearchReadModelRepository(
            self._client,
            self._model_class,
            self.physical_index_name(suffix),
            self._not_analyzed_fields,
            serializer=self._serializer,
            with_type_discriminator=self._with_type_discriminator,
            tracer=self._tracer,
        )

    async def create_index_with_alias(self, suffix: str) -> bool:
        """
        Create ``<alias><suffix>`` with the alias attached in the same request.

        Mapping rules are the same as for ``create_index()``.

        Returns:
            True unless health for the alias is red after waiting up to
            5 seconds for yellow
        """
        physical_index = self.physical_index_name(suffix)

        with self._tracer.span(
            "esreadmodels.readmodel.create_index_with_alias",
            self._span_attributes("indices.create", {ATTR_PHYSICAL_INDEX: physical_index}),
        ):
            params: dict[str, Any] = {
                "index": physical_index,
                "aliases": {self._index: {}},
            }
            mappings = self._mappings()
            if mappings is not None:
                params["mappings"] = mappings

            await self._client.indices.create(**params)
            logger.info(
                "Created index %s with alias %s",
                physical_index,
                self._index,
                extra={"index": physical_index, "alias": self._index},
            )
            return await self._wait_for_health(self._index)

    async def switch_to_new_index(self, suffix: str) -> list[str]:
        """
        Point the alias at ``<alias><suffix>`` and delete the indices it replaces.

        Steps:
            1. If the alias does not exist, delete a physical index that
               occupies the alias name, if any. Otherwise collect the
               indices currently behind the alias.
            2. Remove the alias from those indices and add it to the new
               one in a single update_aliases request, so readers never see
               the alias unbound or spanning two generations mid-switch.
            3. Delete the indices that were unaliased.

        The new index must already exist and must not be named like the
        alias itself. Both are checked before anything is deleted.

        Errors propagate without retry. If step 3 fails the alias already
        points at the new index and only storage is left to reclaim.

        Args:
            suffix: Suffix of the physical index to switch to

        Returns:
            Names of the physical indices that were retired and deleted

        Raises:
            ValueError: If ``suffix`` is empty
            PhysicalIndexNotFoundError: If ``<alias><suffix>`` does not exist
            LockAcquisitionError: If the switch lock is not acquired in time
        """
        new_index = self.physical_index_name(suffix)
        if new_index == self._index:
            raise ValueError(
                f"Suffix must be non-empty: the physical index cannot share the name "
                f"of alias {self._index!r}"
            )

        async with self._lock_manager.acquire(
            alias_lock_key(self._index),
            timeout=self._lock_timeout,
        ):
            with self._tracer.span(
                "esreadmodels.readmodel.switch_to_new_index",
                self._span_attributes("indices.update_aliases", {ATTR_PHYSICAL_INDEX: new_index}),
            ) as span:
                if not await self._client.indices.exists(index=new_index):
                    raise PhysicalIndexNotFoundError(self._index, new_index)

                old_indices = [
                    name for name in await self._resolve_old_indices() if name != new_index
                ]
                if span is not None:
                    span.set_attribute(ATTR_OLD_INDEX_COUNT, len(old_indices))

                await self._switch_alias(new_index, old_indices)
                await self._remove_old_indices(old_indices)

        logger.info(
            "Switched alias %s to %s, retired %d index(es)",
            self._index,
            new_index,
            len(old_indices),
            extra={"alias": self._index, "index": new_index, "old_indices": old_indices},
        )
        return old_indices

    async def _resolve_old_indices(self) -> list[str]:
        if not await self._client.indices.exists_alias(name=self._index):
            # A physical index squatting on the alias name blocks the alias
            if await self._client.indices.exists(index=self._index):
                logger.info(
                    "Deleting unaliased index %s to free the name for the alias",
                    self._index,
                    extra={"index": self._index},
                )
                await self._client.indices.delete(index=self._index)
            return []

        aliases = response_body(await self._client.indices.get_alias(name=self._index))
        return list(aliases.keys())

    async def _switch_alias(self, new_index: str, old_indices: list[str]) -> None:
        actions: list[dict[str, Any]] = [
            {"remove": {"index": old_index, "alias": self._index}} for old_index in old_indices
        ]
        actions.append({"add": {"index": new_index, "alias": self._index}})

        await self._client.indices.update_aliases(actions=actions)

    async def _remove_old_indices(self, old_indices: list[str]) -> None:
        if old_indices:
            await self._client.indices.delete(index=old_indices)


__all__ = ["AliasingElasticsearchReadModelRepository"]
