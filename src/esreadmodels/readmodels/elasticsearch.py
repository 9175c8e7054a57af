"""
Elasticsearch implementation of read model repository.

Stores each read model as a document in a single index, keyed by the
model identity. Writes are refreshed immediately so a read issued right
after a write observes it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from elastic_transport import ApiResponse
from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError

from esreadmodels.observability import Tracer, create_tracer
from esreadmodels.observability.attributes import (
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_INDEX_NAME,
    ATTR_QUERY_FILTER_COUNT,
    ATTR_QUERY_LIMIT,
    ATTR_READMODEL_ID,
    ATTR_READMODEL_TYPE,
)
from esreadmodels.readmodels.base import ReadModel
from esreadmodels.readmodels.exceptions import ReadModelTypeMismatchError
from esreadmodels.readmodels.query import (
    TYPE_FIELD,
    keyword_mapping,
    match_all,
    restrict_to_type,
    term_conjunction,
)
from esreadmodels.serialization.serializer import (
    PydanticReadModelSerializer,
    ReadModelSerializer,
    SerializedReadModel,
)

logger = logging.getLogger(__name__)

# Type variable for read model types
TModel = TypeVar("TModel", bound=ReadModel)

DEFAULT_PAGE_SIZE = 500
"""Maximum number of hits returned by find_by() and find_all()."""

HEALTH_WAIT_STATUS = "yellow"
HEALTH_TIMEOUT = "5s"

DB_SYSTEM = "elasticsearch"


def response_body(response: Any) -> Any:
    """Unwrap a client response to its decoded body."""
    if isinstance(response, ApiResponse):
        return response.body
    return response


class ElasticsearchReadModelRepository(Generic[TModel]):
    """
    Elasticsearch implementation of ReadModelRepository.

    The repository is bound to one index and one read model class for its
    whole lifetime. Saving any other class fails before a request is made,
    which keeps every document in the index deserializable to the same
    shape.

    Type discrimination:
        With ``with_type_discriminator=True`` (the default) each document
        carries its serializer type tag in the ``_class`` source field.
        Searches are filtered to the bound tag and every hit is
        deserialized with the tag stored on it. With the flag off nothing
        is added to the document and hits are deserialized as the bound
        class.

    Exact matching:
        ``find_by()`` compares values with ``term`` queries. String fields
        used for filtering must be listed in ``not_analyzed_fields`` and the
        index created through ``create_index()``, so they are mapped as
        ``keyword`` instead of analyzed text.

    Example:
        >>> client = create_client()
        >>> repo = ElasticsearchReadModelRepository(
        ...     client, OrderSummary, "order_summaries", ["status"]
        ... )
        >>> await repo.create_index()
        >>> await repo.save(OrderSummary(id="o-1", order_number="ORD-001", status="pending"))
        >>> pending = await repo.find_by({"status": "pending"})
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
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the Elasticsearch repository.

        Args:
            client: Async Elasticsearch client
            model_class: The ReadModel subclass this repository will manage
            index: Index name (defaults to ``model_class.index_name()``)
            not_analyzed_fields: Fields to map as exact-match keywords
            serializer: Read model serializer (defaults to a
                PydanticReadModelSerializer over the default registry)
            with_type_discriminator: Store and filter on the type tag
            tracer: Optional tracer (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        if isinstance(not_analyzed_fields, str):
            not_analyzed_fields = (not_analyzed_fields,)

        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._client = client
        self._model_class = model_class
        self._index = index or model_class.index_name()
        self._not_analyzed_fields = tuple(dict.fromkeys(not_analyzed_fields))
        self._serializer = serializer or PydanticReadModelSerializer()
        self._with_type_discriminator = with_type_discriminator
        self._type_tag = self._serializer.type_tag(model_class)

    @property
    def index(self) -> str:
        """Index (or alias) name this repository reads and writes."""
        return self._index

    @property
    def model_class(self) -> type[TModel]:
        return self._model_class

    @property
    def not_analyzed_fields(self) -> tuple[str, ...]:
        return self._not_analyzed_fields

    @property
    def with_type_discriminator(self) -> bool:
        return self._with_type_discriminator

    @property
    def type_tag(self) -> str:
        """Serializer type tag of the bound read model class."""
        return self._type_tag

    async def save(self, model: TModel) -> None:
        """
        Save or replace a read model (upsert keyed by ``model.get_id()``).

        The write is refreshed before returning, so it is visible to the
        next read.

        Args:
            model: The read model to save

        Raises:
            ReadModelTypeMismatchError: If ``model`` is not exactly of the
                bound class. No request is sent in that case.
        """
        if type(model) is not self._model_class:
            raise ReadModelTypeMismatchError(
                self._model_class.__name__,
                type(model).__name__,
            )

        doc_id = model.get_id()
        with self._tracer.span(
            "esreadmodels.readmodel.save",
            self._span_attributes("index", {ATTR_READMODEL_ID: doc_id}),
        ):
            serialized = self._serializer.serialize(model)
            await self._client.index(
                index=self._index,
                id=doc_id,
                document=self._to_document(serialized),
                refresh=True,
            )

        logger.debug(
            "Saved read model %s to index %s",
            doc_id,
            self._index,
            extra={"index": self._index, "readmodel_id": doc_id},
        )

    async def find(self, id: Any) -> TModel | None:
        """
        Find a read model by identity.

        Args:
            id: Identity value; converted with ``str()``

        Returns:
            The read model if found, None if the document (or the whole
            index) does not exist, or if it is tagged with another type
        """
        doc_id = str(id)
        with self._tracer.span(
            "esreadmodels.readmodel.find",
            self._span_attributes("get", {ATTR_READMODEL_ID: doc_id}),
        ):
            try:
                hit = response_body(await self._client.get(index=self._index, id=doc_id))
            except NotFoundError:
                return None

        if self._with_type_discriminator:
            stored_tag = (hit.get("_source") or {}).get(TYPE_FIELD, self._type_tag)
            if stored_tag != self._type_tag:
                logger.debug(
                    "Document %s in index %s is tagged %s, not %s",
                    doc_id,
                    self._index,
                    stored_tag,
                    self._type_tag,
                )
                return None

        return self._deserialize_hit(hit)

    async def find_by(self, fields: Mapping[str, Any]) -> list[TModel]:
        """
        Find read models where every given field equals its value exactly.

        Args:
            fields: Mapping of field name to exact value

        Returns:
            Matching read models in backend order, at most DEFAULT_PAGE_SIZE.
            An empty mapping returns an empty list without querying.
        """
        if not fields:
            return []

        with self._tracer.span(
            "esreadmodels.readmodel.find_by",
            self._span_attributes("search", {ATTR_QUERY_FILTER_COUNT: len(fields)}),
        ):
            return await self.query(term_conjunction(fields))

    async def find_all(self) -> list[TModel]:
        """Return all read models in the index, at most DEFAULT_PAGE_SIZE."""
        with self._tracer.span(
            "esreadmodels.readmodel.find_all",
            self._span_attributes("search"),
        ):
            return await self.query(match_all())

    async def remove(self, id: Any) -> None:
        """
        Remove a read model by identity.

        Removing a document that does not exist (or was already removed)
        is a successful no-op.
        """
        doc_id = str(id)
        with self._tracer.span(
            "esreadmodels.readmodel.remove",
            self._span_attributes("delete", {ATTR_READMODEL_ID: doc_id}),
        ):
            try:
                await self._client.delete(index=self._index, id=doc_id, refresh=True)
            except NotFoundError:
                logger.debug(
                    "Read model %s not found in index %s, nothing to remove",
                    doc_id,
                    self._index,
                    extra={"index": self._index, "readmodel_id": doc_id},
                )

    async def query(self, query: Mapping[str, Any]) -> list[TModel]:
        """
        Run a query against the index and deserialize the hits.

        Used by ``find_by()`` and ``find_all()``; subclasses may call it with
        their own query DSL. A missing index yields an empty list.

        Args:
            query: Elasticsearch query DSL (the value of the ``query`` key)
        """
        response = await self.search(query)
        hits = response.get("hits")
        if not hits:
            return []
        return [self._deserialize_hit(hit) for hit in hits.get("hits", [])]

    async def search(
        self,
        query: Mapping[str, Any],
        aggregations: Mapping[str, Any] | None = None,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """
        Run a query and return the raw search response.

        The query is restricted to the bound type tag when discrimination
        is on. Useful for subclasses that need aggregations alongside hits.

        Args:
            query: Elasticsearch query DSL
            aggregations: Optional aggregations to compute
            size: Maximum number of hits

        Returns:
            The decoded response body, or an empty dict if the index does
            not exist
        """
        if self._with_type_discriminator:
            body_query = restrict_to_type(query, self._type_tag)
        else:
            body_query = dict(query)

        params: dict[str, Any] = {
            "index": self._index,
            "query": body_query,
            "size": size,
        }
        if aggregations:
            params["aggregations"] = dict(aggregations)

        with self._tracer.span(
            "esreadmodels.readmodel.search",
            self._span_attributes("search", {ATTR_QUERY_LIMIT: size}),
        ):
            try:
                response = await self._client.search(**params)
            except NotFoundError:
                logger.debug(
                    "Index %s does not exist, returning no results",
                    self._index,
                    extra={"index": self._index},
                )
                return {}

        return dict(response_body(response))

    async def create_index(self) -> bool:
        """
        Create the index for this repository's read model.

        When ``not_analyzed_fields`` is non-empty (or type discrimination is
        on) an explicit mapping declares those fields as ``keyword``;
        otherwise the backend infers the mapping from the first documents.

        Returns:
            True unless cluster health for the index is red after waiting
            up to 5 seconds for yellow
        """
        with self._tracer.span(
            "esreadmodels.readmodel.create_index",
            self._span_attributes("indices.create"),
        ):
            params: dict[str, Any] = {"index": self._index}
            mappings = self._mappings()
            if mappings is not None:
                params["mappings"] = mappings

            await self._client.indices.create(**params)
            logger.info(
                "Created index %s for %s",
                self._index,
                self._model_class.__name__,
                extra={"index": self._index, "keyword_fields": list(self._not_analyzed_fields)},
            )
            return await self._wait_for_health(self._index)

    async def delete_index(self) -> bool:
        """
        Delete the index for this repository's read model.

        Health is polled cluster-wide afterwards: the deleted index itself
        has nothing left to report on.

        Returns:
            True unless cluster health is red after waiting up to 5 seconds

        Raises:
            NotFoundError: If the index does not exist
        """
        with self._tracer.span(
            "esreadmodels.readmodel.delete_index",
            self._span_attributes("indices.delete"),
        ):
            await self._client.indices.delete(index=self._index, timeout=HEALTH_TIMEOUT)
            logger.info("Deleted index %s", self._index, extra={"index": self._index})
            return await self._wait_for_health(None)

    def _mappings(self) -> dict[str, Any] | None:
        if not self._not_analyzed_fields and not self._with_type_discriminator:
            return None
        return keyword_mapping(
            self._not_analyzed_fields,
            with_type_field=self._with_type_discriminator,
        )

    async def _wait_for_health(self, index: str | None) -> bool:
        """
        Wait for at least yellow health and report whether it is usable.

        Args:
            index: Index (or alias) to check, or None for the whole cluster

        Returns:
            False if the reported status is red or missing, True otherwise
        """
        params: dict[str, Any] = {
            "wait_for_status": HEALTH_WAIT_STATUS,
            "timeout": HEALTH_TIMEOUT,
        }
        if index is not None:
            params["index"] = index

        try:
            health = response_body(await self._client.cluster.health(**params))
        except ApiError as e:
            # 408 means the wait timed out; the body still carries the status
            if e.meta.status != 408:
                raise
            health = e.body if isinstance(e.body, dict) else {}

        status = health.get("status")
        if status is None or status == "red":
            logger.warning(
                "Cluster health for %s is %s after waiting %s",
                index or "cluster",
                status,
                HEALTH_TIMEOUT,
                extra={"index": index, "health_status": status},
            )
            return False
        return True

    def _to_document(self, serialized: SerializedReadModel) -> dict[str, Any]:
        document = dict(serialized["payload"])
        if self._with_type_discriminator:
            document[TYPE_FIELD] = serialized["class"]
        return document

    def _deserialize_hit(self, hit: Mapping[str, Any]) -> TModel:
        """
        Turn a stored document (from get or search) back into a read model.

        Uses the type tag stored on the document when discrimination is on,
        the bound tag otherwise.
        """
        payload = dict(hit.get("_source") or {})
        type_tag = self._type_tag
        if self._with_type_discriminator:
            type_tag = payload.pop(TYPE_FIELD, self._type_tag)
        if "_id" in hit:
            payload.setdefault("id", hit["_id"])

        return self._serializer.deserialize(  # type: ignore[return-value]
            {"class": type_tag, "payload": payload}
        )

    def _span_attributes(
        self,
        operation: str,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        attributes: dict[str, Any] = {
            ATTR_READMODEL_TYPE: self._model_class.__name__,
            ATTR_INDEX_NAME: self._index,
            ATTR_DB_SYSTEM: DB_SYSTEM,
            ATTR_DB_OPERATION: operation,
        }
        if extra:
            attributes.update(extra)
        return attributes

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"{self.__class__.__name__}("
            f"model={self._model_class.__name__}, "
            f"index={self._index!r}, "
            f"tracing={'enabled' if self._enable_tracing else 'disabled'})"
        )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "HEALTH_TIMEOUT",
    "HEALTH_WAIT_STATUS",
    "ElasticsearchReadModelRepository",
    "response_body",
]
