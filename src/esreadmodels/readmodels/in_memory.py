"""
Dict-backed repository with the same observable behavior as the
Elasticsearch one, for tests and local runs without a cluster.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Generic, TypeVar

from esreadmodels.observability import Tracer, create_tracer
from esreadmodels.observability.attributes import (
    ATTR_QUERY_FILTER_COUNT,
    ATTR_READMODEL_ID,
    ATTR_READMODEL_TYPE,
)
from esreadmodels.readmodels.base import ReadModel
from esreadmodels.readmodels.elasticsearch import DEFAULT_PAGE_SIZE
from esreadmodels.readmodels.exceptions import ReadModelTypeMismatchError

TModel = TypeVar("TModel", bound=ReadModel)


class InMemoryReadModelRepository(Generic[TModel]):
    """
    ReadModelRepository keeping JSON dumps of models in a dict.

    Same rules as ElasticsearchReadModelRepository: saves are type checked,
    ids are strings, removing a missing id is a no-op, an empty filter
    matches nothing and queries return at most DEFAULT_PAGE_SIZE models.
    Stored dumps are detached from the saved instance.

    Example:
        >>> orders = InMemoryReadModelRepository(OrderSummary, enable_tracing=False)
        >>> await orders.save(summary)
        >>> await orders.find_by({"status": "pending"})
    """

    def __init__(
        self,
        model_class: type[TModel],
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._model_class = model_class
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    @property
    def model_class(self) -> type[TModel]:
        return self._model_class

    def _span(self, operation: str, **attributes: Any) -> AbstractContextManager[Any]:
        return self._tracer.span(
            f"esreadmodels.readmodel.{operation}",
            {ATTR_READMODEL_TYPE: self._model_class.__name__, **attributes},
        )

    def _load(self, documents: list[dict[str, Any]]) -> list[TModel]:
        return [self._model_class.model_validate(doc) for doc in documents[:DEFAULT_PAGE_SIZE]]

    async def save(self, model: TModel) -> None:
        if type(model) is not self._model_class:
            raise ReadModelTypeMismatchError(self._model_class.__name__, type(model).__name__)

        with self._span("save", **{ATTR_READMODEL_ID: model.get_id()}):
            async with self._lock:
                self._documents[model.get_id()] = model.model_dump(mode="json")

    async def find(self, id: Any) -> TModel | None:
        with self._span("find", **{ATTR_READMODEL_ID: str(id)}):
            async with self._lock:
                document = self._documents.get(str(id))
            return None if document is None else self._model_class.model_validate(document)

    async def find_by(self, fields: Mapping[str, Any]) -> list[TModel]:
        if not fields:
            return []

        with self._span("find_by", **{ATTR_QUERY_FILTER_COUNT: len(fields)}):
            async with self._lock:
                matching = [
                    doc
                    for doc in self._documents.values()
                    if all(name in doc and doc[name] == value for name, value in fields.items())
                ]
            return self._load(matching)

    async def find_all(self) -> list[TModel]:
        with self._span("find_all"):
            async with self._lock:
                documents = list(self._documents.values())
            return self._load(documents)

    async def remove(self, id: Any) -> None:
        with self._span("remove", **{ATTR_READMODEL_ID: str(id)}):
            async with self._lock:
                self._documents.pop(str(id), None)

    async def clear(self) -> None:
        async with self._lock:
            self._documents.clear()

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"InMemoryReadModelRepository(model={self._model_class.__name__}, count={len(self)})"
