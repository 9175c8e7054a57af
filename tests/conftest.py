"""
Shared pytest fixtures for the esreadmodels library tests.

This module provides:
- Serialization fixtures (registry, serializer) isolated per test
- Elasticsearch fixtures (fake_es, mock_es)
- Repository fixtures bound to the shared test read models
- Lock manager fixtures

All repositories are built with tracing disabled unless a test passes
its own tracer.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from esreadmodels.locks import InMemoryLockManager
from esreadmodels.readmodels import (
    AliasingElasticsearchReadModelRepository,
    ElasticsearchReadModelRepository,
)
from esreadmodels.serialization import PydanticReadModelSerializer, ReadModelRegistry
from tests.fixtures import FakeElasticsearch, OrderSummary, TaggedItem

# ============================================================================
# Serialization Fixtures
# ============================================================================


@pytest.fixture
def registry() -> ReadModelRegistry:
    """Fresh registry so tests never share type tags."""
    return ReadModelRegistry()


@pytest.fixture
def serializer(registry: ReadModelRegistry) -> PydanticReadModelSerializer:
    return PydanticReadModelSerializer(registry)


# ============================================================================
# Elasticsearch Fixtures
# ============================================================================


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    """In-process Elasticsearch double with real error types."""
    return FakeElasticsearch()


@pytest.fixture
def mock_es() -> MagicMock:
    """
    AsyncElasticsearch mock for asserting exact request parameters.

    Document APIs and the indices/cluster namespaces are AsyncMocks with
    benign default responses.
    """
    client = MagicMock()
    client.index = AsyncMock(return_value={"result": "created"})
    client.get = AsyncMock()
    client.delete = AsyncMock(return_value={"result": "deleted"})
    client.search = AsyncMock(return_value={"hits": {"total": {"value": 0}, "hits": []}})
    client.ping = AsyncMock(return_value=True)

    client.indices = MagicMock()
    client.indices.create = AsyncMock(return_value={"acknowledged": True})
    client.indices.delete = AsyncMock(return_value={"acknowledged": True})
    client.indices.exists = AsyncMock(return_value=False)
    client.indices.exists_alias = AsyncMock(return_value=False)
    client.indices.get_alias = AsyncMock(return_value={})
    client.indices.update_aliases = AsyncMock(return_value={"acknowledged": True})

    client.cluster = MagicMock()
    client.cluster.health = AsyncMock(return_value={"status": "green"})
    return client


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def order_repo(
    mock_es: MagicMock,
    serializer: PydanticReadModelSerializer,
) -> ElasticsearchReadModelRepository[OrderSummary]:
    """OrderSummary repository over the mocked client."""
    return ElasticsearchReadModelRepository(
        mock_es,
        OrderSummary,
        "order_summaries",
        ["status"],
        serializer=serializer,
        enable_tracing=False,
    )


@pytest.fixture
def item_repo(
    fake_es: FakeElasticsearch,
    serializer: PydanticReadModelSerializer,
) -> ElasticsearchReadModelRepository[TaggedItem]:
    """TaggedItem repository over the fake cluster."""
    return ElasticsearchReadModelRepository(
        fake_es,
        TaggedItem,
        "items",
        ["name", "tag"],
        serializer=serializer,
        enable_tracing=False,
    )


@pytest.fixture
def lock_manager() -> InMemoryLockManager:
    """Lock manager private to the test's event loop."""
    return InMemoryLockManager(holder_id="test")


@pytest.fixture
def aliasing_repo(
    fake_es: FakeElasticsearch,
    serializer: PydanticReadModelSerializer,
    lock_manager: InMemoryLockManager,
) -> AliasingElasticsearchReadModelRepository[TaggedItem]:
    """TaggedItem repository addressed through the ``items`` alias."""
    return AliasingElasticsearchReadModelRepository(
        fake_es,
        TaggedItem,
        "items",
        ["name", "tag"],
        serializer=serializer,
        lock_manager=lock_manager,
        enable_tracing=False,
    )
