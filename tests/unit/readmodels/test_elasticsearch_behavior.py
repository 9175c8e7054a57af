"""
Behavior tests for ElasticsearchReadModelRepository against FakeElasticsearch.

These cover what callers observe across several operations: round trips,
exact filtering, idempotent removal and type isolation in a shared index.
"""

import pytest
import pytest_asyncio

from esreadmodels.readmodels import DEFAULT_PAGE_SIZE, ElasticsearchReadModelRepository
from esreadmodels.readmodels.query import TYPE_FIELD
from esreadmodels.serialization import PydanticReadModelSerializer
from tests.fixtures import CustomerView, FakeElasticsearch, TaggedItem


@pytest_asyncio.fixture
async def populated_repo(
    item_repo: ElasticsearchReadModelRepository[TaggedItem],
) -> ElasticsearchReadModelRepository[TaggedItem]:
    await item_repo.create_index()
    for item in (
        TaggedItem(id=1, name="a", tag="x"),
        TaggedItem(id=2, name="b", tag="x"),
        TaggedItem(id=3, name="a", tag="y"),
    ):
        await item_repo.save(item)
    return item_repo


def _ids(items: list[TaggedItem]) -> set[str]:
    return {item.id for item in items}


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_saved_model_is_found(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        item = TaggedItem(id="i-1", name="widget", tag="tools")

        await item_repo.save(item)

        assert await item_repo.find("i-1") == item

    @pytest.mark.asyncio
    async def test_save_replaces_existing(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        await item_repo.save(TaggedItem(id="i-1", name="widget", tag="tools"))
        await item_repo.save(TaggedItem(id="i-1", name="gadget", tag="tools"))

        found = await item_repo.find("i-1")
        assert found is not None
        assert found.name == "gadget"
        assert len(await item_repo.find_all()) == 1

    @pytest.mark.asyncio
    async def test_find_before_index_exists(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert await item_repo.find("i-1") is None

    @pytest.mark.asyncio
    async def test_integer_and_string_ids_are_equivalent(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        await item_repo.save(TaggedItem(id=7, name="a", tag="x"))

        found = await item_repo.find(7)
        assert found is not None
        assert found.id == "7"
        assert await item_repo.find("7") == found


class TestFiltering:
    @pytest.mark.asyncio
    async def test_single_field(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert _ids(await populated_repo.find_by({"name": "a"})) == {"1", "3"}

    @pytest.mark.asyncio
    async def test_all_fields_must_match(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert _ids(await populated_repo.find_by({"name": "a", "tag": "x"})) == {"1"}

    @pytest.mark.asyncio
    async def test_no_match(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert await populated_repo.find_by({"name": "c"}) == []

    @pytest.mark.asyncio
    async def test_empty_filter(
        self,
        populated_repo: ElasticsearchReadModelRepository[TaggedItem],
        fake_es: FakeElasticsearch,
    ) -> None:
        searches_before = fake_es.call_names().count("search")

        assert await populated_repo.find_by({}) == []
        assert fake_es.call_names().count("search") == searches_before

    @pytest.mark.asyncio
    async def test_find_all(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert _ids(await populated_repo.find_all()) == {"1", "2", "3"}

    @pytest.mark.asyncio
    async def test_find_all_on_missing_index(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        assert await item_repo.find_all() == []
        assert await item_repo.find_by({"name": "a"}) == []

    @pytest.mark.asyncio
    async def test_results_capped_at_page_size(
        self, item_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        for i in range(DEFAULT_PAGE_SIZE + 5):
            await item_repo.save(TaggedItem(id=i, name="bulk", tag="x"))

        assert len(await item_repo.find_all()) == DEFAULT_PAGE_SIZE
        assert len(await item_repo.find_by({"name": "bulk"})) == DEFAULT_PAGE_SIZE


class TestRemove:
    @pytest.mark.asyncio
    async def test_remove_then_find(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        await populated_repo.remove(1)

        assert await populated_repo.find(1) is None
        assert _ids(await populated_repo.find_by({"name": "a"})) == {"3"}

    @pytest.mark.asyncio
    async def test_remove_twice(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        await populated_repo.remove(2)
        await populated_repo.remove(2)

        assert await populated_repo.find(2) is None

    @pytest.mark.asyncio
    async def test_remove_never_saved(
        self, populated_repo: ElasticsearchReadModelRepository[TaggedItem]
    ) -> None:
        await populated_repo.remove("unknown")

        assert len(await populated_repo.find_all()) == 3


class TestIndexLifecycle:
    @pytest.mark.asyncio
    async def test_create_index_mapping(
        self,
        item_repo: ElasticsearchReadModelRepository[TaggedItem],
        fake_es: FakeElasticsearch,
    ) -> None:
        assert await item_repo.create_index() is True

        properties = fake_es.mappings["items"]["properties"]  # type: ignore[index]
        assert properties["name"] == {"type": "keyword"}
        assert properties["tag"] == {"type": "keyword"}

    @pytest.mark.asyncio
    async def test_create_index_on_red_cluster(
        self,
        item_repo: ElasticsearchReadModelRepository[TaggedItem],
        fake_es: FakeElasticsearch,
    ) -> None:
        fake_es.health_status = "red"
        fake_es.health_times_out = True

        assert await item_repo.create_index() is False
        assert "items" in fake_es.documents

    @pytest.mark.asyncio
    async def test_delete_index(
        self,
        populated_repo: ElasticsearchReadModelRepository[TaggedItem],
        fake_es: FakeElasticsearch,
    ) -> None:
        assert await populated_repo.delete_index() is True

        assert "items" not in fake_es.documents
        assert await populated_repo.find_all() == []


class TestSharedIndex:
    """Two repositories bound to different types writing to one index."""

    @pytest.mark.asyncio
    async def test_each_repository_sees_only_its_type(
        self,
        fake_es: FakeElasticsearch,
        serializer: PydanticReadModelSerializer,
    ) -> None:
        items = ElasticsearchReadModelRepository(
            fake_es, TaggedItem, "shared", ["name"], serializer=serializer, enable_tracing=False
        )
        customers = ElasticsearchReadModelRepository(
            fake_es, CustomerView, "shared", ["name"], serializer=serializer, enable_tracing=False
        )
        await items.save(TaggedItem(id="1", name="a", tag="x"))
        await customers.save(CustomerView(id="2", name="a"))

        assert _ids(await items.find_by({"name": "a"})) == {"1"}
        assert [c.id for c in await customers.find_all()] == ["2"]
        assert await items.find("2") is None
        assert await customers.find("1") is None

    @pytest.mark.asyncio
    async def test_type_tag_stored_on_document(
        self,
        item_repo: ElasticsearchReadModelRepository[TaggedItem],
        fake_es: FakeElasticsearch,
    ) -> None:
        await item_repo.save(TaggedItem(id="1", name="a", tag="x"))

        assert fake_es.documents["items"]["1"][TYPE_FIELD] == "TaggedItem"
