"""Tests for the ReadModelRepository protocol."""

from typing import Any

from esreadmodels.readmodels import ReadModelRepository
from tests.fixtures import TaggedItem


class TestReadModelRepositoryProtocol:
    def test_structural_match(self) -> None:
        class DictRepository:
            def __init__(self) -> None:
                self.items: dict[str, TaggedItem] = {}

            async def save(self, model: TaggedItem) -> None:
                self.items[model.get_id()] = model

            async def find(self, id: Any) -> TaggedItem | None:
                return self.items.get(str(id))

            async def find_by(self, fields: Any) -> list[TaggedItem]:
                return []

            async def find_all(self) -> list[TaggedItem]:
                return list(self.items.values())

            async def remove(self, id: Any) -> None:
                self.items.pop(str(id), None)

        assert isinstance(DictRepository(), ReadModelRepository)

    def test_missing_method_not_a_repository(self) -> None:
        class ReadOnly:
            async def find(self, id: Any) -> None:
                return None

        assert not isinstance(ReadOnly(), ReadModelRepository)
