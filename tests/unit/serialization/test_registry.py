"""Unit tests for ReadModelRegistry."""

import pytest

from esreadmodels.serialization import (
    DuplicateReadModelTypeError,
    PydanticReadModelSerializer,
    ReadModelRegistry,
    ReadModelTypeNotFoundError,
    register_read_model,
)
from tests.fixtures import CustomerView, OrderSummary, TaggedItem


class TestReadModelRegistry:
    def test_register_uses_type_name(self, registry: ReadModelRegistry) -> None:
        registry.register(OrderSummary)
        registry.register(CustomerView)

        assert registry.get("OrderSummary") is OrderSummary
        assert registry.get("customer.view") is CustomerView

    def test_register_with_explicit_name(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem, "items.tagged")

        assert registry.get("items.tagged") is TaggedItem
        assert registry.type_name_of(TaggedItem) == "items.tagged"

    def test_register_same_class_twice_is_noop(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem)
        registry.register(TaggedItem)

        assert len(registry) == 1

    def test_duplicate_name_for_other_class(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem, "shared")

        with pytest.raises(DuplicateReadModelTypeError) as exc_info:
            registry.register(OrderSummary, "shared")

        assert exc_info.value.existing_class is TaggedItem
        assert exc_info.value.new_class is OrderSummary

    def test_unknown_type(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem)

        with pytest.raises(ReadModelTypeNotFoundError) as exc_info:
            registry.get("Missing")

        assert exc_info.value.type_name == "Missing"
        assert exc_info.value.available_types == ["TaggedItem"]
        assert isinstance(exc_info.value, KeyError)

    def test_type_name_of_unregistered(self, registry: ReadModelRegistry) -> None:
        assert registry.type_name_of(TaggedItem) is None

    def test_list_types_sorted(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem)
        registry.register(OrderSummary)

        assert registry.list_types() == ["OrderSummary", "TaggedItem"]

    def test_contains_and_unregister(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem)
        assert "TaggedItem" in registry

        assert registry.unregister("TaggedItem") is True
        assert registry.unregister("TaggedItem") is False
        assert "TaggedItem" not in registry

    def test_first_tag_wins_for_saving(self, registry: ReadModelRegistry) -> None:
        registry.register(TaggedItem, "items.v1")
        registry.register(TaggedItem, "items.v2")

        assert registry.get("items.v1") is TaggedItem
        assert registry.get("items.v2") is TaggedItem
        assert registry.type_name_of(TaggedItem) == "items.v1"

        registry.unregister("items.v2")
        assert registry.type_name_of(TaggedItem) == "items.v1"

        registry.unregister("items.v1")
        assert registry.type_name_of(TaggedItem) is None

    def test_empty_registry_used_by_serializer(self, registry: ReadModelRegistry) -> None:
        serializer = PydanticReadModelSerializer(registry)

        serializer.serialize(TaggedItem(id="1", name="a", tag="x"))

        assert serializer.registry is registry
        assert registry.list_types() == ["TaggedItem"]


class TestRegisterReadModelDecorator:
    def test_without_arguments_uses_default_registry(self) -> None:
        from esreadmodels.serialization import default_registry

        class DecoratedDefault(TaggedItem):
            pass

        try:
            assert register_read_model(DecoratedDefault) is DecoratedDefault
            assert default_registry.get("DecoratedDefault") is DecoratedDefault
        finally:
            default_registry.unregister("DecoratedDefault")

    def test_with_arguments(self, registry: ReadModelRegistry) -> None:
        @register_read_model(type_name="custom.tag", registry=registry)
        class Decorated(TaggedItem):
            pass

        assert registry.get("custom.tag") is Decorated
