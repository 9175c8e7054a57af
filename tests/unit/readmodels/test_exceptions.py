"""Tests for read model exceptions."""

import pytest

from esreadmodels.exceptions import EsReadModelsError
from esreadmodels.readmodels import ReadModelError, ReadModelTypeMismatchError


class TestReadModelTypeMismatchError:
    def test_attributes_and_message(self) -> None:
        error = ReadModelTypeMismatchError("OrderSummary", "CustomerView")

        assert error.expected_type == "OrderSummary"
        assert error.actual_type == "CustomerView"
        assert "OrderSummary" in str(error)
        assert "CustomerView" in str(error)

    @pytest.mark.parametrize("base", [ReadModelError, EsReadModelsError, TypeError])
    def test_hierarchy(self, base: type[Exception]) -> None:
        assert isinstance(ReadModelTypeMismatchError("A", "B"), base)
