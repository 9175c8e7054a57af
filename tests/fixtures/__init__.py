"""
Shared test fixtures for the esreadmodels library.

This module provides:
- Test read model types (TaggedItem, OrderSummary, CustomerView)
- FakeElasticsearch, an in-process double for AsyncElasticsearch
- Helpers building the client's own error types
- MockTracer, recording spans for assertions

Usage:
    from tests.fixtures import (
        FakeElasticsearch,
        OrderSummary,
        TaggedItem,
        not_found_error,
    )
"""

from tests.fixtures.elasticsearch import (
    FakeElasticsearch,
    api_meta,
    health_timeout_error,
    make_hit,
    matches,
    not_found_error,
)
from tests.fixtures.readmodels import (
    CustomerView,
    OrderSummary,
    PriorityOrderSummary,
    TaggedItem,
)
from tests.fixtures.tracing import MockTracer

__all__ = [
    # Elasticsearch double
    "FakeElasticsearch",
    "api_meta",
    "health_timeout_error",
    "make_hit",
    "matches",
    "not_found_error",
    # Read models
    "CustomerView",
    "OrderSummary",
    "PriorityOrderSummary",
    "TaggedItem",
    # Tracing
    "MockTracer",
]
