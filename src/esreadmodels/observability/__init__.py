"""
Observability utilities for esreadmodels.

Tracing helpers and standard attribute definitions shared by all
repositories and lock managers.

Example:
    >>> from esreadmodels.observability import create_tracer
    >>>
    >>> class MyRepository:
    ...     def __init__(self, enable_tracing: bool = True):
    ...         self._tracer = create_tracer(__name__, enable_tracing)

Note:
    OpenTelemetry is an optional dependency. Everything here works
    (as a no-op) when it is not installed.
"""

from esreadmodels.observability.attributes import (
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_INDEX_NAME,
    ATTR_LOCK_KEY,
    ATTR_LOCK_TIMEOUT,
    ATTR_OLD_INDEX_COUNT,
    ATTR_PHYSICAL_INDEX,
    ATTR_QUERY_FILTER_COUNT,
    ATTR_QUERY_LIMIT,
    ATTR_READMODEL_ID,
    ATTR_READMODEL_TYPE,
)
from esreadmodels.observability.tracer import (
    OTEL_AVAILABLE,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)

__all__ = [
    "OTEL_AVAILABLE",
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "create_tracer",
    "ATTR_DB_OPERATION",
    "ATTR_DB_SYSTEM",
    "ATTR_INDEX_NAME",
    "ATTR_LOCK_KEY",
    "ATTR_LOCK_TIMEOUT",
    "ATTR_OLD_INDEX_COUNT",
    "ATTR_PHYSICAL_INDEX",
    "ATTR_QUERY_FILTER_COUNT",
    "ATTR_QUERY_LIMIT",
    "ATTR_READMODEL_ID",
    "ATTR_READMODEL_TYPE",
]
