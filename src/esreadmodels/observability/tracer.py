"""
Tracing seam for repositories and lock managers.

Each repository holds a ``Tracer`` and wraps every backend request in
``tracer.span(name, attributes)``. When tracing is off, or OpenTelemetry
is not installed, the span is a no-op that yields ``None``.

Example:
    >>> tracer = create_tracer(__name__, enable_tracing=True)
    >>> with tracer.span("esreadmodels.readmodel.find", {ATTR_INDEX_NAME: "orders"}) as span:
    ...     if span is not None:
    ...         span.set_attribute(ATTR_READMODEL_ID, "o-1")
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from opentelemetry.trace import Span

try:
    from opentelemetry import trace

    OTEL_AVAILABLE = True
except ImportError:
    trace = None  # type: ignore[assignment]
    OTEL_AVAILABLE = False


@runtime_checkable
class Tracer(Protocol):
    """Anything that can open a span around a block of code."""

    @property
    def enabled(self) -> bool:
        """Whether spans are recorded (attribute building can be skipped if not)."""
        ...

    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]: ...


class NullTracer:
    """Tracer used when tracing is disabled. Spans yield None."""

    enabled = False

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> Iterator[None]:
        yield None


class OpenTelemetryTracer:
    """
    Opens spans on the OpenTelemetry tracer registered under ``name``.

    Exceptions raised inside a span are recorded on it and re-raised.
    """

    enabled = True

    def __init__(self, name: str) -> None:
        if trace is None:
            raise ImportError("opentelemetry-api is required for OpenTelemetryTracer")
        self._otel = trace.get_tracer(name)

    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]:
        return self._otel.start_as_current_span(name, attributes=dict(attributes or {}))


def create_tracer(name: str, enable_tracing: bool = True) -> Tracer:
    """
    Pick the tracer for a component.

    Returns an OpenTelemetryTracer when ``enable_tracing`` is set and
    OpenTelemetry can be imported, a NullTracer otherwise.
    """
    if enable_tracing and OTEL_AVAILABLE:
        return OpenTelemetryTracer(name)
    return NullTracer()


__all__ = [
    "OTEL_AVAILABLE",
    "NullTracer",
    "OpenTelemetryTracer",
    "Tracer",
    "create_tracer",
]
