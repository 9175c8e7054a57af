"""
Standard span attributes for esreadmodels.

Attribute constants used across repositories for consistent span
labeling. These follow OpenTelemetry semantic conventions where
applicable.

Example:
    >>> from esreadmodels.observability.attributes import (
    ...     ATTR_READMODEL_ID,
    ...     ATTR_READMODEL_TYPE,
    ... )
    >>>
    >>> with tracer.span(
    ...     "esreadmodels.readmodel.save",
    ...     {
    ...         ATTR_READMODEL_TYPE: "OrderSummary",
    ...         ATTR_READMODEL_ID: model.get_id(),
    ...     },
    ... ):
    ...     pass
"""

# =============================================================================
# Read Model Attributes
# =============================================================================

ATTR_READMODEL_TYPE = "esreadmodels.readmodel.type"
"""Type name of the read model (e.g., 'OrderSummary')."""

ATTR_READMODEL_ID = "esreadmodels.readmodel.id"
"""Identity string of the read model document."""

ATTR_QUERY_FILTER_COUNT = "esreadmodels.query.filter_count"
"""Number of equality filters in a query (integer)."""

ATTR_QUERY_LIMIT = "esreadmodels.query.limit"
"""Page size requested from the backend (integer)."""

# =============================================================================
# Index Attributes
# =============================================================================

ATTR_INDEX_NAME = "esreadmodels.index.name"
"""Logical index (or alias) name the repository is bound to."""

ATTR_PHYSICAL_INDEX = "esreadmodels.index.physical"
"""Physical index name behind an alias."""

ATTR_OLD_INDEX_COUNT = "esreadmodels.index.old_count"
"""Number of physical indices retired by an alias switch (integer)."""

# =============================================================================
# Lock Attributes
# =============================================================================

ATTR_LOCK_KEY = "esreadmodels.lock.key"
"""Key identifying an advisory lock."""

ATTR_LOCK_TIMEOUT = "esreadmodels.lock.timeout"
"""Lock acquisition timeout in seconds (-1 for none)."""

# =============================================================================
# Database Attributes (OpenTelemetry semantic conventions)
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""Database system identifier ('elasticsearch')."""

ATTR_DB_OPERATION = "db.operation"
"""Backend operation name (e.g., 'index', 'search', 'update_aliases')."""


__all__ = [
    "ATTR_READMODEL_TYPE",
    "ATTR_READMODEL_ID",
    "ATTR_QUERY_FILTER_COUNT",
    "ATTR_QUERY_LIMIT",
    "ATTR_INDEX_NAME",
    "ATTR_PHYSICAL_INDEX",
    "ATTR_OLD_INDEX_COUNT",
    "ATTR_LOCK_KEY",
    "ATTR_LOCK_TIMEOUT",
    "ATTR_DB_SYSTEM",
    "ATTR_DB_OPERATION",
]
