"""
Exceptions for read model repositories.

This module provides exception classes for error handling in read model
repository operations. "Not found" is deliberately absent: a missing
document or index is a normal outcome for lookups, removals and queries,
and is reported as ``None`` or an empty result instead of an exception.
"""

from esreadmodels.exceptions import EsReadModelsError


class ReadModelError(EsReadModelsError):
    """
    Base exception for read model operations.

    All read model repository exceptions inherit from this class,
    allowing callers to catch all read model errors with a single
    except clause if desired.

    Example:
        >>> try:
        ...     await repo.save(model)
        ... except ReadModelError as e:
        ...     print(f"Read model error: {e}")
    """

    pass


class ReadModelTypeMismatchError(ReadModelError, TypeError):
    """
    Raised when saving a read model of a type other than the bound one.

    A repository is bound to exactly one read model class for its whole
    lifetime, so every document in its index deserializes to the same
    shape. The check runs before any request is sent to the backend.

    Attributes:
        expected_type: Name of the class the repository is bound to
        actual_type: Name of the class of the rejected object

    Example:
        >>> repo = ElasticsearchReadModelRepository(client, OrderSummary)
        >>> try:
        ...     await repo.save(CustomerView(id="c-1", name="Alice"))
        ... except ReadModelTypeMismatchError as e:
        ...     print(f"{e.actual_type} cannot be stored as {e.expected_type}")
    """

    def __init__(self, expected_type: str, actual_type: str) -> None:
        """
        Initialize ReadModelTypeMismatchError.

        Args:
            expected_type: Name of the class the repository is bound to
            actual_type: Name of the class of the rejected object
        """
        self.expected_type = expected_type
        self.actual_type = actual_type
        super().__init__(
            f"Repository is bound to read model type {expected_type}, "
            f"cannot save an instance of {actual_type}"
        )


class PhysicalIndexNotFoundError(ReadModelError, LookupError):
    """
    Raised when an alias switch targets a physical index that does not exist.

    Nothing is deleted or moved when this is raised; the alias keeps
    pointing where it pointed before.

    Attributes:
        alias: The alias that was to be switched
        index: The missing physical index
    """

    def __init__(self, alias: str, index: str) -> None:
        self.alias = alias
        self.index = index
        super().__init__(
            f"Cannot switch alias {alias} to {index}: index does not exist. "
            f"Create and fill it before switching."
        )
