"""
Base class for read models stored in a search index.

Read models are denormalized views of application state, optimized for
query performance. They are written by projection code and stored as
documents keyed by their identity string.
"""

import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Acronym runs ("DTO", "HTTP") or capitalized words
_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+")
_ES_PLURAL = re.compile(r"(?:s|x|z|ch|sh)$")
_IES_PLURAL = re.compile(r"[^aeiou]y$")


def _snake_case(class_name: str) -> str:
    """``HTTPResponse`` -> ``http_response``."""
    return "_".join(word.lower() for word in _WORD.findall(class_name))


def _plural(name: str) -> str:
    """Regular English plural of the last word; irregular plurals are not handled."""
    if _IES_PLURAL.search(name):
        return name[:-1] + "ies"
    if _ES_PLURAL.search(name):
        return name + "es"
    return name + "s"


class ReadModel(BaseModel):
    """
    Base class for read models persisted by a repository.

    The identity is always a string, since search backends key documents
    by string ids. UUIDs and integers are accepted on construction and
    converted.

    Example:
        >>> class ShipmentView(ReadModel):
        ...     carrier: str
        ...     tracking_code: str
        >>> view = ShipmentView(id=1042, carrier="DHL", tracking_code="JD0146")
        >>> view.id
        '1042'
        >>> ShipmentView.index_name()
        'shipment_views'
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )

    id: str = Field(..., description="Document id in the index")

    # Class-level overrides
    __index_name__: ClassVar[str | None] = None
    __type_name__: ClassVar[str | None] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def get_id(self) -> str:
        """Return the identity string used as the document id."""
        return self.id

    @classmethod
    def index_name(cls) -> str:
        """
        Index (or alias) this model is stored in unless a repository names one.

        ``__index_name__`` when set, otherwise the pluralized snake_case
        class name: ``OrderSummary`` -> ``order_summaries``.
        """
        if cls.__index_name__:
            return cls.__index_name__
        return _plural(_snake_case(cls.__name__))

    @classmethod
    def type_name(cls) -> str:
        """
        Get the type tag recorded alongside serialized instances.

        Returns __type_name__ if explicitly set, otherwise the class name.
        """
        return cls.__type_name__ or cls.__name__

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
