"""
Query and mapping builders for Elasticsearch read model repositories.

Repositories support two kinds of queries only: a conjunction of exact
field equalities and an unconditional scan. This module turns those into
Elasticsearch query DSL, and builds the index mapping that makes equality
matching reliable.

Example:
    >>> term_conjunction({"status": "shipped", "region": "eu"})
    {'bool': {'must': [{'term': {'status': 'shipped'}}, {'term': {'region': 'eu'}}]}}
    >>> match_all()
    {'match_all': {}}
"""

from collections.abc import Iterable, Mapping
from typing import Any

TYPE_FIELD = "_class"
"""Source field holding the serializer type tag when discrimination is on."""


def match_all() -> dict[str, Any]:
    """Query matching every document in the index."""
    return {"match_all": {}}


def term_filters(fields: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    Build one ``term`` clause per field/value pair.

    Term clauses compare the stored value as-is, without analysis, so the
    fields involved must be mapped as ``keyword`` for string values.

    Example:
        >>> term_filters({"name": "a", "tag": "x"})
        [{'term': {'name': 'a'}}, {'term': {'tag': 'x'}}]
    """
    return [{"term": {field: value}} for field, value in fields.items()]


def term_conjunction(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build a query matching documents where every field equals its value.

    Args:
        fields: Mapping of field name to exact value

    Returns:
        ``bool``/``must`` query over the term clauses
    """
    return {"bool": {"must": term_filters(fields)}}


def restrict_to_type(query: Mapping[str, Any], type_tag: str) -> dict[str, Any]:
    """
    Wrap a query so it only matches documents tagged with ``type_tag``.

    The tag goes into filter context: it narrows the result without
    taking part in scoring.
    """
    return {
        "bool": {
            "must": [dict(query)],
            "filter": [{"term": {TYPE_FIELD: type_tag}}],
        }
    }


def keyword_mapping(
    not_analyzed_fields: Iterable[str],
    *,
    with_type_field: bool = False,
) -> dict[str, Any]:
    """
    Build an index mapping declaring fields as exact-match ``keyword``.

    The original document body is kept in ``_source`` so documents can be
    loaded back as read models.

    Args:
        not_analyzed_fields: Field names to index as keywords
        with_type_field: Also declare the type tag field

    Example:
        >>> keyword_mapping(["name"])
        {'_source': {'enabled': True}, 'properties': {'name': {'type': 'keyword'}}}
    """
    properties: dict[str, Any] = {field: {"type": "keyword"} for field in not_analyzed_fields}
    if with_type_field:
        properties[TYPE_FIELD] = {"type": "keyword"}

    return {
        "_source": {"enabled": True},
        "properties": properties,
    }


__all__ = [
    "TYPE_FIELD",
    "keyword_mapping",
    "match_all",
    "restrict_to_type",
    "term_conjunction",
    "term_filters",
]
