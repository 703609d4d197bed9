"""Metadata document values and the tree passes applied to them."""

from __future__ import annotations

import json
from typing import Dict, List, Union, cast

JsonValue = Union[str, int, float, bool, None, Dict[str, "JsonValue"], List["JsonValue"]]
MetadataDocument = Dict[str, JsonValue]


def remove_nulls(value: JsonValue) -> JsonValue:
    """Return a copy of ``value`` with null entries pruned at every depth.

    Mapping keys whose value is ``None`` are dropped and ``None`` items are
    dropped from sequences. Containers left empty by pruning are kept.
    """
    if value is None or isinstance(value, (bool, str, int, float)):
        return value
    if isinstance(value, dict):
        return {key: remove_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [remove_nulls(item) for item in value if item is not None]
    raise TypeError(f"Unsupported metadata value of type {type(value).__name__}")


def prune_document(document: MetadataDocument) -> MetadataDocument:
    """Apply :func:`remove_nulls` to a whole document."""
    return cast(MetadataDocument, remove_nulls(document))


def copy_document(document: MetadataDocument) -> MetadataDocument:
    """Deep copy a document; every container in the result is new."""
    return {key: _copy_value(item) for key, item in document.items()}


def _copy_value(value: JsonValue) -> JsonValue:
    if isinstance(value, dict):
        return copy_document(value)
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def without_nested_key(document: MetadataDocument, block: str, key: str) -> MetadataDocument:
    """Return ``document`` with ``key`` removed from the mapping stored under ``block``."""
    nested = document.get(block)
    if not isinstance(nested, dict) or key not in nested:
        return document
    updated = dict(document)
    updated[block] = {name: item for name, item in nested.items() if name != key}
    return updated


def to_json(document: MetadataDocument) -> str:
    """Serialise a document for writing to disk or stdout."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


__all__ = [
    "JsonValue",
    "MetadataDocument",
    "copy_document",
    "prune_document",
    "remove_nulls",
    "to_json",
    "without_nested_key",
]
