"""Collaborators applied to assembled raw metadata.

The template engine owns docset specific schema transforms and the legacy
schema post-processor rewrites metadata from the page model. Both are
injected into :func:`pagemeta.metadata.build_raw_metadata`; the passthrough
implementations here are the defaults used when a docset configures neither.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .documents import MetadataDocument, copy_document

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .models import PageModel


class TemplateEngine(Protocol):
    """Applies a named schema transform to a metadata document."""

    def transform_metadata(self, schema_name: str, metadata: MetadataDocument) -> MetadataDocument:
        ...


class LegacySchema(Protocol):
    """Rewrites metadata using the page model before it is published."""

    def transform(self, metadata: MetadataDocument, page_model: "PageModel") -> MetadataDocument:
        ...


class PassthroughTemplate:
    """Template engine without metadata transforms."""

    def transform_metadata(self, schema_name: str, metadata: MetadataDocument) -> MetadataDocument:
        return copy_document(metadata)


class PassthroughLegacySchema:
    def transform(self, metadata: MetadataDocument, page_model: "PageModel") -> MetadataDocument:
        return copy_document(metadata)


__all__ = ["LegacySchema", "PassthroughLegacySchema", "PassthroughTemplate", "TemplateEngine"]
