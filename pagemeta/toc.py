"""Lookup of the table of contents that owns a page."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .models import Document
from .paths import normalize_file, relative_path_to_file


class TableOfContentsMap:
    """Read-only index from documents to the TOC files referencing them."""

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        self._tocs_by_document: Dict[str, Set[str]] = {}
        for toc_path, documents in (entries or {}).items():
            toc = normalize_file(toc_path)
            for document_path in documents:
                self._tocs_by_document.setdefault(normalize_file(document_path), set()).add(toc)

    def find_toc(self, document: Document) -> Optional[str]:
        """Return the site path of the nearest TOC referencing ``document``."""
        tocs = self._tocs_by_document.get(normalize_file(document.site_path))
        if not tocs:
            return None
        return min(tocs, key=lambda toc: _distance(document.site_path, toc))

    def find_toc_relative_path(self, document: Document) -> Optional[str]:
        toc = self.find_toc(document)
        if toc is None:
            return None
        return relative_path_to_file(document.site_path, toc)


def _distance(document_path: str, toc_path: str) -> Tuple[int, int, str]:
    segments: List[str] = relative_path_to_file(document_path, toc_path).split("/")
    return (segments.count(".."), len(segments), toc_path)


__all__ = ["TableOfContentsMap"]
