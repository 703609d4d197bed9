"""Read-only page, document and manifest models consumed by the metadata builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

# DateTime default; a page carrying it has no known update time.
UNKNOWN_UPDATED_AT = datetime.min


class ContentType(str, Enum):
    """Kind of source file a page was built from."""

    UNKNOWN = "unknown"
    PAGE = "page"
    REDIRECTION = "redirection"
    TOC = "toc"
    RESOURCE = "resource"


@dataclass(frozen=True)
class Contributor:
    """A git author or contributor of a page."""

    name: str
    display_name: Optional[str] = None
    id: Optional[str] = None
    profile_url: Optional[str] = None

    @property
    def display(self) -> str:
        return self.display_name if self.display_name else self.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Contributor":
        return cls(
            name=str(data.get("name") or ""),
            display_name=_as_optional_str(data.get("display_name")),
            id=_as_optional_str(data.get("id")),
            profile_url=_as_optional_str(data.get("profile_url")),
        )


@dataclass(frozen=True)
class PageModel:
    """Authored and derived state of one documentation page."""

    title: Optional[str] = None
    raw_title: Optional[str] = None
    word_count: int = 0
    document_id: Optional[str] = None
    document_version_independent_id: Optional[str] = None
    locale: Optional[str] = None
    redirect_url: Optional[str] = None
    content_git_url: Optional[str] = None
    gitcommit: Optional[str] = None
    original_content_git_url: Optional[str] = None
    author: Optional[Contributor] = None
    contributors: Optional[Tuple[Contributor, ...]] = None
    updated_at: Optional[datetime] = None
    toc_rel: Optional[str] = None
    metadata: Optional[Mapping[str, Any]] = None

    @property
    def known_updated_at(self) -> Optional[datetime]:
        """The update time, or ``None`` when it is unknown."""
        if self.updated_at is None or self.updated_at == UNKNOWN_UPDATED_AT:
            return None
        return self.updated_at

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageModel":
        """Build a page model from its JSON representation."""
        author_data = data.get("author")
        contributors_data = data.get("contributors")
        contributors = None
        if isinstance(contributors_data, list):
            contributors = tuple(
                Contributor.from_dict(item) for item in contributors_data if isinstance(item, Mapping)
            )
        updated_at = data.get("updated_at")
        metadata = data.get("metadata")
        return cls(
            title=_as_optional_str(data.get("title")),
            raw_title=_as_optional_str(data.get("raw_title")),
            word_count=int(data.get("word_count") or 0),
            document_id=_as_optional_str(data.get("document_id")),
            document_version_independent_id=_as_optional_str(
                data.get("document_version_independent_id")
            ),
            locale=_as_optional_str(data.get("locale")),
            redirect_url=_as_optional_str(data.get("redirect_url")),
            content_git_url=_as_optional_str(data.get("content_git_url")),
            gitcommit=_as_optional_str(data.get("gitcommit")),
            original_content_git_url=_as_optional_str(data.get("original_content_git_url")),
            author=Contributor.from_dict(author_data) if isinstance(author_data, Mapping) else None,
            contributors=contributors,
            updated_at=_parse_timestamp(updated_at),
            toc_rel=_as_optional_str(data.get("toc_rel")),
            metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
        )


@dataclass(frozen=True)
class Document:
    """A source file of a docset and where its rendered output lands."""

    file_path: str
    site_path: str
    output_path: str
    content_type: ContentType = ContentType.PAGE
    site_base_path: str = ""


@dataclass(frozen=True)
class PageOutput:
    output_path_relative_to_site_base_path: str


@dataclass(frozen=True)
class LegacyManifestOutput:
    """Manifest entry describing the on-disk artifacts of a page."""

    page_output: PageOutput = field(default_factory=lambda: PageOutput(""))


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


__all__ = [
    "ContentType",
    "Contributor",
    "Document",
    "LegacyManifestOutput",
    "PageModel",
    "PageOutput",
    "UNKNOWN_UPDATED_AT",
]
