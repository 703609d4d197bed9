from __future__ import annotations

from datetime import datetime

import pytest

from pagemeta.config import ContributionConfig, DocsetConfig
from pagemeta.docset import Docset
from pagemeta.models import Contributor, Document, LegacyManifestOutput, PageModel, PageOutput
from pagemeta.toc import TableOfContentsMap


@pytest.fixture
def docset_config() -> DocsetConfig:
    return DocsetConfig(
        product="P",
        name="D",
        locale="en-us",
        base_url="https://docs.example.com",
        site_base_path="azure",
        contribution=ContributionConfig(show_edit=True),
    )


@pytest.fixture
def docset(docset_config: DocsetConfig) -> Docset:
    return Docset.from_config(docset_config)


@pytest.fixture
def document() -> Document:
    return Document(
        file_path="articles/intro.md",
        site_path="azure/articles/intro.html",
        output_path="azure/articles/intro.raw.page.json",
        site_base_path="azure",
    )


@pytest.fixture
def manifest_output() -> LegacyManifestOutput:
    return LegacyManifestOutput(PageOutput("articles/intro.raw.page.json"))


@pytest.fixture
def toc_map() -> TableOfContentsMap:
    return TableOfContentsMap(
        {
            "azure/toc.json": ["azure/articles/intro.html"],
            "azure/articles/toc.json": ["azure/articles/intro.html"],
        }
    )


@pytest.fixture
def page_model() -> PageModel:
    return PageModel(
        title="Introduction",
        raw_title="<h1>Introduction</h1>",
        word_count=42,
        document_id="doc-1",
        document_version_independent_id="doc-vi-1",
        locale="en-us",
        content_git_url="https://github.com/org/repo/blob/live/articles/intro.md",
        gitcommit="0123abcd",
        original_content_git_url="https://github.com/org/repo/blob/main/articles/intro.md",
        author=Contributor(name="alice", display_name="Alice", id="1", profile_url="https://github.com/alice"),
        contributors=(
            Contributor(name="bob", id="2", profile_url="https://github.com/bob"),
            Contributor(name="carol", display_name="", id="3"),
        ),
        updated_at=datetime(2018, 10, 30, 15, 5),
    )
