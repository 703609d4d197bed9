"""Tests for pagemeta.metadata."""

from __future__ import annotations

from dataclasses import replace
from typing import List

import pytest

import pagemeta.metadata as metadata_module
from pagemeta.config import DocsetConfig
from pagemeta.culture import CultureError
from pagemeta.docset import Docset
from pagemeta.documents import MetadataDocument, copy_document
from pagemeta.metadata import (
    build_common_metadata,
    build_raw_metadata,
    build_redirection_metadata,
    project_output_metadata,
)
from pagemeta.models import UNKNOWN_UPDATED_AT, ContentType, Contributor, PageModel
from pagemeta.toc import TableOfContentsMap


class RecordingLegacySchema:
    def __init__(self) -> None:
        self.seen: List[MetadataDocument] = []

    def transform(self, metadata: MetadataDocument, page_model: PageModel) -> MetadataDocument:
        self.seen.append(copy_document(metadata))
        return metadata


class RenamingTemplate:
    def __init__(self) -> None:
        self.schemas: List[str] = []

    def transform_metadata(self, schema_name: str, metadata: MetadataDocument) -> MetadataDocument:
        self.schemas.append(schema_name)
        return {**metadata, "ms.topic": metadata.get("topic", "conceptual")}


class FailingTemplate:
    def transform_metadata(self, schema_name: str, metadata: MetadataDocument) -> MetadataDocument:
        raise RuntimeError("template exploded")


def _raw(page_model, docset, document, manifest_output, toc_map, **kwargs) -> MetadataDocument:
    return build_raw_metadata(page_model, "<p>body</p>", docset, document, manifest_output, toc_map, **kwargs)


def test_common_metadata_sets_docset_identity(docset: Docset) -> None:
    result = build_common_metadata({"title": "Hello", "locale": "fr-fr"}, docset)

    assert result == {
        "title": "Hello",
        "locale": "en-us",
        "depot_name": "P.D",
        "search.ms_docsetname": "D",
        "search.ms_product": "P",
        "search.ms_sitename": "Docs",
        "site_name": "Docs",
        "version": 0,
        "__global": {"tutorial_allContributors": "all {0} contributors"},
    }


def test_common_metadata_prunes_nulls_without_mutating_input(docset: Docset) -> None:
    source: MetadataDocument = {"keep": {"inner": None, "list": [None, 1]}, "drop": None}

    result = build_common_metadata(source, docset)

    assert result["keep"] == {"list": [1]}
    assert "drop" not in result
    assert source == {"keep": {"inner": None, "list": [None, 1]}, "drop": None}


def test_redirection_metadata_contains_target_and_locale(docset: Docset) -> None:
    result = build_redirection_metadata(docset, PageModel(redirect_url="/azure/new-page"))
    assert result == {"redirect_url": "/azure/new-page", "locale": "en-us"}


@pytest.mark.parametrize("redirect_url", ["", None])
def test_redirection_metadata_without_target_only_has_locale(docset: Docset, redirect_url) -> None:
    result = build_redirection_metadata(docset, PageModel(redirect_url=redirect_url))
    assert result == {"locale": "en-us"}


def test_raw_metadata_core_fields(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert raw["conceptual"] == "<p>body</p>"
    assert raw["fileRelativePath"] == "articles/intro.html"
    assert raw["toc_rel"] == "toc.json"
    assert raw["wordCount"] == raw["word_count"] == 42
    assert raw["title"] == "Introduction"
    assert raw["rawTitle"] == "<h1>Introduction</h1>"
    assert raw["_op_canonicalUrlPrefix"] == "https://docs.example.com/en-us/azure/"
    assert "_op_pdfUrlPrefixTemplate" not in raw
    assert raw["layout"] == "Conceptual"
    assert raw["_path"] == "articles/intro.raw.page.json"
    assert raw["document_id"] == "doc-1"
    assert raw["document_version_independent_id"] == "doc-vi-1"
    assert raw["depot_name"] == "P.D"
    assert "redirect_url" not in raw


def test_raw_metadata_raw_title_defaults_to_empty(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(replace(page_model, raw_title=None), docset, document, manifest_output, toc_map)
    assert raw["rawTitle"] == ""


def test_raw_metadata_keeps_authored_layout(page_model, docset, document, manifest_output, toc_map) -> None:
    authored = replace(page_model, metadata={"layout": "Custom", "ms.author": "alice"})

    raw = _raw(authored, docset, document, manifest_output, toc_map)

    assert raw["layout"] == "Custom"
    assert raw["ms.author"] == "alice"


def test_raw_metadata_does_not_mutate_authored_metadata(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    authored_metadata = {"tags": {"level": None}, "layout": "Custom"}
    authored = replace(page_model, metadata=authored_metadata)

    _raw(authored, docset, document, manifest_output, toc_map)

    assert authored_metadata == {"tags": {"level": None}, "layout": "Custom"}


def test_raw_metadata_computed_fields_override_authored_values(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    authored = replace(page_model, metadata={"title": "Authored", "locale": "de-de", "word_count": 1})

    raw = _raw(authored, docset, document, manifest_output, toc_map)

    assert raw["title"] == "Introduction"
    assert raw["locale"] == "en-us"
    assert raw["word_count"] == 42


def test_raw_metadata_prefers_explicit_toc_rel(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(replace(page_model, toc_rel="../toc.json"), docset, document, manifest_output, toc_map)
    assert raw["toc_rel"] == "../toc.json"


def test_raw_metadata_without_toc_omits_toc_rel(page_model, docset, document, manifest_output) -> None:
    raw = _raw(page_model, docset, document, manifest_output, TableOfContentsMap())
    assert "toc_rel" not in raw


def test_raw_metadata_pdf_url_template_keeps_branch_placeholder(
    page_model, docset_config, document, manifest_output, toc_map
) -> None:
    docset = Docset.from_config(replace(docset_config, need_generate_pdf_url_template=True))

    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert raw["_op_pdfUrlPrefixTemplate"] == "https://docs.example.com/pdfstore/en-us/P.D/{branchName}"


def test_raw_metadata_redirect_target_overrides_authored(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    authored = replace(page_model, metadata={"redirect_url": "/old"}, redirect_url="/new")
    assert _raw(authored, docset, document, manifest_output, toc_map)["redirect_url"] == "/new"

    kept = replace(page_model, metadata={"redirect_url": "/old"}, redirect_url="")
    assert _raw(kept, docset, document, manifest_output, toc_map)["redirect_url"] == "/old"


def test_raw_metadata_contributor_information(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert raw["_op_gitContributorInformation"] == {
        "author": {"display_name": "Alice", "id": "1", "profile_url": "https://github.com/alice"},
        "contributors": [
            {"display_name": "bob", "id": "2", "profile_url": "https://github.com/bob"},
            {"display_name": "carol", "id": "3"},
        ],
        "update_at": "10/30/2018",
    }
    assert raw["author"] == "alice"
    assert raw["updated_at"] == "2018-10-30 03:05 PM"


def test_raw_metadata_without_contributors_omits_list(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    raw = _raw(replace(page_model, contributors=None), docset, document, manifest_output, toc_map)
    assert "contributors" not in raw["_op_gitContributorInformation"]


def test_raw_metadata_uses_docset_culture_for_dates(
    page_model, docset_config, document, manifest_output, toc_map
) -> None:
    docset = Docset.from_config(replace(docset_config, locale="de-de"))

    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert raw["_op_gitContributorInformation"]["update_at"] == "30.10.2018"
    assert raw["updated_at"] == "2018-10-30 03:05 PM"


@pytest.mark.parametrize("updated_at", [UNKNOWN_UPDATED_AT, None])
def test_raw_metadata_unknown_update_time_skips_provenance(
    page_model, docset, document, manifest_output, toc_map, updated_at
) -> None:
    raw = _raw(replace(page_model, updated_at=updated_at), docset, document, manifest_output, toc_map)

    assert "_op_gitContributorInformation" not in raw
    assert "updated_at" not in raw
    assert raw["author"] == "alice"


def test_raw_metadata_unknown_update_time_and_no_author(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    anonymous = replace(page_model, updated_at=UNKNOWN_UPDATED_AT, author=Contributor(name=""))

    raw = _raw(anonymous, docset, document, manifest_output, toc_map)

    assert "author" not in raw
    assert "updated_at" not in raw


def test_raw_metadata_hands_raw_timestamp_to_legacy_schema_only(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    legacy_schema = RecordingLegacySchema()

    raw = _raw(page_model, docset, document, manifest_output, toc_map, legacy_schema=legacy_schema)

    seen = legacy_schema.seen[0]["_op_gitContributorInformation"]
    assert seen["updated_at_date_time"] == "2018-10-30T15:05:00"
    assert "updated_at_date_time" not in raw["_op_gitContributorInformation"]


def test_raw_metadata_applies_conceptual_template(
    page_model, docset_config, document, manifest_output, toc_map
) -> None:
    template = RenamingTemplate()
    docset = Docset.from_config(docset_config, template=template)

    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert template.schemas == ["conceptual"]
    assert raw["ms.topic"] == "conceptual"


def test_raw_metadata_propagates_template_errors(
    page_model, docset_config, document, manifest_output, toc_map
) -> None:
    docset = Docset.from_config(docset_config, template=FailingTemplate())
    with pytest.raises(RuntimeError, match="template exploded"):
        _raw(page_model, docset, document, manifest_output, toc_map)


def test_raw_metadata_invalid_date_pattern_is_fatal(
    page_model, docset, document, manifest_output, toc_map, monkeypatch
) -> None:
    monkeypatch.setattr(metadata_module, "UPDATED_AT_PATTERN", "yyyy-MM-dd zzz")
    with pytest.raises(CultureError):
        _raw(page_model, docset, document, manifest_output, toc_map)


def test_raw_metadata_contribution_fields(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    assert raw["_op_openToPublicContributors"] is True
    assert raw["open_to_public_contributors"] is True
    assert raw["content_git_url"] == page_model.content_git_url
    assert raw["gitcommit"] == "0123abcd"
    assert raw["original_content_git_url"] == page_model.original_content_git_url


def test_raw_metadata_skips_empty_git_fields(page_model, docset, document, manifest_output, toc_map) -> None:
    bare = replace(page_model, content_git_url="", gitcommit=None, original_content_git_url="")

    raw = _raw(bare, docset, document, manifest_output, toc_map)

    assert "content_git_url" not in raw
    assert "gitcommit" not in raw
    assert "original_content_git_url" not in raw


def test_raw_metadata_redirection_suppresses_contribution_fields(
    page_model, docset, document, manifest_output, toc_map
) -> None:
    redirection = replace(document, content_type=ContentType.REDIRECTION)

    raw = _raw(page_model, docset, redirection, manifest_output, toc_map)

    assert raw["_op_openToPublicContributors"] is True
    for key in ("open_to_public_contributors", "content_git_url", "gitcommit", "original_content_git_url"):
        assert key not in raw


def test_raw_metadata_has_no_nulls(page_model, docset, document, manifest_output) -> None:
    sparse = PageModel(updated_at=page_model.updated_at, author=Contributor(name="alice"))

    raw = _raw(sparse, docset, document, manifest_output, TableOfContentsMap())

    assert "title" not in raw
    assert "document_id" not in raw
    assert raw["_op_gitContributorInformation"]["author"] == {"display_name": "alice"}


def test_raw_metadata_steps_run_in_declared_order() -> None:
    names = [step.__name__ for step in metadata_module.RAW_METADATA_STEPS]
    assert names[:2] == ["_seed_authored_metadata", "_apply_common_metadata"]
    assert names.index("_set_layout") > names.index("_apply_common_metadata")
    assert names.index("_set_redirect_url") > names.index("_set_document_ids")
    assert names[-1] == "_set_contribution_fields"


def test_output_metadata_filters_reserved_keys(page_model, docset, document, manifest_output, toc_map) -> None:
    raw = _raw(page_model, docset, document, manifest_output, toc_map)

    output = project_output_metadata(raw)

    assert output["is_dynamic_rendering"] is True
    assert not any(key.startswith(("_op_", "fileRelativePath")) for key in output)
    for key, value in output.items():
        if key != "is_dynamic_rendering":
            assert raw[key] == value
    assert set(raw) - set(output) == {
        "_op_canonicalUrlPrefix",
        "_op_gitContributorInformation",
        "_op_openToPublicContributors",
        "fileRelativePath",
    }


def test_output_metadata_only_filters_top_level_keys() -> None:
    raw: MetadataDocument = {"nested": {"_op_inner": 1}, "_op_outer": 2, "fileRelativePathExtra": 3}

    output = project_output_metadata(raw)

    assert output == {"nested": {"_op_inner": 1}, "is_dynamic_rendering": True}
    assert "is_dynamic_rendering" not in raw


def test_output_metadata_does_not_share_nested_values_with_raw() -> None:
    raw: MetadataDocument = {"__global": {"a": 1}, "tags": [{"name": "x"}]}

    output = project_output_metadata(raw)
    output["__global"]["a"] = 2
    output["tags"][0]["name"] = "y"

    assert raw == {"__global": {"a": 1}, "tags": [{"name": "x"}]}


def test_common_metadata_for_any_config_has_composite_depot_name() -> None:
    config = DocsetConfig(product="Azure", name="azure-docs", locale="ja-jp")
    result = build_common_metadata({}, Docset.from_config(config))
    assert result["depot_name"] == "Azure.azure-docs"
    assert result["locale"] == "ja-jp"
