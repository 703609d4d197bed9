"""Per-page metadata assembly for legacy and dynamic rendering.

``build_raw_metadata`` assembles the raw metadata consumed by the legacy
static renderer. It runs an ordered sequence of steps; each step receives the
document built so far and returns a new one, and a key written by a later step
overrides the same key written earlier. ``project_output_metadata`` filters
raw metadata into the document published for dynamic rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .culture import format_datetime, format_short_date
from .docset import Docset
from .documents import (
    JsonValue,
    MetadataDocument,
    copy_document,
    prune_document,
    without_nested_key,
)
from .logging import get_logger
from .models import ContentType, Contributor, Document, LegacyManifestOutput, PageModel
from .paths import relative_path
from .template import LegacySchema, PassthroughLegacySchema
from .toc import TableOfContentsMap

logger = get_logger("metadata")

OUTPUT_BLACKLIST: Tuple[str, ...] = ("_op_", "fileRelativePath")
CONTRIBUTOR_INFORMATION_KEY = "_op_gitContributorInformation"
UPDATED_AT_DATE_TIME_KEY = "updated_at_date_time"
UPDATED_AT_PATTERN = "yyyy-MM-dd hh:mm tt"
CONCEPTUAL_SCHEMA = "conceptual"
DEFAULT_LAYOUT = "Conceptual"
SITE_NAME = "Docs"
ALL_CONTRIBUTORS_TEMPLATE = "all {0} contributors"


@dataclass(frozen=True)
class _BuildContext:
    page_model: PageModel
    content: str
    docset: Docset
    document: Document
    manifest_output: LegacyManifestOutput
    toc_map: TableOfContentsMap


_Step = Callable[[MetadataDocument, _BuildContext], MetadataDocument]


def build_common_metadata(metadata: MetadataDocument, docset: Docset) -> MetadataDocument:
    """Return ``metadata`` with the docset-wide identity fields set."""
    config = docset.config
    common: Dict[str, JsonValue] = {
        "depot_name": config.depot_name,
        "search.ms_docsetname": config.name,
        "search.ms_product": config.product,
        "search.ms_sitename": SITE_NAME,
        "locale": config.locale,
        "site_name": SITE_NAME,
        "version": 0,
        "__global": {"tutorial_allContributors": ALL_CONTRIBUTORS_TEMPLATE},
    }
    return prune_document(_set(copy_document(metadata), common))


def build_redirection_metadata(docset: Docset, page_model: PageModel) -> MetadataDocument:
    """Return the minimal metadata of a redirect-only page."""
    return prune_document(
        {
            "redirect_url": page_model.redirect_url or None,
            "locale": docset.config.locale,
        }
    )


def build_raw_metadata(
    page_model: PageModel,
    content: str,
    docset: Docset,
    document: Document,
    manifest_output: LegacyManifestOutput,
    toc_map: TableOfContentsMap,
    *,
    legacy_schema: Optional[LegacySchema] = None,
) -> MetadataDocument:
    """Assemble the raw metadata of a page.

    Errors raised by the template engine or ``legacy_schema`` propagate
    unchanged, as does :class:`~pagemeta.culture.CultureError` for a date
    pattern the docset culture cannot format.
    """
    context = _BuildContext(
        page_model=page_model,
        content=content,
        docset=docset,
        document=document,
        manifest_output=manifest_output,
        toc_map=toc_map,
    )
    logger.debug("Building raw metadata for %s", document.file_path)

    raw_metadata: MetadataDocument = {}
    for step in RAW_METADATA_STEPS:
        raw_metadata = step(raw_metadata, context)

    transformed = docset.template.transform_metadata(CONCEPTUAL_SCHEMA, raw_metadata)
    schema = legacy_schema if legacy_schema is not None else PassthroughLegacySchema()
    transformed = schema.transform(transformed, page_model)

    # The raw timestamp only exists for the post-processor; it never reaches output.
    transformed = without_nested_key(transformed, CONTRIBUTOR_INFORMATION_KEY, UPDATED_AT_DATE_TIME_KEY)
    return prune_document(transformed)


def project_output_metadata(raw_metadata: MetadataDocument) -> MetadataDocument:
    """Return the dynamic rendering projection of ``raw_metadata``."""
    output = copy_document(
        {key: value for key, value in raw_metadata.items() if not key.startswith(OUTPUT_BLACKLIST)}
    )
    output["is_dynamic_rendering"] = True
    return output


def contributor_to_metadata(contributor: Contributor) -> MetadataDocument:
    return {
        "display_name": contributor.display,
        "id": contributor.id,
        "profile_url": contributor.profile_url,
    }


def _set(metadata: MetadataDocument, updates: Dict[str, JsonValue]) -> MetadataDocument:
    return {**metadata, **updates}


def _seed_authored_metadata(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    authored = context.page_model.metadata
    return copy_document(dict(authored)) if authored is not None else {}


def _apply_common_metadata(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    return build_common_metadata(metadata, context.docset)


def _set_content(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    return _set(metadata, {"conceptual": context.content})


def _set_file_relative_path(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    output_path = context.manifest_output.page_output.output_path_relative_to_site_base_path
    return _set(metadata, {"fileRelativePath": output_path.replace(".raw.page.json", ".html")})


def _set_toc_rel(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    toc_rel = context.page_model.toc_rel
    if toc_rel is None:
        toc_rel = context.toc_map.find_toc_relative_path(context.document)
    return _set(metadata, {"toc_rel": toc_rel})


def _set_word_count(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    word_count = context.page_model.word_count
    return _set(metadata, {"wordCount": word_count, "word_count": word_count})


def _set_titles(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    page_model = context.page_model
    return _set(metadata, {"title": page_model.title, "rawTitle": page_model.raw_title or ""})


def _set_canonical_url_prefix(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    config = context.docset.config
    prefix = f"{config.base_url}/{config.locale}/{config.site_base_path}/"
    return _set(metadata, {"_op_canonicalUrlPrefix": prefix})


def _set_pdf_url_prefix_template(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    config = context.docset.config
    if not config.need_generate_pdf_url_template:
        return metadata
    template = f"{config.base_url}/pdfstore/{context.page_model.locale}/{config.depot_name}/{{branchName}}"
    return _set(metadata, {"_op_pdfUrlPrefixTemplate": template})


def _set_layout(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    return _set(metadata, {"layout": metadata["layout"] if "layout" in metadata else DEFAULT_LAYOUT})


def _set_site_path(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    document = context.document
    return _set(metadata, {"_path": relative_path(document.output_path, document.site_base_path)})


def _set_document_ids(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    page_model = context.page_model
    return _set(
        metadata,
        {
            "document_id": page_model.document_id,
            "document_version_independent_id": page_model.document_version_independent_id,
        },
    )


def _set_redirect_url(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    redirect_url = context.page_model.redirect_url
    if not redirect_url:
        return metadata
    return _set(metadata, {"redirect_url": redirect_url})


def _set_contributor_information(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    page_model = context.page_model
    updated_at = page_model.known_updated_at
    if updated_at is None:
        return metadata
    contributors = page_model.contributors
    information: MetadataDocument = {
        "author": contributor_to_metadata(page_model.author) if page_model.author is not None else None,
        "contributors": (
            [contributor_to_metadata(contributor) for contributor in contributors]
            if contributors is not None
            else None
        ),
        "update_at": format_short_date(updated_at, context.docset.culture),
        UPDATED_AT_DATE_TIME_KEY: updated_at.isoformat(),
    }
    return _set(metadata, {CONTRIBUTOR_INFORMATION_KEY: information})


def _set_author_and_updated_at(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    page_model = context.page_model
    updates: Dict[str, JsonValue] = {}
    if page_model.author is not None and page_model.author.name:
        updates["author"] = page_model.author.name
    updated_at = page_model.known_updated_at
    if updated_at is not None:
        updates["updated_at"] = format_datetime(updated_at, UPDATED_AT_PATTERN, context.docset.culture)
    return _set(metadata, updates)


def _set_contribution_fields(metadata: MetadataDocument, context: _BuildContext) -> MetadataDocument:
    show_edit = context.docset.config.contribution.show_edit
    updates: Dict[str, JsonValue] = {"_op_openToPublicContributors": show_edit}
    if context.document.content_type != ContentType.REDIRECTION:
        page_model = context.page_model
        updates["open_to_public_contributors"] = show_edit
        if page_model.content_git_url:
            updates["content_git_url"] = page_model.content_git_url
        if page_model.gitcommit:
            updates["gitcommit"] = page_model.gitcommit
        if page_model.original_content_git_url:
            updates["original_content_git_url"] = page_model.original_content_git_url
    else:
        logger.debug("Skipping contribution fields for redirection %s", context.document.file_path)
    return _set(metadata, updates)


RAW_METADATA_STEPS: Tuple[_Step, ...] = (
    _seed_authored_metadata,
    _apply_common_metadata,
    _set_content,
    _set_file_relative_path,
    _set_toc_rel,
    _set_word_count,
    _set_titles,
    _set_canonical_url_prefix,
    _set_pdf_url_prefix_template,
    _set_layout,
    _set_site_path,
    _set_document_ids,
    _set_redirect_url,
    _set_contributor_information,
    _set_author_and_updated_at,
    _set_contribution_fields,
)


__all__ = [
    "OUTPUT_BLACKLIST",
    "RAW_METADATA_STEPS",
    "build_common_metadata",
    "build_raw_metadata",
    "build_redirection_metadata",
    "contributor_to_metadata",
    "project_output_metadata",
]
