"""CLI entrypoints for pagemeta commands."""

from __future__ import annotations

import argparse
import json
import posixpath
import sys
from pathlib import Path
from typing import Any, Dict

from .config import ConfigError, load_config
from .culture import CultureError
from .docset import Docset
from .documents import MetadataDocument, to_json
from .logging import configure_logging, get_logger
from .metadata import build_raw_metadata, build_redirection_metadata, project_output_metadata
from .models import ContentType, Document, LegacyManifestOutput, PageModel, PageOutput
from .toc import TableOfContentsMap

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log records to this file.",
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    _add_log_file_option(parser, suppress_default=True)
    parser.add_argument("page", help="Path to the page model JSON file.")
    parser.add_argument(
        "--config",
        default=".",
        help="Docset directory or docset.yml path (defaults to current directory).",
    )
    parser.add_argument(
        "--output",
        help="Write the metadata JSON to this file instead of stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagemeta",
        description="Build rendering metadata for documentation pages.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    page_parser = subparsers.add_parser(
        "page",
        help="Build raw metadata for a page and print its published projection.",
    )
    _add_common_options(page_parser)
    page_parser.add_argument("--content", help="File holding the rendered page body.")
    page_parser.add_argument(
        "--file-path",
        help="Source path of the page within the docset (defaults to the page file name).",
    )
    page_parser.add_argument(
        "--site-path",
        help="Site path of the rendered page (defaults to the source path with an .html suffix).",
    )
    page_parser.add_argument(
        "--output-path",
        help="Output path of the rendered page (defaults to the site path under the site base path).",
    )
    page_parser.add_argument(
        "--content-type",
        choices=[content_type.value for content_type in ContentType],
        default=ContentType.PAGE.value,
        help="Content type of the source file.",
    )
    page_parser.add_argument(
        "--manifest-output",
        help="Output path relative to the site base path recorded in the legacy manifest.",
    )
    page_parser.add_argument(
        "--toc",
        help="JSON file mapping TOC site paths to the site paths they reference.",
    )
    page_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print raw metadata instead of the published projection.",
    )

    redirect_parser = subparsers.add_parser(
        "redirect",
        help="Build metadata for a redirect-only page.",
    )
    _add_common_options(redirect_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for pagemeta commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger.debug("Running %s for %s", args.command, args.page)

    try:
        docset = Docset.from_config(load_config(Path(args.config)))
        page_model = PageModel.from_dict(_read_json(Path(args.page)))
        if args.command == "page":
            metadata = _build_page(args, docset, page_model)
        else:
            metadata = build_redirection_metadata(docset, page_model)
    except (ConfigError, CultureError) as exc:
        parser.exit(1, f"pagemeta {args.command} failed: {exc}\n")
    except (OSError, ValueError) as exc:
        parser.exit(1, f"pagemeta {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    payload = to_json(metadata)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        logger.info("Metadata written to %s", args.output)
    else:
        sys.stdout.write(payload)


def _build_page(args: argparse.Namespace, docset: Docset, page_model: PageModel) -> MetadataDocument:
    site_base_path = docset.config.site_base_path
    file_path = args.file_path or Path(args.page).name
    site_path = args.site_path or posixpath.splitext(file_path)[0] + ".html"
    output_path = args.output_path or posixpath.join(site_base_path, site_path)
    document = Document(
        file_path=file_path,
        site_path=site_path,
        output_path=output_path,
        content_type=ContentType(args.content_type),
        site_base_path=site_base_path,
    )
    manifest_output = LegacyManifestOutput(PageOutput(args.manifest_output or site_path))
    content = Path(args.content).read_text(encoding="utf-8") if args.content else ""
    toc_map = TableOfContentsMap(_read_json(Path(args.toc)) if args.toc else None)

    raw_metadata = build_raw_metadata(page_model, content, docset, document, manifest_output, toc_map)
    if args.raw:
        return raw_metadata
    return project_output_metadata(raw_metadata)


def _read_json(path: Path) -> Dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    return data


if __name__ == "__main__":  # pragma: no cover
    main()
