"""Per-page metadata builders for documentation rendering."""

from .metadata import (
    build_common_metadata,
    build_raw_metadata,
    build_redirection_metadata,
    project_output_metadata,
)

__all__ = [
    "build_common_metadata",
    "build_raw_metadata",
    "build_redirection_metadata",
    "project_output_metadata",
]
