"""Site path helpers shared by the metadata builders."""

from __future__ import annotations

import posixpath
from typing import List


def normalize_file(path: str) -> str:
    """Normalise a relative file path to forward slashes without ``.``/``..`` hops."""
    segments: List[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == ".." and segments and segments[-1] != "..":
            segments.pop()
        else:
            segments.append(segment)
    return "/".join(segments)


def relative_path(path: str, start: str) -> str:
    """Return ``path`` relative to the directory ``start``."""
    return normalize_file(posixpath.relpath(normalize_file(path) or ".", normalize_file(start) or "."))


def relative_path_to_file(from_file: str, to_file: str) -> str:
    """Return ``to_file`` relative to the directory containing ``from_file``."""
    return relative_path(to_file, posixpath.dirname(normalize_file(from_file)))


__all__ = ["normalize_file", "relative_path", "relative_path_to_file"]
