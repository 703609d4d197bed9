"""Docset configuration loading (docset.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILE_NAME = "docset.yml"


class ConfigError(RuntimeError):
    """Raised when the docset configuration cannot be loaded."""


@dataclass(frozen=True)
class ContributionConfig:
    """Controls the public edit/contribution affordances of rendered pages."""

    show_edit: bool = False


@dataclass(frozen=True)
class DocsetConfig:
    """Docset-wide identity and URL settings."""

    product: str
    name: str
    locale: str = "en-us"
    base_url: str = ""
    site_base_path: str = ""
    contribution: ContributionConfig = field(default_factory=ContributionConfig)
    need_generate_pdf_url_template: bool = False

    @property
    def depot_name(self) -> str:
        return f"{self.product}.{self.name}"


def load_config(config_path: Path) -> DocsetConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Docset configuration not found: {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")
    return config_from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> DocsetConfig:
    """Build a :class:`DocsetConfig` from an already parsed mapping."""
    product = _as_str(data.get("product"))
    name = _as_str(data.get("name"))
    if not product or not name:
        raise ConfigError("Docset configuration requires both 'product' and 'name'")

    contribution_data = _as_dict(data.get("contribution"))
    contribution = ContributionConfig(show_edit=_as_bool(contribution_data.get("show_edit")) or False)

    return DocsetConfig(
        product=product,
        name=name,
        locale=(_as_str(data.get("locale")) or "en-us").lower(),
        base_url=(_as_str(data.get("base_url")) or "").rstrip("/"),
        site_base_path=(_as_str(data.get("site_base_path")) or "").strip("/"),
        contribution=contribution,
        need_generate_pdf_url_template=_as_bool(data.get("need_generate_pdf_url_template")) or False,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ContributionConfig",
    "DocsetConfig",
    "config_from_dict",
    "load_config",
]
