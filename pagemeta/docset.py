"""Docset context handed to every metadata builder."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import DocsetConfig
from .culture import CultureInfo, get_culture
from .template import PassthroughTemplate, TemplateEngine


@dataclass(frozen=True)
class Docset:
    """Configuration, culture and template engine of one docset."""

    config: DocsetConfig
    culture: CultureInfo
    template: TemplateEngine = field(default_factory=PassthroughTemplate)

    @classmethod
    def from_config(cls, config: DocsetConfig, template: TemplateEngine | None = None) -> "Docset":
        return cls(
            config=config,
            culture=get_culture(config.locale),
            template=template if template is not None else PassthroughTemplate(),
        )


__all__ = ["Docset"]
