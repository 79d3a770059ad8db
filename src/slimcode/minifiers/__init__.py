from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import ContentKind
from .base import Minifier
from .markup import MarkupMinifier
from .script import ScriptMinifier
from .structured import StructuredDataMinifier
from .stylesheet import StylesheetMinifier

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import SlimCodeConfig

__all__ = [
    "Minifier",
    "MarkupMinifier",
    "StylesheetMinifier",
    "StructuredDataMinifier",
    "ScriptMinifier",
    "create_minifier",
    "minify",
]


def create_minifier(kind: ContentKind, config: "SlimCodeConfig | None" = None) -> Minifier:
    """Factory for building the minification strategy for ``kind``."""
    if kind is ContentKind.MARKUP:
        return MarkupMinifier(config)
    if kind is ContentKind.STYLESHEET:
        return StylesheetMinifier(config)
    if kind is ContentKind.STRUCTURED_DATA:
        return StructuredDataMinifier(config)
    if kind is ContentKind.SCRIPT:
        return ScriptMinifier(config, jsx=False)
    if kind is ContentKind.SCRIPT_WITH_MARKUP:
        return ScriptMinifier(config, jsx=True)
    raise ValueError(f"Unknown content kind '{kind}'.")


def minify(text: str, kind: ContentKind, config: "SlimCodeConfig | None" = None) -> str:
    """Minify ``text`` of ``kind``; the text is expected to have passed validation."""
    return create_minifier(kind, config).minify(text)
