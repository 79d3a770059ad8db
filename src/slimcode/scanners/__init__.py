from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from ..models import ContentKind, LexicalSpan
from .base import MalformedInputError, Scanner
from .markup import MarkupScanner
from .script import ScriptScanner
from .structured import StructuredDataScanner
from .stylesheet import StylesheetScanner

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import SlimCodeConfig

__all__ = [
    "MalformedInputError",
    "Scanner",
    "MarkupScanner",
    "StylesheetScanner",
    "StructuredDataScanner",
    "ScriptScanner",
    "create_scanner",
    "scan",
]

logger = logging.getLogger(__name__)


def create_scanner(kind: ContentKind, config: "SlimCodeConfig | None" = None) -> Scanner:
    """Factory for building the scanner that handles ``kind``."""
    if kind is ContentKind.MARKUP:
        if config is None:
            return MarkupScanner()
        return MarkupScanner(config.raw_text_elements)
    if kind is ContentKind.STYLESHEET:
        return StylesheetScanner()
    if kind is ContentKind.STRUCTURED_DATA:
        return StructuredDataScanner()
    if kind is ContentKind.SCRIPT:
        return ScriptScanner(jsx=False)
    if kind is ContentKind.SCRIPT_WITH_MARKUP:
        return ScriptScanner(jsx=True)
    raise ValueError(f"Unknown content kind '{kind}'.")


def scan(
    text: str, kind: ContentKind, config: "SlimCodeConfig | None" = None
) -> Iterator[LexicalSpan]:
    """
    Lazily split ``text`` into spans for ``kind``.

    Each span must start exactly where the previous one ended and the last
    must end at the end of ``text``; a gap or overlap is a scanner bug and
    trips an assertion. Malformed input raises MalformedInputError while
    iterating.
    """
    expected = 0
    for span in create_scanner(kind, config).scan(text):
        assert span.start == expected and span.text, (
            f"{kind.value} scanner produced a span at {span.start}, expected {expected}"
        )
        expected = span.end
        yield span
    assert expected == len(text), (
        f"{kind.value} scanner stopped at {expected} of {len(text)} characters"
    )
    logger.debug("Scanned %d characters of %s", len(text), kind.value)
