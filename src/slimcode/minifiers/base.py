from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import SlimCodeConfig
from ..models import LexicalSpan, SpanKind


class Minifier(ABC):
    """Abstract strategy producing a shorter, equivalent text for one content kind."""

    def __init__(self, config: SlimCodeConfig | None = None) -> None:
        self.config = config or SlimCodeConfig()

    @abstractmethod
    def minify(self, text: str) -> str:
        """Return the minified form of ``text``; raises MalformedInputError on bad input."""
        raise NotImplementedError

    def keeps_comment(self, span: LexicalSpan) -> bool:
        """True for ``/*! ... */`` comments when important comments are preserved."""
        return (
            self.config.keep_important_comments
            and span.kind is SpanKind.BLOCK_COMMENT
            and span.text.startswith("/*!")
        )
