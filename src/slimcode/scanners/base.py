from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from ..models import LexicalSpan, SpanContext, SpanKind


class MalformedInputError(ValueError):
    """Raised when a text cannot be split into spans consistently."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.message = message
        self.offset = offset
        if offset is not None:
            message = f"{message} at offset {offset}"
        super().__init__(message)


class Scanner(ABC):
    """Turns one input text into a forward-only sequence of lexical spans."""

    @abstractmethod
    def scan(self, text: str) -> Iterator[LexicalSpan]:
        """Yield spans that concatenate back to ``text``."""
        raise NotImplementedError


def whitespace_end(text: str, pos: int) -> int:
    """Return the index just past the whitespace run starting at ``pos``."""
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1
    return pos


def make_span(
    kind: SpanKind,
    text: str,
    start: int,
    end: int,
    context: SpanContext = SpanContext.CODE,
) -> LexicalSpan:
    return LexicalSpan(kind=kind, text=text[start:end], start=start, context=context)
