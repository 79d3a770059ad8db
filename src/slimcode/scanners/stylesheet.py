from __future__ import annotations

from typing import Iterator

from ..models import LexicalSpan, SpanKind
from .base import MalformedInputError, Scanner, make_span, whitespace_end

STRUCTURAL_CHARS = frozenset("{};:,()[]")


class StylesheetScanner(Scanner):
    """Splits CSS into comments, strings, punctuation and opaque runs."""

    def scan(self, text: str) -> Iterator[LexicalSpan]:
        pos = 0
        length = len(text)
        while pos < length:
            char = text[pos]
            if text.startswith("/*", pos):
                end = text.find("*/", pos + 2)
                if end < 0:
                    raise MalformedInputError("unterminated comment", pos)
                yield make_span(SpanKind.BLOCK_COMMENT, text, pos, end + 2)
                pos = end + 2
            elif char.isspace():
                end = whitespace_end(text, pos)
                yield make_span(SpanKind.WHITESPACE, text, pos, end)
                pos = end
            elif char in "\"'":
                end = scan_quoted(text, pos)
                yield make_span(SpanKind.STRING_LITERAL, text, pos, end)
                pos = end
            elif char in STRUCTURAL_CHARS:
                yield make_span(SpanKind.STRUCTURAL_TOKEN, text, pos, pos + 1)
                pos += 1
            else:
                end = pos + 1
                while end < length and not _ends_opaque(text, end):
                    end += 1
                yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end)
                pos = end


def scan_quoted(text: str, start: int) -> int:
    """Return the index past the quoted string starting at ``start``.

    Backslash escapes (including escaped newlines) are honoured; a raw line
    break or the end of input before the closing quote is malformed.
    """
    quote = text[start]
    pos = start + 1
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == "\\":
            # A line continuation may end in CRLF.
            pos += 3 if text.startswith("\r\n", pos + 1) else 2
            continue
        if char == quote:
            return pos + 1
        if char in "\r\n":
            break
        pos += 1
    raise MalformedInputError("unterminated string literal", start)


def _ends_opaque(text: str, pos: int) -> bool:
    char = text[pos]
    return (
        char.isspace()
        or char in STRUCTURAL_CHARS
        or char in "\"'"
        or text.startswith("/*", pos)
    )
