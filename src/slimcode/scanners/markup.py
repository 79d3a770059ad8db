from __future__ import annotations

import re
from typing import Generator, Iterable, Iterator

from ..models import LexicalSpan, SpanContext, SpanKind
from .base import MalformedInputError, Scanner, make_span, whitespace_end

DEFAULT_RAW_TEXT_ELEMENTS = ("script", "style", "pre", "textarea")

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"

TAG_NAME_RE = re.compile(r"[A-Za-z][\w:.\-]*")

TagScan = Generator[LexicalSpan, None, "tuple[str, bool, bool, int]"]


class MarkupScanner(Scanner):
    """
    Splits HTML-like markup into text, tag and comment spans.

    Tags are broken into delimiters, names, attribute values and the
    whitespace between them so that ``>`` or spaces inside a quoted value
    never end a tag. The bodies of raw-text elements are yielded untouched.
    """

    def __init__(self, raw_text_elements: Iterable[str] = DEFAULT_RAW_TEXT_ELEMENTS) -> None:
        self.raw_text_elements = frozenset(name.lower() for name in raw_text_elements)

    def scan(self, text: str) -> Iterator[LexicalSpan]:
        pos = 0
        length = len(text)
        while pos < length:
            if text.startswith(COMMENT_OPEN, pos):
                end = text.find(COMMENT_CLOSE, pos + len(COMMENT_OPEN))
                if end < 0:
                    raise MalformedInputError("unterminated markup comment", pos)
                end += len(COMMENT_CLOSE)
                yield make_span(SpanKind.BLOCK_COMMENT, text, pos, end, SpanContext.TEXT)
                pos = end
            elif text.startswith(CDATA_OPEN, pos):
                end = text.find(CDATA_CLOSE, pos + len(CDATA_OPEN))
                if end < 0:
                    raise MalformedInputError("unterminated CDATA section", pos)
                end += len(CDATA_CLOSE)
                yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end, SpanContext.RAW)
                pos = end
            elif is_tag_start(text, pos):
                name, closing, self_closing, pos = yield from self._scan_tag(text, pos)
                if name in self.raw_text_elements and not closing and not self_closing:
                    pos = yield from self._scan_raw_text(text, pos, name)
            elif text[pos].isspace():
                end = whitespace_end(text, pos)
                yield make_span(SpanKind.WHITESPACE, text, pos, end, SpanContext.TEXT)
                pos = end
            else:
                end = pos + 1
                while end < length and not text[end].isspace() and text[end] != "<":
                    end += 1
                yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end, SpanContext.TEXT)
                pos = end

    def _scan_tag(self, text: str, start: int) -> TagScan:
        length = len(text)
        delimiter = "</" if text[start + 1] == "/" else text[start : start + 2]
        if delimiter not in ("</", "<!", "<?"):
            delimiter = "<"
        pos = start + len(delimiter)
        yield make_span(SpanKind.STRUCTURAL_TOKEN, text, start, pos, SpanContext.TAG)

        name_end = pos
        while name_end < length and not _ends_name(text, name_end):
            name_end += 1
        name = text[pos:name_end]
        if name:
            yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, name_end, SpanContext.TAG)
        pos = name_end

        after_equals = False
        while pos < length:
            char = text[pos]
            if char.isspace():
                end = whitespace_end(text, pos)
                yield make_span(SpanKind.WHITESPACE, text, pos, end, SpanContext.TAG)
                pos = end
            elif char == ">":
                yield make_span(SpanKind.STRUCTURAL_TOKEN, text, pos, pos + 1, SpanContext.TAG)
                return name.lower(), delimiter == "</", False, pos + 1
            elif text.startswith("/>", pos) and not after_equals:
                yield make_span(SpanKind.STRUCTURAL_TOKEN, text, pos, pos + 2, SpanContext.TAG)
                return name.lower(), delimiter == "</", True, pos + 2
            elif char == "=":
                yield make_span(SpanKind.STRUCTURAL_TOKEN, text, pos, pos + 1, SpanContext.TAG)
                pos += 1
                after_equals = True
                continue
            elif char in "\"'":
                end = text.find(char, pos + 1)
                if end < 0:
                    raise MalformedInputError("unterminated attribute value", pos)
                yield make_span(SpanKind.STRING_LITERAL, text, pos, end + 1, SpanContext.TAG)
                pos = end + 1
            else:
                end = pos + 1
                while end < length and not text[end].isspace() and text[end] not in ">=\"'":
                    if not after_equals and text.startswith("/>", end):
                        break
                    end += 1
                yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end, SpanContext.TAG)
                pos = end
            after_equals = False
        raise MalformedInputError("unterminated tag", start)

    def _scan_raw_text(
        self, text: str, pos: int, name: str
    ) -> Generator[LexicalSpan, None, int]:
        closing = re.compile(r"</" + re.escape(name) + r"(?=[\s/>]|$)", re.IGNORECASE)
        match = closing.search(text, pos)
        end = match.start() if match else len(text)
        if end > pos:
            yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end, SpanContext.RAW)
        return end


def is_tag_start(text: str, pos: int) -> bool:
    """True if ``<`` at ``pos`` opens a start tag, end tag, declaration or PI."""
    if text[pos] != "<" or pos + 1 >= len(text):
        return False
    following = text[pos + 1]
    if following.isalpha() or following == "?":
        return True
    if following in "/!" and pos + 2 < len(text):
        return text[pos + 2].isalpha()
    return False


def _ends_name(text: str, pos: int) -> bool:
    char = text[pos]
    return char.isspace() or char == ">" or text.startswith("/>", pos)
