from __future__ import annotations

from ..models import ContentKind, LexicalSpan, SpanContext, SpanKind
from ..scanners import scan
from .base import Minifier

TAG_OPENERS = frozenset({"<", "</", "<!", "<?"})
TAG_CLOSERS = frozenset({">", "/>"})


class MarkupMinifier(Minifier):
    """
    Drops comments and collapses whitespace in HTML.

    Text whitespace becomes one space, or nothing when it only separates two
    tags. Whitespace inside a tag becomes one space between attributes and
    disappears around ``=`` and before ``>``. Quoted attribute values and
    raw-text element bodies are copied unchanged.
    """

    def minify(self, text: str) -> str:
        pieces: list[str] = []
        last: LexicalSpan | None = None
        before_last: LexicalSpan | None = None
        text_gap = False
        tag_gap = False
        for span in scan(text, ContentKind.MARKUP, self.config):
            if span.kind is SpanKind.BLOCK_COMMENT and not self._keeps_markup_comment(span):
                continue
            if span.kind is SpanKind.WHITESPACE:
                if span.context is SpanContext.TAG:
                    tag_gap = True
                else:
                    text_gap = True
                continue
            if last is not None:
                if tag_gap and _tag_space_needed(before_last, last, span):
                    pieces.append(" ")
                elif text_gap and not (_ends_tag(last) and _starts_tag(span)):
                    pieces.append(" ")
            pieces.append(span.text)
            before_last, last = last, span
            text_gap = tag_gap = False
        return "".join(pieces)

    def _keeps_markup_comment(self, span: LexicalSpan) -> bool:
        # Conditional comments: <!--[if IE]> ... <![endif]-->
        return self.config.keep_conditional_comments and (
            span.text.startswith("<!--[if") or span.text.endswith("<![endif]-->")
        )


def _starts_tag(span: LexicalSpan) -> bool:
    if span.kind is SpanKind.BLOCK_COMMENT:
        return True
    return (
        span.kind is SpanKind.STRUCTURAL_TOKEN
        and span.context is SpanContext.TAG
        and span.text in TAG_OPENERS
    )


def _ends_tag(span: LexicalSpan) -> bool:
    if span.kind is SpanKind.BLOCK_COMMENT:
        return True
    return (
        span.kind is SpanKind.STRUCTURAL_TOKEN
        and span.context is SpanContext.TAG
        and span.text in TAG_CLOSERS
    )


def _tag_space_needed(
    before_last: LexicalSpan | None, last: LexicalSpan, span: LexicalSpan
) -> bool:
    if last.text == "=" or span.text in ("=", ">"):
        return False
    if span.text == "/>":
        # ``a=b />`` must not become ``a=b/>``, which puts the slash in the value.
        return (
            last.kind is SpanKind.OPAQUE_CONTENT
            and before_last is not None
            and before_last.text == "="
        )
    return True
