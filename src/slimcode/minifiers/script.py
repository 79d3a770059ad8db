from __future__ import annotations

import re

from ..config import SlimCodeConfig
from ..models import ContentKind, LexicalSpan, SpanContext, SpanKind
from ..scanners import scan
from ..scanners.script import LINE_TERMINATORS, OPERAND_CLOSERS, match_punctuator
from .base import Minifier

WORD_CHAR_RE = re.compile(r"[\w$#\\]")

# A line break after these keywords ends the statement.
RESTRICTED_KEYWORDS = frozenset(
    {"return", "break", "continue", "throw", "yield", "async"}
)

# Tokens that cannot continue an expression, so a line break before them
# may be where a semicolon gets inserted.
STATEMENT_STARTERS = frozenset({"{", "!", "~", "++", "--", "@"})

# (last char of left token, first char of right token) pairs that would
# fuse into a comment or an HTML-like comment marker.
FUSING_CHAR_PAIRS = frozenset({("/", "/"), ("/", "*"), ("<", "!"), ("-", ">")})


class ScriptMinifier(Minifier):
    """
    Whitespace and comment remover for JavaScript and JSX.

    Gaps between tokens shrink to nothing, a space or a line break. A space
    survives only where the neighbours would otherwise lex differently, a
    line break only where automatic semicolon insertion could depend on it.
    String, template and regex literals are never touched.
    """

    def __init__(self, config: SlimCodeConfig | None = None, jsx: bool = False) -> None:
        super().__init__(config)
        self.kind = ContentKind.SCRIPT_WITH_MARKUP if jsx else ContentKind.SCRIPT

    def minify(self, text: str) -> str:
        pieces: list[str] = []
        last: LexicalSpan | None = None
        gap: list[LexicalSpan] = []
        for span in scan(text, self.kind, self.config):
            if span.is_trivia and not self.keeps_comment(span):
                gap.append(span)
                continue
            if gap and last is not None:
                pieces.append(_separator(last, gap, span))
            pieces.append(span.text)
            last = span
            gap = []
        return "".join(pieces)


def _separator(prev: LexicalSpan, gap: list[LexicalSpan], token: LexicalSpan) -> str:
    context = gap[0].context
    if context is SpanContext.TEXT:
        return _jsx_text_separator(prev, gap, token)
    if context is SpanContext.TAG:
        return "" if _tag_gap_droppable(prev, token) else " "
    line_break = any(
        char in LINE_TERMINATORS for span in gap for char in span.text
    )
    if line_break and _line_break_matters(prev, token):
        return "\n"
    return " " if needs_space(prev, token) else ""


def _jsx_text_separator(
    prev: LexicalSpan, gap: list[LexicalSpan], token: LexicalSpan
) -> str:
    """JSX trims lines and joins them with one space; same-line runs are literal."""
    whitespace = "".join(span.text for span in gap)
    if not any(char in LINE_TERMINATORS for char in whitespace):
        return whitespace
    interior = _is_jsx_text(prev) and _is_jsx_text(token)
    return " " if interior else ""


def _is_jsx_text(span: LexicalSpan) -> bool:
    return span.kind is SpanKind.OPAQUE_CONTENT and span.context is SpanContext.TEXT


def _tag_gap_droppable(prev: LexicalSpan, token: LexicalSpan) -> bool:
    return prev.text in ("<", "</", "=") or token.text in ("=", ">", "/>")


def _is_code_punct(span: LexicalSpan) -> bool:
    return span.kind is SpanKind.STRUCTURAL_TOKEN and span.context is SpanContext.CODE


def _line_break_matters(prev: LexicalSpan, token: LexicalSpan) -> bool:
    if prev.start == 0 and prev.text.startswith("#!"):
        # The hashbang runs to the end of its line.
        return True
    if prev.kind is SpanKind.OPAQUE_CONTENT and prev.text in RESTRICTED_KEYWORDS:
        return True
    if _is_code_punct(token) and token.text in ("++", "--"):
        return True
    if _is_code_punct(prev) and prev.text not in OPERAND_CLOSERS:
        return False
    if prev.kind is SpanKind.STRING_LITERAL and prev.text.endswith("${"):
        return False
    if _is_code_punct(token):
        return token.text in STATEMENT_STARTERS
    if token.kind is SpanKind.STRING_LITERAL and token.text.startswith("}"):
        return False
    return True


def needs_space(prev: LexicalSpan, token: LexicalSpan) -> bool:
    """Whether ``prev`` and ``token`` would lex differently once concatenated."""
    left = prev.text
    right = token.text
    if WORD_CHAR_RE.match(left[-1]) and WORD_CHAR_RE.match(right[0]):
        return True
    if (left[-1], right[0]) in FUSING_CHAR_PAIRS:
        return True
    if prev.kind is SpanKind.OPAQUE_CONTENT and left[0].isdigit() and right[0] == ".":
        return True
    if _is_code_punct(prev) and _is_code_punct(token):
        return len(match_punctuator(left + right, 0)) > len(left)
    return False
