from __future__ import annotations

from ..models import ContentKind, LexicalSpan, SpanKind
from ..scanners import scan
from .base import Minifier

STATEMENT_ENDS = frozenset({"{", "}", ";"})
# No whitespace is needed after these...
NO_SPACE_AFTER = frozenset({"{", "}", ";", ":", ",", "(", "["})
# ...or before these.
NO_SPACE_BEFORE = frozenset({"{", "}", ";", ",", ")", "]"})


class StylesheetMinifier(Minifier):
    """Removes comments and redundant whitespace from CSS."""

    def minify(self, text: str) -> str:
        tokens: list[LexicalSpan] = []
        spaced: list[bool] = []
        gap = False
        for span in scan(text, ContentKind.STYLESHEET, self.config):
            if span.kind is SpanKind.WHITESPACE or (
                span.kind is SpanKind.BLOCK_COMMENT and not self.keeps_comment(span)
            ):
                gap = True
                continue
            tokens.append(span)
            spaced.append(gap and len(tokens) > 1)
            gap = False

        in_prelude = _prelude_flags(tokens)
        pieces: list[str] = []
        for index, token in enumerate(tokens):
            if spaced[index] and _space_needed(tokens[index - 1], token, in_prelude[index]):
                pieces.append(" ")
            pieces.append(token.text)
        return "".join(pieces)


def _is_punct(span: LexicalSpan, choices: frozenset[str]) -> bool:
    return span.kind is SpanKind.STRUCTURAL_TOKEN and span.text in choices


def _prelude_flags(tokens: list[LexicalSpan]) -> list[bool]:
    """
    For each token, whether its statement ends with ``{``.

    Such statements are selectors or at-rule preludes, where ``a :hover``
    and ``a:hover`` mean different things; everything else is a declaration.
    """
    flags = [False] * len(tokens)
    terminator: str | None = None
    for index in range(len(tokens) - 1, -1, -1):
        token = tokens[index]
        if _is_punct(token, STATEMENT_ENDS):
            terminator = token.text
        flags[index] = terminator == "{"
    return flags


def _space_needed(prev: LexicalSpan, token: LexicalSpan, in_prelude: bool) -> bool:
    if _is_punct(prev, NO_SPACE_AFTER) or _is_punct(token, NO_SPACE_BEFORE):
        return False
    if token.kind is SpanKind.STRUCTURAL_TOKEN and token.text == ":":
        return in_prelude
    return True
