from __future__ import annotations

import logging
from typing import Callable, Dict

from .config import SlimCodeConfig
from .models import (
    ContentKind,
    ErrorKind,
    LexicalSpan,
    SpanContext,
    SpanKind,
    ValidationResult,
)
from .report import utf8_size
from .scanners import MalformedInputError, scan
from .scanners.markup import TAG_NAME_RE
from .scanners.structured import parse_strict

logger = logging.getLogger(__name__)

EMPTY_INPUT_REASON = "empty input"
OVERSIZED_INPUT_REASON = "input exceeds size limit"
UNBALANCED_BRACES_REASON = "unbalanced braces"
NO_MARKUP_TAGS_REASON = "no markup tags found"
NO_STYLESHEET_RULES_REASON = "no stylesheet rules found"
NO_SCRIPT_MARKERS_REASON = "no recognizable script syntax markers found"
NO_JSX_MARKERS_REASON = "no recognizable script or JSX syntax markers found"

# Keywords that introduce a binding, a function or a module boundary.
SCRIPT_MARKER_WORDS = frozenset(
    {"function", "const", "let", "var", "class", "import", "export"}
)


def validate(
    text: str, kind: ContentKind, config: SlimCodeConfig | None = None
) -> ValidationResult:
    """Decide whether ``text`` plausibly is content of ``kind``."""
    cfg = config or SlimCodeConfig()
    if utf8_size(text) > cfg.max_input_bytes:
        return _fail(kind, ErrorKind.OVERSIZED_INPUT, OVERSIZED_INPUT_REASON)
    if not text.strip():
        return _fail(kind, ErrorKind.EMPTY_INPUT, EMPTY_INPUT_REASON)
    try:
        return _VALIDATORS[kind](text, kind, cfg)
    except MalformedInputError as exc:
        return _fail(kind, ErrorKind.MALFORMED_INPUT, str(exc))


def _fail(kind: ContentKind, error: ErrorKind, reason: str) -> ValidationResult:
    logger.debug("Rejected %s input: %s", kind.value, reason)
    return ValidationResult.failure(error, reason)


def _validate_markup(
    text: str, kind: ContentKind, config: SlimCodeConfig
) -> ValidationResult:
    found_tag = False
    previous: LexicalSpan | None = None
    for span in scan(text, kind, config):
        if (
            previous is not None
            and previous.kind is SpanKind.STRUCTURAL_TOKEN
            and previous.text == "<"
            and span.kind is SpanKind.OPAQUE_CONTENT
            and TAG_NAME_RE.fullmatch(span.text)
        ):
            found_tag = True
        previous = span
    if not found_tag:
        return _fail(kind, ErrorKind.KIND_MISMATCH, NO_MARKUP_TAGS_REASON)
    return ValidationResult.ok()


def _validate_stylesheet(
    text: str, kind: ContentKind, config: SlimCodeConfig
) -> ValidationResult:
    # One entry per open block: whether a selector/prelude preceded its "{".
    open_blocks: list[bool] = []
    has_prelude = False
    found_rule = False
    for span in scan(text, kind, config):
        if span.is_trivia:
            continue
        if span.kind is not SpanKind.STRUCTURAL_TOKEN or span.text not in ("{", "}", ";"):
            has_prelude = True
            continue
        if span.text == "{":
            open_blocks.append(has_prelude)
        elif span.text == "}":
            if not open_blocks:
                return _fail(kind, ErrorKind.MALFORMED_INPUT, UNBALANCED_BRACES_REASON)
            found_rule = open_blocks.pop() or found_rule
        has_prelude = False
    if open_blocks:
        return _fail(kind, ErrorKind.MALFORMED_INPUT, UNBALANCED_BRACES_REASON)
    if not found_rule:
        return _fail(kind, ErrorKind.KIND_MISMATCH, NO_STYLESHEET_RULES_REASON)
    return ValidationResult.ok()


def _validate_structured_data(
    text: str, kind: ContentKind, config: SlimCodeConfig
) -> ValidationResult:
    parse_strict(text)
    return ValidationResult.ok()


def _validate_script(
    text: str, kind: ContentKind, config: SlimCodeConfig
) -> ValidationResult:
    jsx = kind is ContentKind.SCRIPT_WITH_MARKUP
    found_marker = False
    previous: LexicalSpan | None = None
    for span in scan(text, kind, config):
        if not found_marker:
            found_marker = _is_script_marker(span, previous, jsx)
        previous = span
    if not found_marker:
        reason = NO_JSX_MARKERS_REASON if jsx else NO_SCRIPT_MARKERS_REASON
        return _fail(kind, ErrorKind.KIND_MISMATCH, reason)
    return ValidationResult.ok()


def _is_script_marker(
    span: LexicalSpan, previous: LexicalSpan | None, jsx: bool
) -> bool:
    if span.context is SpanContext.CODE:
        if span.kind is SpanKind.OPAQUE_CONTENT:
            return span.text in SCRIPT_MARKER_WORDS
        return span.kind is SpanKind.STRUCTURAL_TOKEN and span.text == "=>"
    return (
        jsx
        and span.context is SpanContext.TAG
        and span.kind is SpanKind.OPAQUE_CONTENT
        and span.text[:1].isupper()
        and previous is not None
        and previous.text in ("<", "</")
    )


_VALIDATORS: Dict[
    ContentKind, Callable[[str, ContentKind, SlimCodeConfig], ValidationResult]
] = {
    ContentKind.MARKUP: _validate_markup,
    ContentKind.STYLESHEET: _validate_stylesheet,
    ContentKind.STRUCTURED_DATA: _validate_structured_data,
    ContentKind.SCRIPT: _validate_script,
    ContentKind.SCRIPT_WITH_MARKUP: _validate_script,
}
