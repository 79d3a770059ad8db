from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ContentKind(str, Enum):
    """Declared category of an input text."""

    MARKUP = "html"
    STYLESHEET = "css"
    STRUCTURED_DATA = "json"
    SCRIPT = "js"
    SCRIPT_WITH_MARKUP = "jsx"

    @property
    def suffixes(self) -> tuple[str, ...]:
        """File-name suffixes accepted for this kind, preferred suffix first."""
        return _SUFFIXES[self]

    @property
    def label(self) -> str:
        return self.value.upper()


_SUFFIXES: dict[ContentKind, tuple[str, ...]] = {
    ContentKind.MARKUP: (".html", ".htm"),
    ContentKind.STYLESHEET: (".css",),
    ContentKind.STRUCTURED_DATA: (".json",),
    ContentKind.SCRIPT: (".js",),
    ContentKind.SCRIPT_WITH_MARKUP: (".jsx",),
}


class SpanKind(str, Enum):
    WHITESPACE = "whitespace"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING_LITERAL = "string_literal"
    STRUCTURAL_TOKEN = "structural_token"
    OPAQUE_CONTENT = "opaque_content"


class SpanContext(str, Enum):
    """Where a span sits: program code, inside a tag, text content or raw text."""

    CODE = "code"
    TAG = "tag"
    TEXT = "text"
    RAW = "raw"


@dataclass(frozen=True, slots=True)
class LexicalSpan:
    """A classified substring of the scanned input and its character offset."""

    kind: SpanKind
    text: str
    start: int
    context: SpanContext = SpanContext.CODE

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_trivia(self) -> bool:
        """Whitespace and comments, i.e. spans a minifier may drop."""
        return self.kind in TRIVIA_KINDS


TRIVIA_KINDS = frozenset(
    {SpanKind.WHITESPACE, SpanKind.LINE_COMMENT, SpanKind.BLOCK_COMMENT}
)


class ErrorKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    OVERSIZED_INPUT = "oversized_input"
    MALFORMED_INPUT = "malformed_input"
    KIND_MISMATCH = "kind_mismatch"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Verdict of a validation call."""

    valid: bool
    reason: str | None = None
    error: ErrorKind | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def failure(cls, error: ErrorKind, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason, error=error)


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """Returned by the engine when the input did not pass validation."""

    kind: ContentKind
    error: ErrorKind
    reason: str


@dataclass(frozen=True, slots=True)
class MinificationReport:
    """Minified text plus byte statistics."""

    minified_text: str
    original_size_bytes: int
    minified_size_bytes: int
    reduction_percent: int
    kind: ContentKind | None = None

    @property
    def saved_bytes(self) -> int:
        return self.original_size_bytes - self.minified_size_bytes
