from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Generator, Iterator

from ..models import LexicalSpan, SpanContext, SpanKind
from .base import MalformedInputError, Scanner, whitespace_end
from .stylesheet import scan_quoted

LINE_TERMINATORS = "\n\r\u2028\u2029"

PUNCTUATORS = sorted(
    [
        ">>>=", "...", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=",
        "??=", "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "++", "--",
        "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "**", "<<", ">>",
        "{", "}", "(", ")", "[", "]", ";", ",", "<", ">", "+", "-", "*", "/",
        "%", "&", "|", "^", "!", "~", "?", ":", "=", ".", "@",
    ],
    key=len,
    reverse=True,
)

# Keywords after which a ``/`` starts a regular expression rather than a division.
REGEX_PRECEDING_KEYWORDS = frozenset(
    {
        "return", "typeof", "instanceof", "in", "of", "new", "delete", "void",
        "throw", "case", "do", "else", "yield", "await",
    }
)

# Punctuators that end an operand, so a following ``/`` divides.
OPERAND_CLOSERS = frozenset({")", "]", "}", "++", "--"})

WORD_RE = re.compile(r"[\w$#\\]+")
NUMBER_RE = re.compile(
    r"(?:0[xXoObB][\w]*|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?[\d_]+)?)[\w$]*"
)
LINE_END_RE = re.compile(r"[\n\r\u2028\u2029]")
JSX_NAME_RE = re.compile(r"[\w$.:\-]*")

SpanStream = Generator[LexicalSpan, None, None]


def match_punctuator(text: str, pos: int) -> str:
    """Return the longest punctuator at ``pos`` (a single char as fallback)."""
    for punctuator in PUNCTUATORS:
        if text.startswith(punctuator, pos):
            if punctuator == "?." and pos + 2 < len(text) and text[pos + 2].isdigit():
                continue
            return punctuator
    return text[pos]


CODE_FRAME = "code"
TEMPLATE_FRAME = "template"
TAG_FRAME = "tag"
ELEMENT_FRAME = "element"
JSX_EXPRESSION = "jsx_expression"


@dataclass(slots=True)
class _Frame:
    """An open construct on the scan stack.

    Code frames nested in a template substitution or a JSX expression record
    which one in ``closer``; they end at their first unmatched ``}``.
    """

    mode: str
    start: int
    closer: str | None = None
    name: str = ""
    closing: bool = False
    cursor: int = 0
    open_braces: list[int] = field(default_factory=list)


class ScriptScanner(Scanner):
    """Scanner for JavaScript; ``jsx=True`` additionally understands JSX elements."""

    def __init__(self, jsx: bool = False) -> None:
        self.jsx = jsx

    def scan(self, text: str) -> Iterator[LexicalSpan]:
        return _ScriptScan(text, self.jsx).run()


class _ScriptScan:
    """One pass over one text, with its cursor and stack of open constructs."""

    def __init__(self, text: str, jsx: bool) -> None:
        self.text = text
        self.jsx = jsx
        self.pos = 0
        self.prev: LexicalSpan | None = None
        self.stack: list[_Frame] = []

    def run(self) -> SpanStream:
        if self.text.startswith("#!"):
            match = LINE_END_RE.search(self.text)
            yield self._emit(SpanKind.OPAQUE_CONTENT, match.start() if match else len(self.text))
        steps = {
            CODE_FRAME: self._code_step,
            TEMPLATE_FRAME: self._template_step,
            TAG_FRAME: self._tag_step,
            ELEMENT_FRAME: self._element_step,
        }
        # Nesting depth is bounded by the input, not the interpreter stack.
        self.stack = [_Frame(CODE_FRAME, 0)]
        while self.stack:
            frame = self.stack[-1]
            yield from steps[frame.mode](frame)

    def _emit(
        self, kind: SpanKind, end: int, context: SpanContext = SpanContext.CODE
    ) -> LexicalSpan:
        span = LexicalSpan(kind=kind, text=self.text[self.pos : end], start=self.pos, context=context)
        self.pos = end
        if not span.is_trivia:
            self.prev = span
        return span

    def _code_step(self, frame: _Frame) -> SpanStream:
        text = self.text
        length = len(text)
        pos = self.pos
        if pos >= length:
            if frame.closer is not None:
                raise MalformedInputError("unterminated expression", frame.start)
            if frame.open_braces:
                raise MalformedInputError("unbalanced opening brace", frame.open_braces[-1])
            self.stack.pop()
            return
        char = text[pos]
        if char.isspace():
            yield self._emit(SpanKind.WHITESPACE, whitespace_end(text, pos))
        elif text.startswith("//", pos):
            match = LINE_END_RE.search(text, pos)
            yield self._emit(SpanKind.LINE_COMMENT, match.start() if match else length)
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end < 0:
                raise MalformedInputError("unterminated comment", pos)
            yield self._emit(SpanKind.BLOCK_COMMENT, end + 2)
        elif char in "\"'":
            yield self._emit(SpanKind.STRING_LITERAL, scan_quoted(text, pos))
        elif char == "`":
            self.stack.append(_Frame(TEMPLATE_FRAME, pos, cursor=pos + 1))
        elif char == "/" and self._expression_expected():
            yield self._emit(SpanKind.STRING_LITERAL, self._regex_end(pos))
        elif char == "<" and self.jsx and self._starts_jsx(pos):
            yield from self._open_tag()
        elif char.isdigit() or (char == "." and text[pos + 1 : pos + 2].isdigit()):
            match = NUMBER_RE.match(text, pos)
            assert match is not None
            yield self._emit(SpanKind.OPAQUE_CONTENT, match.end())
        elif char == "{":
            frame.open_braces.append(pos)
            yield self._emit(SpanKind.STRUCTURAL_TOKEN, pos + 1)
        elif char == "}":
            if frame.open_braces:
                frame.open_braces.pop()
                yield self._emit(SpanKind.STRUCTURAL_TOKEN, pos + 1)
            elif frame.closer is None:
                raise MalformedInputError("unbalanced closing brace", pos)
            else:
                self.stack.pop()
                if frame.closer == JSX_EXPRESSION:
                    yield self._emit(SpanKind.STRUCTURAL_TOKEN, pos + 1)
                else:
                    # The template resumes at the brace, which opens its next part.
                    self.stack[-1].cursor = pos + 1
        else:
            word = WORD_RE.match(text, pos)
            if word:
                yield self._emit(SpanKind.OPAQUE_CONTENT, word.end())
            else:
                punctuator = match_punctuator(text, pos)
                yield self._emit(SpanKind.STRUCTURAL_TOKEN, pos + len(punctuator))

    def _expression_expected(self) -> bool:
        """Previous-significant-token rule deciding regex versus division."""
        prev = self.prev
        if prev is None:
            return True
        if prev.kind is SpanKind.STRUCTURAL_TOKEN:
            return prev.context is SpanContext.CODE and prev.text not in OPERAND_CLOSERS
        if prev.kind is SpanKind.STRING_LITERAL:
            # Inside a template substitution, right after ``${``.
            return prev.text.endswith("${")
        if prev.kind is SpanKind.OPAQUE_CONTENT:
            return prev.text in REGEX_PRECEDING_KEYWORDS
        return False

    def _regex_end(self, start: int) -> int:
        text = self.text
        pos = start + 1
        in_class = False
        while pos < len(text):
            char = text[pos]
            if char in LINE_TERMINATORS:
                break
            if char == "\\":
                pos += 2
                continue
            if char == "[":
                in_class = True
            elif char == "]":
                in_class = False
            elif char == "/" and not in_class:
                match = WORD_RE.match(text, pos + 1)
                return match.end() if match else pos + 1
            pos += 1
        raise MalformedInputError("unterminated regular expression literal", start)

    def _template_step(self, frame: _Frame) -> SpanStream:
        text = self.text
        pos = frame.cursor
        while pos < len(text):
            char = text[pos]
            if char == "\\":
                pos += 2
            elif char == "`":
                yield self._emit(SpanKind.STRING_LITERAL, pos + 1)
                self.stack.pop()
                return
            elif text.startswith("${", pos):
                yield self._emit(SpanKind.STRING_LITERAL, pos + 2)
                self.stack.append(_Frame(CODE_FRAME, pos, closer=TEMPLATE_FRAME))
                return
            else:
                pos += 1
        raise MalformedInputError("unterminated template literal", frame.start)

    def _starts_jsx(self, pos: int) -> bool:
        following = self.text[pos + 1 : pos + 2]
        return (following.isalpha() or following == ">") and self._expression_expected()

    def _open_tag(self) -> SpanStream:
        text = self.text
        start = self.pos
        closing = text.startswith("</", start)
        yield self._emit(SpanKind.STRUCTURAL_TOKEN, start + (2 if closing else 1), SpanContext.TAG)
        match = JSX_NAME_RE.match(text, self.pos)
        name = match.group(0) if match else ""
        if name:
            yield self._emit(SpanKind.OPAQUE_CONTENT, self.pos + len(name), SpanContext.TAG)
        self.stack.append(_Frame(TAG_FRAME, start, name=name, closing=closing))

    def _open_expression(self) -> LexicalSpan:
        start = self.pos
        self.stack.append(_Frame(CODE_FRAME, start, closer=JSX_EXPRESSION))
        return self._emit(SpanKind.STRUCTURAL_TOKEN, start + 1)

    def _tag_step(self, frame: _Frame) -> SpanStream:
        text = self.text
        pos = self.pos
        if pos >= len(text):
            raise MalformedInputError("unterminated JSX tag", frame.start)
        char = text[pos]
        if char.isspace():
            yield self._emit(SpanKind.WHITESPACE, whitespace_end(text, pos), SpanContext.TAG)
        elif char == ">" or text.startswith("/>", pos):
            self_closing = char != ">"
            yield self._emit(
                SpanKind.STRUCTURAL_TOKEN, pos + (2 if self_closing else 1), SpanContext.TAG
            )
            self.stack.pop()
            if frame.closing:
                element = self.stack.pop()
                if frame.name != element.name:
                    raise MalformedInputError(
                        f"expected closing tag for <{element.name}>", frame.start
                    )
            elif not self_closing:
                self.stack.append(_Frame(ELEMENT_FRAME, self.pos, name=frame.name))
        elif char == "=":
            yield self._emit(SpanKind.STRUCTURAL_TOKEN, pos + 1, SpanContext.TAG)
        elif char in "\"'":
            end = text.find(char, pos + 1)
            if end < 0:
                raise MalformedInputError("unterminated JSX attribute value", pos)
            yield self._emit(SpanKind.STRING_LITERAL, end + 1, SpanContext.TAG)
        elif char == "{":
            yield self._open_expression()
        else:
            end = pos + 1
            while (
                end < len(text)
                and not text[end].isspace()
                and text[end] not in "=>{\"'"
                and not text.startswith("/>", end)
            ):
                end += 1
            yield self._emit(SpanKind.OPAQUE_CONTENT, end, SpanContext.TAG)

    def _element_step(self, frame: _Frame) -> SpanStream:
        """Children of an open JSX element, up to and including its closing tag."""
        text = self.text
        pos = self.pos
        if pos >= len(text):
            raise MalformedInputError("unterminated JSX element", frame.start)
        char = text[pos]
        if char == "{":
            yield self._open_expression()
        elif char == "<":
            yield from self._open_tag()
        elif char.isspace():
            yield self._emit(SpanKind.WHITESPACE, whitespace_end(text, pos), SpanContext.TEXT)
        else:
            end = pos + 1
            while end < len(text) and not text[end].isspace() and text[end] not in "{<":
                end += 1
            yield self._emit(SpanKind.OPAQUE_CONTENT, end, SpanContext.TEXT)
