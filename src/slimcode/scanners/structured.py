from __future__ import annotations

import json
from typing import Any, Iterator

from ..models import LexicalSpan, SpanKind
from .base import MalformedInputError, Scanner, make_span, whitespace_end

STRUCTURAL_CHARS = frozenset("{}[]:,")


class JsonObject(list):
    """Ordered key/value pairs of a parsed JSON object, duplicates included."""


class JsonNumber(str):
    """A JSON number kept as its exact source text."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_strict(text: str) -> Any:
    """Parse ``text`` as strict JSON, keeping key order and number spelling.

    Raises MalformedInputError with a line/column/offset description.
    """
    try:
        return json.loads(
            text,
            object_pairs_hook=JsonObject,
            parse_int=JsonNumber,
            parse_float=JsonNumber,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise MalformedInputError(
            f"{exc.msg} at line {exc.lineno} column {exc.colno}", exc.pos
        ) from exc
    except RecursionError as exc:
        raise MalformedInputError("nesting too deep") from exc
    except ValueError as exc:
        raise MalformedInputError(str(exc)) from exc


class StructuredDataScanner(Scanner):
    """
    Lexes JSON after a strict parse has accepted it.

    The parse runs first so that any span sequence handed out belongs to a
    well-formed document; the lexer itself only needs to tell strings,
    punctuation, whitespace and scalar literals apart.
    """

    def scan(self, text: str) -> Iterator[LexicalSpan]:
        parse_strict(text)
        pos = 0
        length = len(text)
        while pos < length:
            char = text[pos]
            if char.isspace():
                end = whitespace_end(text, pos)
                yield make_span(SpanKind.WHITESPACE, text, pos, end)
            elif char == '"':
                end = pos + 1
                while text[end] != '"':
                    end += 2 if text[end] == "\\" else 1
                end += 1
                yield make_span(SpanKind.STRING_LITERAL, text, pos, end)
            elif char in STRUCTURAL_CHARS:
                end = pos + 1
                yield make_span(SpanKind.STRUCTURAL_TOKEN, text, pos, end)
            else:
                end = pos + 1
                while (
                    end < length
                    and not text[end].isspace()
                    and text[end] not in STRUCTURAL_CHARS
                ):
                    end += 1
                yield make_span(SpanKind.OPAQUE_CONTENT, text, pos, end)
            pos = end
