from __future__ import annotations

import json
import re
from typing import Any, Callable

from ..scanners.structured import JsonNumber, JsonObject, parse_strict
from .base import Minifier

# Unpaired surrogates survive parsing but cannot be encoded as UTF-8.
LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")


class StructuredDataMinifier(Minifier):
    """Re-serializes JSON without insignificant whitespace.

    Object members keep their order (duplicates included) and numbers keep
    their source spelling, so ``1.0`` is not turned into ``1``.
    """

    def minify(self, text: str) -> str:
        pieces: list[str] = []
        write_value(parse_strict(text), pieces.append)
        return "".join(pieces)


class _Literal(str):
    """Output text queued between values."""


def write_value(value: Any, write: Callable[[str], Any]) -> None:
    """Write ``value`` compactly, depth-first from an explicit work list."""
    pending: list[Any] = [value]
    while pending:
        item = pending.pop()
        if isinstance(item, _Literal):
            write(item)
        elif isinstance(item, JsonObject):
            write("{")
            pending.append(_Literal("}"))
            for index in range(len(item) - 1, -1, -1):
                key, member = item[index]
                pending.append(member)
                pending.append(_Literal(_encode_string(key) + ":"))
                if index:
                    pending.append(_Literal(","))
        elif isinstance(item, list):
            write("[")
            pending.append(_Literal("]"))
            for index in range(len(item) - 1, -1, -1):
                pending.append(item[index])
                if index:
                    pending.append(_Literal(","))
        elif isinstance(item, JsonNumber):
            write(str(item))
        elif isinstance(item, str):
            write(_encode_string(item))
        elif item is True:
            write("true")
        elif item is False:
            write("false")
        elif item is None:
            write("null")
        else:
            raise TypeError(f"Unexpected JSON value of type {type(item).__name__}")


def _encode_string(value: str) -> str:
    encoded = json.dumps(value, ensure_ascii=False)
    return LONE_SURROGATE_RE.sub(lambda match: f"\\u{ord(match.group(0)):04x}", encoded)
