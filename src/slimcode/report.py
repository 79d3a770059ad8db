from __future__ import annotations

import math

from .models import ContentKind, MinificationReport

SIZE_UNITS = ("B", "KB", "MB", "GB")


def utf8_size(text: str) -> int:
    """Size of ``text`` in bytes when encoded as UTF-8."""
    return len(text.encode("utf-8", errors="surrogatepass"))


def reduction_percent(original_size: int, minified_size: int) -> int:
    """
    Percentage saved, rounded to the nearest integer.

    Halves round towards positive infinity. Zero for an empty original.
    Negative when the output grew; the value is reported as-is rather than
    clamped.
    """
    if original_size == 0:
        return 0
    return math.floor(100 * (original_size - minified_size) / original_size + 0.5)


def build_report(
    original_text: str, minified_text: str, kind: ContentKind | None = None
) -> MinificationReport:
    """Compute byte sizes and the reduction for one minification."""
    original_size = utf8_size(original_text)
    minified_size = utf8_size(minified_text)
    return MinificationReport(
        minified_text=minified_text,
        original_size_bytes=original_size,
        minified_size_bytes=minified_size,
        reduction_percent=reduction_percent(original_size, minified_size),
        kind=kind,
    )


def format_bytes(size: int) -> str:
    """Human-readable size using 1024-based units, e.g. ``1.5 KB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    unit = SIZE_UNITS[0]
    for unit in SIZE_UNITS[1:]:
        value /= 1024
        if value < 1024:
            break
    return f"{round(value, 2):g} {unit}"
