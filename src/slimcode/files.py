from __future__ import annotations

from pathlib import Path, PurePath

from .config import SlimCodeConfig
from .models import ContentKind, ErrorKind, ValidationResult

# File types the engine knows how to minify, keyed by suffix.
KIND_SUFFIXES: dict[str, ContentKind] = {
    suffix: kind for kind in ContentKind for suffix in kind.suffixes
}

DEFAULT_OUTPUT_STEM = "minified"


class InputTooLargeError(ValueError):
    """Raised when a source file exceeds the configured size ceiling."""


def kind_for_path(path: str | PurePath) -> ContentKind | None:
    """Guess the content kind from a file name, or None for unknown suffixes."""
    return KIND_SUFFIXES.get(PurePath(path).suffix.lower())


def check_suffix(path: str | PurePath, kind: ContentKind) -> ValidationResult:
    """Reject files whose suffix does not belong to the selected kind."""
    suffix = PurePath(path).suffix.lower()
    if suffix in kind.suffixes:
        return ValidationResult.ok()
    return ValidationResult.failure(
        ErrorKind.KIND_MISMATCH,
        f"File extension {suffix or '(none)'} does not match selected type "
        f"{kind.label}. Expected: {', '.join(kind.suffixes)}",
    )


def minified_name(name: str | None, kind: ContentKind) -> str:
    """Name for the minified copy: ``app.js`` becomes ``app.min.js``."""
    extension = kind.suffixes[0]
    if not name:
        return f"{DEFAULT_OUTPUT_STEM}.min{extension}"
    pure = PurePath(name)
    stem = pure.stem if pure.suffix else pure.name
    return str(pure.with_name(f"{stem}.min{extension}"))


def read_source(path: Path, config: SlimCodeConfig | None = None) -> str:
    """Read a UTF-8 source file, refusing files above the size ceiling.

    Line endings are kept as they are on disk and a leading BOM is dropped.
    """
    cfg = config or SlimCodeConfig()
    size = path.stat().st_size
    if size > cfg.max_input_bytes:
        raise InputTooLargeError(
            f"{path.name} is {size} bytes, above the {cfg.max_input_bytes} byte limit"
        )
    return path.read_bytes().decode("utf-8-sig")
