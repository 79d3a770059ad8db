from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple, Union

from .config import SlimCodeConfig
from .minifiers import minify
from .models import ContentKind, MinificationReport, ValidationFailure
from .report import build_report
from .validation import validate

logger = logging.getLogger(__name__)

ProcessResult = Union[MinificationReport, ValidationFailure]


def process(
    text: str, kind: ContentKind, config: SlimCodeConfig | None = None
) -> ProcessResult:
    """Validate, minify and measure one text."""
    cfg = config or SlimCodeConfig()
    verdict = validate(text, kind, cfg)
    if not verdict.valid:
        assert verdict.error is not None and verdict.reason is not None
        return ValidationFailure(kind=kind, error=verdict.error, reason=verdict.reason)
    report = build_report(text, minify(text, kind, cfg), kind)
    logger.info(
        "Minified %s input: %d -> %d bytes (%d%%)",
        kind.value,
        report.original_size_bytes,
        report.minified_size_bytes,
        report.reduction_percent,
    )
    return report


def process_many(
    items: Iterable[Tuple[str, ContentKind, str]],
    config: SlimCodeConfig | None = None,
) -> Dict[str, ProcessResult]:
    """Process ``(name, kind, text)`` triples and return the results keyed by name."""
    cfg = config or SlimCodeConfig()
    results: Dict[str, ProcessResult] = {}
    for name, kind, text in items:
        results[name] = process(text, kind, cfg)
    return results
