"""
slimcode package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .config import SlimCodeConfig, config_from_dict, config_from_yaml, load_config
from .engine import process, process_many
from .minifiers import create_minifier, minify
from .models import (
    ContentKind,
    ErrorKind,
    LexicalSpan,
    MinificationReport,
    SpanContext,
    SpanKind,
    ValidationFailure,
    ValidationResult,
)
from .report import build_report
from .scanners import MalformedInputError, create_scanner, scan
from .validation import validate

__all__ = [
    "SlimCodeConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "ContentKind",
    "ErrorKind",
    "LexicalSpan",
    "MinificationReport",
    "SpanContext",
    "SpanKind",
    "ValidationFailure",
    "ValidationResult",
    "MalformedInputError",
    "create_scanner",
    "scan",
    "validate",
    "create_minifier",
    "minify",
    "build_report",
    "process",
    "process_many",
]

__version__ = "0.1.0"
