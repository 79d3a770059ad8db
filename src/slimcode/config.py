from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

DEFAULT_MAX_INPUT_BYTES = 1024 * 1024


@dataclass(slots=True)
class SlimCodeConfig:
    """Configuration options for validation and minification."""

    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES
    raw_text_elements: tuple[str, ...] = field(
        default_factory=lambda: ("script", "style", "pre", "textarea")
    )
    keep_conditional_comments: bool = True
    keep_important_comments: bool = True

    def __post_init__(self) -> None:
        if self.max_input_bytes <= 0:
            raise ValueError("max_input_bytes must be a positive integer.")
        self.raw_text_elements = tuple(
            name.lower() for name in self.raw_text_elements
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        data = dict(asdict(self))
        data["raw_text_elements"] = list(self.raw_text_elements)
        return data


def config_from_dict(data: Mapping[str, Any] | None) -> SlimCodeConfig:
    """Build a SlimCodeConfig from a dictionary-like input."""
    if data is None:
        return SlimCodeConfig()
    allowed = {item.name for item in fields(SlimCodeConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "raw_text_elements" in kwargs:
        kwargs["raw_text_elements"] = tuple(kwargs["raw_text_elements"] or ())
    return SlimCodeConfig(**kwargs)


def config_from_yaml(path: str | Path) -> SlimCodeConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> SlimCodeConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return SlimCodeConfig()
    return config_from_yaml(path)
