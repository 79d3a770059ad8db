from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple, TypedDict

import typer
import yaml

from .config import SlimCodeConfig, load_config
from .engine import process
from .files import InputTooLargeError, check_suffix, kind_for_path, minified_name, read_source
from .models import ContentKind, MinificationReport, ValidationFailure
from .report import format_bytes
from .validation import validate as validate_text

app = typer.Typer(help="SlimCode minifier CLI.", no_args_is_help=True)

STDIO_PATH = Path("-")


class ReportPayload(TypedDict):
    source: str
    kind: str
    output: Optional[str]
    original_size_bytes: int
    minified_size_bytes: int
    reduction_percent: int
    minified_text: Optional[str]


@app.callback()
def main_options(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log scanning and minification details."
    ),
) -> None:
    """Validate and minify HTML, CSS, JSON, JavaScript and JSX sources."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@app.command("validate")
def validate_command(
    input_path: Path = typer.Argument(..., help="Source file, or '-' for stdin."),
    kind: Optional[ContentKind] = typer.Option(
        None, "--kind", "-k", help="Content kind; inferred from the suffix when omitted."
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
) -> None:
    """Check that a source plausibly is of the declared kind."""
    cfg = load_config(config)
    text, resolved_kind = _load_input(input_path, kind, cfg)
    verdict = validate_text(text, resolved_kind, cfg)
    if not verdict.valid:
        typer.echo(
            f"{_display_name(input_path)}: invalid {resolved_kind.label}: {verdict.reason}",
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(f"{_display_name(input_path)}: valid {resolved_kind.label}")


@app.command("minify")
def minify_command(
    input_path: Path = typer.Argument(..., help="Source file, or '-' for stdin."),
    kind: Optional[ContentKind] = typer.Option(
        None, "--kind", "-k", help="Content kind; inferred from the suffix when omitted."
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Destination file, '-' for stdout (default: <name>.min.<ext> beside the input).",
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
    max_input_bytes: Optional[int] = typer.Option(
        None, "--max-input-bytes", min=1, help="Override the input size ceiling."
    ),
    stats: bool = typer.Option(
        True, "--stats/--no-stats", help="Print size statistics after minifying."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print a JSON report instead of the plain summary."
    ),
) -> None:
    """Minify a source and write the result next to it (or to --output)."""
    cfg = load_config(config)
    if max_input_bytes is not None:
        cfg.max_input_bytes = max_input_bytes
    text, resolved_kind = _load_input(input_path, kind, cfg)
    result = process(text, resolved_kind, cfg)
    if isinstance(result, ValidationFailure):
        typer.echo(
            f"{_display_name(input_path)}: invalid {resolved_kind.label}: {result.reason}",
            err=True,
        )
        raise typer.Exit(code=1)

    destination = _destination(input_path, output, resolved_kind)
    if destination is None:
        if not json_output:
            typer.echo(result.minified_text, nl=False)
    else:
        destination.write_bytes(result.minified_text.encode("utf-8"))

    if json_output:
        typer.echo(json.dumps(_report_payload(input_path, result, destination), indent=2))
    elif stats:
        # Keep stdout clean when it carries the minified text.
        typer.echo(_summary_line(input_path, result, destination), err=destination is None)


@app.command("kinds")
def list_kinds() -> None:
    """List supported content kinds and their file suffixes."""
    for kind in ContentKind:
        typer.echo(f"{kind.value}\t{', '.join(kind.suffixes)}")


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = SlimCodeConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _load_input(
    input_path: Path, kind: ContentKind | None, config: SlimCodeConfig
) -> Tuple[str, ContentKind]:
    """Read the source text and settle which kind it is declared as."""
    if input_path == STDIO_PATH:
        if kind is None:
            raise typer.BadParameter("--kind is required when reading from stdin.")
        return sys.stdin.read(), kind

    if not input_path.is_file():
        raise typer.BadParameter(f"{input_path} is not a readable file.")
    if kind is None:
        kind = kind_for_path(input_path)
        if kind is None:
            raise typer.BadParameter(
                f"Cannot infer the content kind of {input_path.name}; pass --kind."
            )
    else:
        suffix_check = check_suffix(input_path, kind)
        if not suffix_check.valid:
            raise typer.BadParameter(suffix_check.reason or "unexpected file extension")
    try:
        return read_source(input_path, config), kind
    except InputTooLargeError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"{input_path.name} is not valid UTF-8 text.") from exc


def _destination(
    input_path: Path, output: Path | None, kind: ContentKind
) -> Path | None:
    """Where to write the minified text; None means stdout."""
    if output == STDIO_PATH:
        return None
    if output is not None:
        return output
    if input_path == STDIO_PATH:
        return None
    return input_path.with_name(minified_name(input_path.name, kind))


def _display_name(input_path: Path) -> str:
    return "<stdin>" if input_path == STDIO_PATH else input_path.name


def _summary_line(
    input_path: Path, report: MinificationReport, destination: Path | None
) -> str:
    target = "stdout" if destination is None else str(destination)
    return (
        f"{_display_name(input_path)} -> {target}: "
        f"{format_bytes(report.original_size_bytes)} -> "
        f"{format_bytes(report.minified_size_bytes)} "
        f"(reduction {report.reduction_percent}%)"
    )


def _report_payload(
    input_path: Path, report: MinificationReport, destination: Path | None
) -> ReportPayload:
    """Serialize a report so it can be emitted as JSON."""
    return {
        "source": _display_name(input_path),
        "kind": report.kind.value if report.kind else "",
        "output": str(destination) if destination is not None else None,
        "original_size_bytes": report.original_size_bytes,
        "minified_size_bytes": report.minified_size_bytes,
        "reduction_percent": report.reduction_percent,
        "minified_text": report.minified_text if destination is None else None,
    }


if __name__ == "__main__":
    main()
