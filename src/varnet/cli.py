from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from varnet.analysis.model import RECOGNIZED_TYPES
from varnet.analysis.scan import DEFAULT_SCAN_TYPES
from varnet.config import (
    log_level,
    logging_defaults,
    scan_defaults,
    scan_include_hsba,
    scan_type_list,
)
from varnet.exceptions import ProviderError
from varnet.json_types import JSONObject
from varnet.messages import SCAN_MESSAGE, TYPE_COUNTS_MESSAGE, handle_message
from varnet.provider import load_document
from varnet.report import render_markdown, write_report

app = typer.Typer(add_completion=False)

_STDOUT_ALIAS = "-"


def _configure_logging(
    level_name: Optional[str], root: Path, config: Optional[Path]
) -> None:
    section = logging_defaults(root=root, config_path=config)
    if level_name:
        section = {"level": level_name}
    logging.basicConfig(
        level=log_level(section),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _normalize_types(types: Optional[List[str]], section: dict) -> list[str]:
    requested: list[str] = []
    for item in types or []:
        requested.extend(part.strip().upper() for part in item.split(",") if part.strip())
    if not requested:
        requested = scan_type_list(section)
    if not requested:
        requested = list(DEFAULT_SCAN_TYPES)
    unknown = sorted(set(requested) - set(RECOGNIZED_TYPES))
    if unknown:
        raise typer.BadParameter(
            f"unknown type: {', '.join(unknown)} "
            f"(expected {', '.join(RECOGNIZED_TYPES)})",
            param_hint="--type",
        )
    return list(dict.fromkeys(requested))


def _write_text_to_target(target: Path, text: str) -> None:
    if str(target) == _STDOUT_ALIAS:
        typer.echo(text, nl=False)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")


def _emit_failure(response: JSONObject) -> None:
    typer.secho(str(response.get("error", "scan failed")), err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("census")
def census(
    document: Path = typer.Argument(..., help="JSON export of the design document."),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    log_level_name: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    """Count local variables per type."""
    _configure_logging(log_level_name, root, config)
    try:
        provider = load_document(document)
    except ProviderError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    response = handle_message(provider, {"type": TYPE_COUNTS_MESSAGE})
    if response is None or response.get("type") != "type-counts":
        _emit_failure(response or {})
    typer.echo(json.dumps(response["typeCounts"], indent=2, sort_keys=True))


@app.command("scan")
def scan(
    document: Path = typer.Argument(..., help="JSON export of the design document."),
    types: Optional[List[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Variable type to include (repeatable or comma-separated).",
    ),
    hsba: Optional[bool] = typer.Option(
        None, "--hsba/--no-hsba", help="Add HSBA strings for colour variables."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Write the JSON report here instead of stdout."
    ),
    markdown: Optional[Path] = typer.Option(
        None, "--markdown", help="Write a markdown summary to file or '-' for stdout."
    ),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    log_level_name: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    """Scan variable values, usage and aliases."""
    _configure_logging(log_level_name, root, config)
    section = scan_defaults(root=root, config_path=config)
    selected = _normalize_types(types, section)
    if hsba is None:
        hsba = scan_include_hsba(section)
    try:
        provider = load_document(document)
    except ProviderError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    response = handle_message(
        provider,
        {"type": SCAN_MESSAGE, "types": selected},
        include_hsba=hsba,
    )
    if response is None or response.get("type") != "scan-complete":
        _emit_failure(response or {})
    data = response["data"]
    markdown_to_stdout = markdown is not None and str(markdown) == _STDOUT_ALIAS
    if output is not None:
        write_report(data, output_path=output)
    elif not markdown_to_stdout:
        typer.echo(json.dumps(data, indent=2, sort_keys=True))
    if markdown is not None:
        _write_text_to_target(markdown, render_markdown(data))


@app.command("lsp")
def lsp(ctx: typer.Context) -> None:
    """Serve the census and scan commands over stdio."""
    from varnet import server

    overrides = ctx.obj if isinstance(ctx.obj, dict) else {}
    server.start(overrides.get("start_io"))


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
