"""Helpers shared by the chart commands."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from chartcache.core.exceptions import ChartCacheError

from .constants import SYSTEM_EXIT_CODE
from .formatters import OutputFormatter, create_formatter, format_cell


@dataclass(slots=True)
class CLIOptions:
    """Global options stored on the Typer context by the root callback."""

    format: str = "table"
    no_color: bool = False
    db_path: Path | None = None


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        no_color=bool(data.get("no_color", False)),
        db_path=data.get("db_path"),
    )


def get_formatter(ctx: typer.Context) -> OutputFormatter:
    options = get_cli_options(ctx)
    return create_formatter(options.format, no_color=options.no_color)


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def exit_with_error(error: ChartCacheError, exit_code: int = SYSTEM_EXIT_CODE) -> NoReturn:
    """Report ``error`` on stderr and stop the command with ``exit_code``."""

    emit_error(error.message, error.error_code, details=error.details)
    raise typer.Exit(code=exit_code) from error


def _sanitize_details(details: Mapping[str, object]) -> dict[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, Mapping):
            sanitized[key] = _sanitize_details(value)
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            sanitized[key] = [format_cell(item) for item in value]
        else:
            sanitized[key] = format_cell(value)
    return sanitized


__all__ = ["CLIOptions", "emit_error", "exit_with_error", "get_cli_options", "get_formatter"]
