"""Main entry point for the chartcache command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from chartcache.core.config import ConfigManager
from chartcache.core.exceptions import ChartCacheError
from chartcache.core.logging import configure_logging

from .chart import register as register_chart_commands
from .formatters import create_formatter
from .utils import exit_with_error


def _configure_cli_logging(log_level: str | None) -> None:
    """Apply the configured logging section, letting ``--log-level`` override the level."""

    settings = ConfigManager().get_config().logging
    configure_logging(
        level=(log_level or settings.level).upper(),
        file_output=bool(settings.file),
        file_path=settings.file,
    )


def create_app() -> typer.Typer:
    """Create a Typer application instance for chartcache."""

    app = typer.Typer(add_completion=False, help="chartcache command line interface")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        db_path: Path | None = typer.Option(
            None,
            "--db",
            help="DuckDB chart store; defaults to the configured storage.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level; defaults to the configured level.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            # validate eagerly for immediate feedback on invalid options
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "db_path": db_path,
                "no_color": no_color,
            }
        )
        try:
            _configure_cli_logging(log_level)
        except ChartCacheError as error:
            exit_with_error(error)

    register_chart_commands(app)
    return app


app = create_app()


def run() -> None:
    """Console script entry point."""

    app()
