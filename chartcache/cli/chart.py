"""Chart cache inspection commands."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

import typer

from chartcache.core.chart.manager import ChartManager
from chartcache.core.config import ConfigManager, StorageConfig
from chartcache.core.data.providers import StaticChartProvider
from chartcache.core.data.storage import ChartStorage
from chartcache.core.exceptions import ChartCacheError
from chartcache.core.factory import build_storage
from chartcache.core.models import ChartInfo, ChartKey, Instrument, RangeType
from chartcache.core.services import InMemoryInstrumentResolver

from .constants import NO_DATA_EXIT_CODE
from .utils import emit_error, exit_with_error, get_cli_options, get_formatter

chart_app = typer.Typer(help="Inspect cached chart points.")

SUMMARY_COLUMNS = [
    "instrument",
    "currency",
    "range",
    "points",
    "start",
    "end",
    "last_point",
    "expired",
]
POINT_COLUMNS = ["timestamp", "value", "volume"]


def register(app: typer.Typer) -> None:
    """Register chart commands on the root CLI application."""

    app.add_typer(chart_app, name="chart", help="Inspect cached charts")


def open_storage(db_path: Path | None) -> ChartStorage:
    """Factory hook returning the configured point store."""

    if db_path is not None:
        return build_storage(StorageConfig(backend="duckdb", db_path=str(db_path)))
    return build_storage(ConfigManager().get_config().storage)


def _parse_range(value: str) -> RangeType:
    try:
        return RangeType(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in RangeType)
        raise typer.BadParameter(f"Unsupported range '{value}'. Allowed values: {allowed}", param_hint="--range") from exc


def _offline_manager(storage: ChartStorage, uid: str) -> ChartManager:
    # the CLI never fetches, so any cached uid resolves to itself
    resolver = InMemoryInstrumentResolver([Instrument(uid=uid, name=uid, code=uid.upper())])
    return ChartManager(resolver, storage, StaticChartProvider(name="offline"))


def _utc(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=UTC)


def _summary_row(chart_info: ChartInfo, key: ChartKey) -> Mapping[str, object]:
    return {
        "instrument": key.instrument.uid,
        "currency": key.currency_code,
        "range": key.range_type.value,
        "points": len(chart_info.points),
        "start": _utc(chart_info.start_timestamp),
        "end": _utc(chart_info.end_timestamp),
        "last_point": _utc(chart_info.last_point.timestamp),
        "expired": chart_info.expired,
    }


@chart_app.command("show")
def show_command(
    ctx: typer.Context,
    uid: str = typer.Argument(..., help="Instrument uid."),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency code."),
    range_value: str = typer.Option("1d", "--range", "-r", help="Range type (today, 1d, 1w, ...)."),
    points: bool = typer.Option(False, "--points", help="List the cached points instead of a summary."),
) -> None:
    """Evaluate the cached chart for a key."""

    range_type = _parse_range(range_value)
    formatter = get_formatter(ctx)

    try:
        storage = open_storage(get_cli_options(ctx).db_path)
    except ChartCacheError as error:
        exit_with_error(error)

    try:
        manager = _offline_manager(storage, uid)
        key = ChartKey(instrument=manager.resolver.resolve(uid), currency_code=currency, range_type=range_type)
        try:
            chart_info = manager.chart_info(uid, currency, range_type)
        except ChartCacheError as error:
            exit_with_error(error)
        if chart_info is None:
            emit_error("No cached chart for key.", "NO_CHART_DATA", details=key.describe())
            raise typer.Exit(code=NO_DATA_EXIT_CODE)

        if points:
            rows = [
                {"timestamp": _utc(point.timestamp), "value": point.value, "volume": point.volume}
                for point in chart_info.points
            ]
            formatter.render(rows, stream=sys.stdout, columns=POINT_COLUMNS)
        else:
            formatter.render([_summary_row(chart_info, key)], stream=sys.stdout, columns=SUMMARY_COLUMNS)
    finally:
        storage.close()


@chart_app.command("last-sync")
def last_sync_command(
    ctx: typer.Context,
    uid: str = typer.Argument(..., help="Instrument uid."),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency code."),
    range_value: str = typer.Option("1d", "--range", "-r", help="Range type (today, 1d, 1w, ...)."),
) -> None:
    """Print the timestamp of the most recent cached point."""

    range_type = _parse_range(range_value)
    formatter = get_formatter(ctx)

    try:
        storage = open_storage(get_cli_options(ctx).db_path)
    except ChartCacheError as error:
        exit_with_error(error)

    try:
        manager = _offline_manager(storage, uid)
        key = ChartKey(instrument=manager.resolver.resolve(uid), currency_code=currency, range_type=range_type)
        try:
            timestamp = manager.last_sync_timestamp(key)
        except ChartCacheError as error:
            exit_with_error(error)
        if timestamp is None:
            emit_error("No cached points for key.", "NO_CHART_DATA", details=key.describe())
            raise typer.Exit(code=NO_DATA_EXIT_CODE)

        row = {**key.describe(), "last_sync": _utc(timestamp), "timestamp": timestamp}
        formatter.render([row], stream=sys.stdout)
    finally:
        storage.close()


__all__ = ["chart_app", "open_storage", "register"]
