from __future__ import annotations

import json
import time
from decimal import Decimal
from pathlib import Path

import duckdb
import pytest
from typer.testing import CliRunner

from chartcache.cli.constants import NO_DATA_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from chartcache.cli.main import create_app
from chartcache.core.data.storage import DuckDBChartStorage
from chartcache.core.logging import configure_logging
from chartcache.core.models import ChartKey, ChartPoint, Instrument, RangeType


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch: pytest.MonkeyPatch):
    for name in ("CHARTCACHE_LOGGING_FILE", "CHARTCACHE_LOGGING_LEVEL", "CHARTCACHE_STORAGE_BACKEND"):
        monkeypatch.delenv(name, raising=False)
    yield
    configure_logging(level="WARNING")


@pytest.fixture
def seeded_db(tmp_path: Path) -> tuple[Path, float]:
    """DuckDB store holding two fresh bitcoin/USD/1d points."""

    db_path = tmp_path / "charts.duckdb"
    last = time.time() - 60
    key = ChartKey(
        instrument=Instrument(uid="bitcoin", name="bitcoin", code="BITCOIN"),
        currency_code="USD",
        range_type=RangeType.DAY_1,
    )
    storage = DuckDBChartStorage(str(db_path))
    try:
        storage.replace_chart_points(
            key,
            [
                ChartPoint(timestamp=last - 600, value=Decimal("100"), extra={ChartPoint.VOLUME: Decimal("5")}),
                ChartPoint(timestamp=last, value=Decimal("101.5")),
            ],
        )
    finally:
        storage.close()
    return db_path, last


def _jsonl(output: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_show_summary_table(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(
        create_app(),
        ["--db", str(db_path), "--no-color", "chart", "show", "bitcoin"],
        env={"COLUMNS": "240"},
    )

    assert result.exit_code == 0, result.output
    assert "bitcoin" in result.output
    assert "expired" in result.output
    assert "False" in result.output


def test_show_summary_jsonl(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(create_app(), ["--db", str(db_path), "--format", "jsonl", "chart", "show", "bitcoin"])

    assert result.exit_code == 0, result.output
    (row,) = _jsonl(result.output)
    assert row["instrument"] == "bitcoin"
    assert row["currency"] == "USD"
    assert row["range"] == "1d"
    assert row["points"] == 2
    assert row["expired"] is False


def test_show_points_jsonl(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(
        create_app(),
        ["--db", str(db_path), "-f", "jsonl", "chart", "show", "bitcoin", "--points"],
    )

    assert result.exit_code == 0, result.output
    first, second = _jsonl(result.output)
    assert Decimal(first["value"]) == Decimal("100")
    assert Decimal(first["volume"]) == Decimal("5")
    assert Decimal(second["value"]) == Decimal("101.5")
    assert second["volume"] is None


def test_show_missing_chart_exits_with_no_data(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(create_app(), ["--db", str(db_path), "chart", "show", "bitcoin", "--currency", "EUR"])

    assert result.exit_code == NO_DATA_EXIT_CODE
    assert "NO_CHART_DATA" in result.output
    assert "EUR" in result.output


def test_show_rejects_unknown_range(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(create_app(), ["--db", str(db_path), "chart", "show", "bitcoin", "--range", "5y"])

    assert result.exit_code == VALIDATION_EXIT_CODE


def test_last_sync_jsonl(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, last = seeded_db

    result = runner.invoke(
        create_app(),
        ["--db", str(db_path), "--format", "jsonl", "chart", "last-sync", "bitcoin", "-r", "1d"],
    )

    assert result.exit_code == 0, result.output
    (row,) = _jsonl(result.output)
    assert row["instrument"] == "bitcoin"
    assert row["range_type"] == "1d"
    assert row["timestamp"] == pytest.approx(last)


def test_last_sync_missing_key(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(create_app(), ["--db", str(db_path), "chart", "last-sync", "ethereum"])

    assert result.exit_code == NO_DATA_EXIT_CODE
    assert "NO_CHART_DATA" in result.output


def test_invalid_format_is_rejected(runner: CliRunner, seeded_db: tuple[Path, float]) -> None:
    db_path, _ = seeded_db

    result = runner.invoke(create_app(), ["--db", str(db_path), "--format", "xml", "chart", "show", "bitcoin"])

    assert result.exit_code == VALIDATION_EXIT_CODE


def test_unreadable_store_exits_with_system_code(runner: CliRunner, tmp_path: Path) -> None:
    db_path = tmp_path / "foreign.duckdb"
    conn = duckdb.connect(str(db_path))
    conn.execute("CREATE TABLE chart_points (x INTEGER)")
    conn.close()

    for command in (["chart", "show", "bitcoin"], ["chart", "last-sync", "bitcoin"]):
        result = runner.invoke(create_app(), ["--db", str(db_path), *command])

        assert result.exit_code == SYSTEM_EXIT_CODE, result.output
        assert "STORAGE_ERROR" in result.output


def test_configured_log_file_is_written(
    runner: CliRunner,
    seeded_db: tuple[Path, float],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    db_path, _ = seeded_db
    log_file = tmp_path / "logs" / "chartcache.log"
    monkeypatch.setenv("CHARTCACHE_LOGGING_FILE", str(log_file))
    monkeypatch.setenv("CHARTCACHE_LOGGING_LEVEL", "DEBUG")

    result = runner.invoke(create_app(), ["--db", str(db_path), "-f", "jsonl", "chart", "show", "bitcoin"])

    assert result.exit_code == 0, result.output
    records = _jsonl(log_file.read_text(encoding="utf-8"))
    evaluated = [record for record in records if record["message"] == "cached chart evaluated"]
    assert evaluated
    assert evaluated[0]["instrument"] == "bitcoin"


def test_log_level_option_overrides_configured_level(
    runner: CliRunner,
    seeded_db: tuple[Path, float],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    db_path, _ = seeded_db
    log_file = tmp_path / "chartcache.log"
    monkeypatch.setenv("CHARTCACHE_LOGGING_FILE", str(log_file))
    monkeypatch.setenv("CHARTCACHE_LOGGING_LEVEL", "DEBUG")

    result = runner.invoke(
        create_app(),
        ["--db", str(db_path), "--log-level", "error", "-f", "jsonl", "chart", "show", "bitcoin"],
    )

    assert result.exit_code == 0, result.output
    assert not log_file.exists() or log_file.read_text(encoding="utf-8") == ""
