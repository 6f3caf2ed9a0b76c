"""
Tests for the chart point stores.

Both stores share one contract: key-scoped reads in ascending timestamp
order and replace-on-write semantics. DuckDB-specific tests cover
persistence across connections and decimal round trips.
"""

from decimal import Decimal

import duckdb
import pytest

from chartcache.core.data.storage import (
    CHART_POINTS_TABLE,
    ChartDuckDBFactory,
    ChartPointRecord,
    DuckDBChartStorage,
    DuckDBFactoryConfig,
    InMemoryChartStorage,
)
from chartcache.core.exceptions import StorageError
from chartcache.core.models import ChartPoint, RangeType


@pytest.fixture(params=["memory", "duckdb"])
def storage(request):
    store = InMemoryChartStorage() if request.param == "memory" else DuckDBChartStorage(":memory:")
    yield store
    store.close()


class TestStorageContract:
    """Behaviour shared by every ChartStorage implementation."""

    def test_empty_read(self, storage, key_for):
        assert storage.chart_points(key_for()) == []

    def test_reads_in_ascending_order(self, storage, key_for):
        key = key_for()
        records = [
            ChartPointRecord.from_point(key, ChartPoint(timestamp=ts, value=Decimal(ts)))
            for ts in (300.0, 100.0, 200.0)
        ]

        storage.save(records)

        assert [point.timestamp for point in storage.chart_points(key)] == [100.0, 200.0, 300.0]

    def test_replace_is_not_a_merge(self, storage, key_for, points_at):
        key = key_for()
        storage.replace_chart_points(key, points_at([1.0, 2.0, 3.0]))
        replacement = points_at([10.0, 20.0], start_value="7")

        storage.replace_chart_points(key, replacement)

        assert storage.chart_points(key) == replacement

    def test_replace_is_idempotent(self, storage, key_for, points_at):
        key = key_for()
        points = points_at([1.0, 2.0])

        storage.replace_chart_points(key, points)
        storage.replace_chart_points(key, points)

        assert storage.chart_points(key) == points

    def test_delete_is_scoped_to_key(self, storage, key_for, points_at, ethereum):
        btc = key_for(RangeType.WEEK_1)
        btc_month = key_for(RangeType.MONTH_1)
        eth = key_for(RangeType.WEEK_1, instrument=ethereum)
        for key in (btc, btc_month, eth):
            storage.replace_chart_points(key, points_at([1.0, 2.0]))

        storage.delete_chart_points(btc)

        assert storage.chart_points(btc) == []
        assert len(storage.chart_points(btc_month)) == 2
        assert len(storage.chart_points(eth)) == 2

    def test_volume_extra_round_trips(self, storage, key_for):
        key = key_for()
        point = ChartPoint(timestamp=1.5, value=Decimal("42.125"), extra={ChartPoint.VOLUME: Decimal("9000.5")})

        storage.replace_chart_points(key, [point])

        (stored,) = storage.chart_points(key)
        assert stored.value == Decimal("42.125")
        assert stored.volume == Decimal("9000.5")

    def test_point_without_volume(self, storage, key_for):
        key = key_for()

        storage.replace_chart_points(key, [ChartPoint(timestamp=1.0, value=Decimal("3"))])

        (stored,) = storage.chart_points(key)
        assert stored.volume is None
        assert stored.extra == {}

    def test_duplicate_timestamps_keep_last(self, storage, key_for):
        key = key_for()
        points = [
            ChartPoint(timestamp=1.0, value=Decimal("1")),
            ChartPoint(timestamp=1.0, value=Decimal("2")),
        ]

        storage.replace_chart_points(key, points)

        (stored,) = storage.chart_points(key)
        assert stored.value == Decimal("2")

    def test_replace_with_empty_clears_key(self, storage, key_for, points_at):
        key = key_for()
        storage.replace_chart_points(key, points_at([1.0]))

        storage.replace_chart_points(key, [])

        assert storage.chart_points(key) == []


class TestDuckDBChartStorage:
    """DuckDB-specific behaviour."""

    def test_persists_across_connections(self, tmp_path, key_for, points_at):
        db_path = tmp_path / "nested" / "charts.duckdb"
        key = key_for()
        points = points_at([1.0, 2.0])

        first = DuckDBChartStorage(str(db_path))
        first.replace_chart_points(key, points)
        first.close()

        second = DuckDBChartStorage(str(db_path))
        try:
            assert second.chart_points(key) == points
        finally:
            second.close()

    def test_count(self, duckdb_storage, key_for, points_at):
        duckdb_storage.replace_chart_points(key_for(), points_at([1.0, 2.0, 3.0]))

        assert duckdb_storage.count() == 3

    def test_table_name(self, duckdb_storage):
        tables = {row[0] for row in duckdb_storage.connection.execute("SHOW TABLES").fetchall()}

        assert CHART_POINTS_TABLE in tables

    def test_closed_storage_raises(self, key_for):
        storage = DuckDBChartStorage(":memory:")
        storage.close()

        assert storage.is_connected() is False
        with pytest.raises(StorageError):
            storage.chart_points(key_for())

    def test_failed_replace_rolls_back(self, duckdb_storage, key_for, points_at, monkeypatch):
        key = key_for()
        original = points_at([1.0, 2.0])
        duckdb_storage.replace_chart_points(key, original)

        def broken_insert(records):
            duckdb_storage.connection.execute("SELECT * FROM missing_table")

        monkeypatch.setattr(duckdb_storage, "_insert", broken_insert)

        with pytest.raises(StorageError):
            duckdb_storage.replace_chart_points(key, points_at([5.0]))

        assert duckdb_storage.chart_points(key) == original

    def test_failed_rollback_keeps_original_error(self, duckdb_storage, key_for, points_at, monkeypatch):
        def committing_delete(key):
            # ends the transaction so the following ROLLBACK has nothing to undo
            duckdb_storage.connection.execute("COMMIT")
            raise duckdb.IOException("disk detached")

        monkeypatch.setattr(duckdb_storage, "_delete", committing_delete)

        with pytest.raises(StorageError, match="disk detached") as exc_info:
            duckdb_storage.replace_chart_points(key_for(), points_at([1.0]))

        assert isinstance(exc_info.value.__cause__, duckdb.IOException)


class TestChartDuckDBFactory:
    """Connection factory."""

    def test_expands_home_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        factory = ChartDuckDBFactory(DuckDBFactoryConfig(database="~/store/charts.duckdb"))

        assert factory.database == str(tmp_path / "store" / "charts.duckdb")

    def test_memory_database_untouched(self):
        assert ChartDuckDBFactory().database == ":memory:"

    def test_applies_pragmas(self, tmp_path):
        factory = ChartDuckDBFactory(DuckDBFactoryConfig(database=tmp_path / "a" / "c.duckdb", pragmas={"threads": 2}))

        conn = factory.create_connection()
        try:
            assert conn.execute("SELECT current_setting('threads')").fetchone()[0] == 2
        finally:
            conn.close()
        assert (tmp_path / "a").is_dir()


class TestChartPointRecord:
    """Record mapping."""

    def test_from_point_uses_key_identity(self, key_for):
        key = key_for(RangeType.MONTH_3, currency_code="EUR")
        point = ChartPoint(timestamp=10.0, value=Decimal("1.25"), extra={"volume": Decimal("5")})

        record = ChartPointRecord.from_point(key, point)

        assert record.instrument_uid == "bitcoin"
        assert record.currency_code == "EUR"
        assert record.range_type is RangeType.MONTH_3
        assert record.as_row() == ["bitcoin", "EUR", "3m", 10.0, Decimal("1.25"), Decimal("5")]
        assert record.to_point() == point

    def test_only_volume_extra_is_persisted(self, key_for):
        point = ChartPoint(timestamp=1.0, value=Decimal("1"), extra={"volume": Decimal("2"), "market_cap": Decimal("3")})

        restored = ChartPointRecord.from_point(key_for(), point).to_point()

        assert restored.extra == {"volume": Decimal("2")}
