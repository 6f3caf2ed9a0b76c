"""DuckDB图表数据点存储实现."""

from collections.abc import Sequence
from contextlib import suppress
from threading import RLock

import duckdb
from duckdb import DuckDBPyConnection

from chartcache.core.data.storage.base import ChartStorage
from chartcache.core.data.storage.duckdb_factory import ChartDuckDBFactory, DuckDBFactoryConfig
from chartcache.core.data.storage.models import ChartPointRecord, records_for
from chartcache.core.exceptions import StorageError
from chartcache.core.logging import get_logger
from chartcache.core.models.chart import ChartKey, ChartPoint

logger = get_logger(__name__)

CHART_POINTS_TABLE = "chart_points"

_CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {CHART_POINTS_TABLE} (
        instrument_uid VARCHAR NOT NULL,
        currency_code VARCHAR NOT NULL,
        range_type VARCHAR NOT NULL,
        timestamp DOUBLE NOT NULL,
        value DECIMAL(38, 18) NOT NULL,
        volume DECIMAL(38, 18),
        PRIMARY KEY (instrument_uid, currency_code, range_type, timestamp)
    )
"""

_KEY_FILTER = "instrument_uid = ? AND currency_code = ? AND range_type = ?"


class DuckDBChartStorage(ChartStorage):
    """基于DuckDB的持久化图表存储."""

    name = "duckdb"

    def __init__(self, db_path: str = ":memory:", factory: ChartDuckDBFactory | None = None):
        """初始化DuckDB存储."""
        self._factory = factory or ChartDuckDBFactory(DuckDBFactoryConfig(database=db_path))
        self.db_path = self._factory.database
        self._lock = RLock()
        self._conn: DuckDBPyConnection | None = None
        self._init_database()

    def _init_database(self) -> None:
        """初始化数据库表结构."""
        try:
            self._conn = self._factory.create_connection()
            self._conn.execute(_CREATE_TABLE_SQL)
        except duckdb.Error as exc:
            raise StorageError(f"Failed to open chart storage: {exc}", self.name, {"db_path": self.db_path}) from exc

    @property
    def connection(self) -> DuckDBPyConnection:
        if self._conn is None:
            raise StorageError("Chart storage is closed", self.name, {"db_path": self.db_path})
        return self._conn

    def chart_points(self, key: ChartKey) -> list[ChartPoint]:
        """读取缓存键下的数据点."""
        with self._lock:
            try:
                rows = self.connection.execute(
                    f"""
                    SELECT instrument_uid, currency_code, range_type, timestamp, value, volume
                    FROM {CHART_POINTS_TABLE}
                    WHERE {_KEY_FILTER}
                    ORDER BY timestamp ASC
                    """,
                    list(key.storage_id),
                ).fetchall()
            except duckdb.Error as exc:
                raise StorageError(f"Failed to read chart points: {exc}", self.name, key.describe()) from exc

        columns = ("instrument_uid", "currency_code", "range_type", "timestamp", "value", "volume")
        return [ChartPointRecord(**dict(zip(columns, row))).to_point() for row in rows]

    def delete_chart_points(self, key: ChartKey) -> None:
        """删除缓存键下的数据点."""
        with self._lock:
            try:
                self._delete(key)
            except duckdb.Error as exc:
                raise StorageError(f"Failed to delete chart points: {exc}", self.name, key.describe()) from exc

    def save(self, records: Sequence[ChartPointRecord]) -> None:
        """批量保存数据点记录."""
        if not records:
            return
        with self._lock:
            try:
                self._insert(records)
            except duckdb.Error as exc:
                raise StorageError(f"Failed to save chart points: {exc}", self.name) from exc

    def replace_chart_points(self, key: ChartKey, points: Sequence[ChartPoint]) -> None:
        """在同一事务中先删后插."""
        records = records_for(key, list(points))
        with self._lock:
            conn = self.connection
            try:
                conn.execute("BEGIN TRANSACTION")
                self._delete(key)
                if records:
                    self._insert(records)
                conn.execute("COMMIT")
            except duckdb.Error as exc:
                with suppress(duckdb.Error):
                    conn.execute("ROLLBACK")
                raise StorageError(f"Failed to replace chart points: {exc}", self.name, key.describe()) from exc

        logger.debug("replaced chart points", count=len(records), **key.describe())

    def count(self) -> int:
        """获取存储中的数据点总数."""
        with self._lock:
            result = self.connection.execute(f"SELECT COUNT(*) FROM {CHART_POINTS_TABLE}").fetchone()
        return int(result[0]) if result else 0

    def _delete(self, key: ChartKey) -> None:
        self.connection.execute(f"DELETE FROM {CHART_POINTS_TABLE} WHERE {_KEY_FILTER}", list(key.storage_id))

    def _insert(self, records: Sequence[ChartPointRecord]) -> None:
        # duplicate timestamps inside one batch keep the last value
        rows = {(r.instrument_uid, r.currency_code, r.range_type, r.timestamp): r.as_row() for r in records}
        self.connection.executemany(
            f"""
            INSERT OR REPLACE INTO {CHART_POINTS_TABLE}
                (instrument_uid, currency_code, range_type, timestamp, value, volume)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            list(rows.values()),
        )

    def is_connected(self) -> bool:
        """检查数据库连接是否处于活动状态."""
        return self._conn is not None

    def close(self) -> None:
        """关闭数据库连接."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None


__all__ = ["CHART_POINTS_TABLE", "DuckDBChartStorage"]
