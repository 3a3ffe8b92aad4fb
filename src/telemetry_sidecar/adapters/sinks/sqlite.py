"""SQLite sink adapters for local capture.

Lets the sidecar run without the backend sockets: entries and samples are
written to a SQLite file through aiosqlite. Static fields and dimensions
are stored merged into each row, as the socket sinks put them on the wire.
"""

import asyncio
import json
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from telemetry_sidecar.core.models import LogEntry, MetricSample

_LOGS_SCHEMA = """
CREATE TABLE IF NOT EXISTS logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp REAL NOT NULL,
    level TEXT NOT NULL,
    message TEXT NOT NULL,
    attributes TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp);
"""

_INSERT_LOG = """
INSERT INTO logs (timestamp, level, message, attributes) VALUES (?, ?, ?, ?)
"""

_SELECT_LOGS = """
SELECT timestamp, level, message, attributes FROM logs ORDER BY id ASC
"""

_METRICS_SCHEMA = """
CREATE TABLE IF NOT EXISTS metrics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    timestamp REAL NOT NULL,
    value REAL NOT NULL,
    labels TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_metrics_timestamp ON metrics(timestamp);
"""

_INSERT_METRIC = """
INSERT INTO metrics (name, timestamp, value, labels) VALUES (?, ?, ?, ?)
"""

_SELECT_METRICS = """
SELECT name, timestamp, value, labels FROM metrics ORDER BY id ASC
"""


def _safe_json_loads(data: str) -> dict[str, Any]:
    """Parse a JSON object column, returning {} on decode error."""
    try:
        result: dict[str, Any] = json.loads(data)
        return result
    except json.JSONDecodeError:
        return {}


class _SQLiteSinkBase:
    """Connection lifecycle shared by the SQLite sinks.

    For :memory: databases a persistent connection is kept, since SQLite
    in-memory databases are connection-scoped.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._db_path == ":memory:":
                self._persistent_conn = await aiosqlite.connect(":memory:")
                await self._persistent_conn.executescript(self._schema)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(self._schema)
            self._initialized = True

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection, closing it afterwards for file databases."""
        await self._ensure_initialized()
        if self._persistent_conn is not None:
            yield self._persistent_conn
            return
        db = await aiosqlite.connect(self._db_path)
        try:
            yield db
        finally:
            await db.close()

    async def close(self) -> None:
        """Close persistent connection (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False


class SQLiteLogSink(_SQLiteSinkBase):
    """SQLite implementation of LogSinkPort.

    Args:
        db_path: Database file path, or ":memory:".
        fields: Static fields merged under each entry's attributes.
    """

    def __init__(self, db_path: str, fields: dict[str, str] | None = None) -> None:
        super().__init__(db_path, _LOGS_SCHEMA)
        self._fields = dict(fields or {})

    async def emit_log(self, entry: LogEntry) -> None:
        """Insert a log entry."""
        attributes = {**self._fields, **entry.attributes}
        async with self._connection() as db:
            await db.execute(
                _INSERT_LOG,
                (entry.timestamp, entry.level, entry.message, json.dumps(attributes)),
            )
            await db.commit()

    async def read(self) -> AsyncIterable[LogEntry]:
        """Yield stored entries in insertion order."""
        async with self._connection() as db:
            async with db.execute(_SELECT_LOGS) as cursor:
                async for row in cursor:
                    yield LogEntry(
                        timestamp=row[0],
                        level=row[1],
                        message=row[2],
                        attributes=_safe_json_loads(row[3]),
                    )


class SQLiteMetricSink(_SQLiteSinkBase):
    """SQLite implementation of MetricSinkPort.

    Args:
        db_path: Database file path, or ":memory:".
        dimensions: Static dimensions merged under each sample's labels.
    """

    def __init__(
        self, db_path: str, dimensions: dict[str, str] | None = None
    ) -> None:
        super().__init__(db_path, _METRICS_SCHEMA)
        self._dimensions = dict(dimensions or {})

    async def emit_metric_sample(self, sample: MetricSample) -> None:
        """Insert a metric sample."""
        labels = {**self._dimensions, **sample.labels}
        async with self._connection() as db:
            await db.execute(
                _INSERT_METRIC,
                (sample.name, sample.timestamp, sample.value, json.dumps(labels)),
            )
            await db.commit()

    async def read(self) -> AsyncIterable[MetricSample]:
        """Yield stored samples in insertion order."""
        async with self._connection() as db:
            async with db.execute(_SELECT_METRICS) as cursor:
                async for row in cursor:
                    yield MetricSample(
                        name=row[0],
                        timestamp=row[1],
                        value=row[2],
                        labels=_safe_json_loads(row[3]),
                    )
