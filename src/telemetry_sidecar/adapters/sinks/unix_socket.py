"""Unix domain-socket sink adapters.

Each sink holds one stream connection to its backend endpoint and writes
one NDJSON line per entry or sample. The connection is opened on the first
emission and reused afterwards. Write failures are not retried.
"""

import asyncio
import logging

from telemetry_sidecar.core.encoding.ndjson import encode_log, encode_metric
from telemetry_sidecar.core.errors import SinkUnavailableError
from telemetry_sidecar.core.models import LogEntry, MetricSample

logger = logging.getLogger(__name__)


class _UnixSocketWriter:
    """Lazily connected line writer for a Unix domain socket."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._writer: asyncio.StreamWriter | None = None

    async def _connect(self) -> asyncio.StreamWriter:
        if self._writer is None:
            try:
                _reader, self._writer = await asyncio.open_unix_connection(self._path)
            except OSError as exc:
                raise SinkUnavailableError(self._path, str(exc)) from exc
            logger.debug("Connected to %s", self._path)
        return self._writer

    async def write_line(self, line: str) -> None:
        writer = await self._connect()
        try:
            writer.write(line.encode("utf-8"))
            await writer.drain()
        except OSError as exc:
            await self.close()
            raise SinkUnavailableError(self._path, str(exc)) from exc

    async def close(self) -> None:
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            logger.debug("Connection to %s already broken on close", self._path)


class UnixSocketLogSink:
    """LogSinkPort writing NDJSON log lines to a Unix socket.

    Args:
        path: Socket path of the logs endpoint.
        fields: Static fields added to every entry's attributes.
    """

    def __init__(self, path: str, fields: dict[str, str] | None = None) -> None:
        self.path = path
        self._fields = dict(fields or {})
        self._writer = _UnixSocketWriter(path)

    async def emit_log(self, entry: LogEntry) -> None:
        await self._writer.write_line(encode_log(entry, self._fields))

    async def close(self) -> None:
        await self._writer.close()


class UnixSocketMetricSink:
    """MetricSinkPort writing NDJSON metric lines to a Unix socket.

    Args:
        path: Socket path of the metrics endpoint.
        dimensions: Static dimensions added to every sample's labels.
        account: Metrics account stamped on every line.
        namespace: Metrics namespace stamped on every line.
    """

    def __init__(
        self,
        path: str,
        dimensions: dict[str, str] | None = None,
        account: str = "",
        namespace: str = "",
    ) -> None:
        self.path = path
        self._dimensions = dict(dimensions or {})
        self._extra = {"account": account, "namespace": namespace}
        self._writer = _UnixSocketWriter(path)

    async def emit_metric_sample(self, sample: MetricSample) -> None:
        await self._writer.write_line(
            encode_metric(sample, self._dimensions, self._extra)
        )

    async def close(self) -> None:
        await self._writer.close()
