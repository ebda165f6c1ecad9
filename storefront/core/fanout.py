# storefront/core/fanout.py
"""
Single-producer, multi-sink byte writer.

A document generator writes into a FanOutWriter as if it were one file;
every chunk is delivered to each registered sink in turn. A sink that raises
is logged and dropped; the remaining sinks keep receiving data.
"""

import asyncio
import concurrent.futures
import logging
import threading
from pathlib import Path
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 16 * 1024

# How often a blocked QueueSink write checks whether its consumer is gone
PUT_POLL_SECONDS = 0.1


class Sink(Protocol):
    name: str

    def write(self, chunk: bytes) -> None: ...

    def close(self) -> None: ...


class FileSink:
    """Writes to a file on disk; parent directories are created on open."""

    def __init__(self, path: Path):
        self.name = f"file:{path}"
        self.path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._fh: BinaryIO = open(path, "wb")

    def write(self, chunk: bytes) -> None:
        self._fh.write(chunk)

    def close(self) -> None:
        self._fh.close()


class QueueSink:
    """
    Hands chunks to an asyncio.Queue owned by an event loop.

    Called from a worker thread. With a bounded queue, `write` blocks until
    the consumer has taken enough chunks. `close` enqueues a None sentinel.
    Once the consumer calls `detach`, blocked and later writes raise
    RuntimeError so the writer drops this sink.
    """

    def __init__(self, queue: asyncio.Queue, loop: asyncio.AbstractEventLoop, name: str = "stream"):
        self.name = name
        self._queue = queue
        self._loop = loop
        self._detached = threading.Event()

    def write(self, chunk: bytes) -> None:
        self._put(chunk)

    def close(self) -> None:
        self._put(None)

    def detach(self) -> None:
        self._detached.set()

    def _put(self, item: bytes | None) -> None:
        if self._detached.is_set():
            raise RuntimeError(f"{self.name}: consumer went away")
        fut = asyncio.run_coroutine_threadsafe(self._queue.put(item), self._loop)
        while True:
            try:
                fut.result(timeout=PUT_POLL_SECONDS)
                return
            except concurrent.futures.TimeoutError:
                if self._detached.is_set():
                    fut.cancel()
                    raise RuntimeError(f"{self.name}: consumer went away")


class FanOutWriter:
    """
    File-like object (`write`, `flush`, `close`) that forwards to sinks.
    """

    def __init__(self, sinks: list[Sink], chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.sinks = list(sinks)
        self.failed: list[str] = []
        self.chunk_size = chunk_size
        self.bytes_written = 0
        self.closed = False

    def write(self, data: bytes) -> int:
        view = memoryview(data)
        for start in range(0, len(view), self.chunk_size):
            chunk = bytes(view[start : start + self.chunk_size])
            for sink in list(self.sinks):
                try:
                    sink.write(chunk)
                except (OSError, RuntimeError) as e:
                    self._drop(sink, e)
        self.bytes_written += len(data)
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        for sink in self.sinks:
            try:
                sink.close()
            except (OSError, RuntimeError) as e:
                logger.error("Closing sink %s failed: %s", sink.name, e)
                self.failed.append(sink.name)

    def _drop(self, sink: Sink, error: Exception) -> None:
        logger.error("Sink %s failed, dropping it: %s", sink.name, error)
        self.sinks.remove(sink)
        self.failed.append(sink.name)
        try:
            sink.close()
        except (OSError, RuntimeError):
            pass
