import asyncio

from storefront.core.fanout import FanOutWriter, FileSink, QueueSink


class ListSink:
    def __init__(self, name="list"):
        self.name = name
        self.chunks: list[bytes] = []
        self.closed = False

    def write(self, chunk: bytes) -> None:
        self.chunks.append(chunk)

    def close(self) -> None:
        self.closed = True


class BrokenSink(ListSink):
    def __init__(self, fail_after: int):
        super().__init__("broken")
        self.fail_after = fail_after

    def write(self, chunk: bytes) -> None:
        if len(self.chunks) >= self.fail_after:
            raise OSError("No space left on device")
        super().write(chunk)


def test_every_sink_gets_every_chunk():
    a, b = ListSink("a"), ListSink("b")
    writer = FanOutWriter([a, b], chunk_size=4)

    writer.write(b"0123456789")
    writer.close()

    assert a.chunks == [b"0123", b"4567", b"89"]
    assert b.chunks == a.chunks
    assert a.closed and b.closed
    assert writer.bytes_written == 10


def test_failing_sink_is_dropped_others_continue():
    good, broken = ListSink("good"), BrokenSink(fail_after=1)
    writer = FanOutWriter([broken, good], chunk_size=2)

    writer.write(b"abcdef")
    writer.close()

    assert b"".join(good.chunks) == b"abcdef"
    assert broken.chunks == [b"ab"]
    assert broken.closed
    assert writer.failed == ["broken"]


def test_file_sink_creates_parent_dirs(tmp_path):
    path = tmp_path / "a" / "b" / "out.bin"
    writer = FanOutWriter([FileSink(path)])

    writer.write(b"hello")
    writer.close()

    assert path.read_bytes() == b"hello"


async def test_queue_sink_delivers_from_worker_thread():
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    writer = FanOutWriter([QueueSink(queue, loop)], chunk_size=3)

    def produce():
        writer.write(b"abcdefg")
        writer.close()

    await asyncio.to_thread(produce)

    received = []
    while (chunk := await queue.get()) is not None:
        received.append(chunk)
    assert received == [b"abc", b"def", b"g"]


async def test_queue_sink_blocks_on_full_queue_until_detached():
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue(maxsize=1)
    sink = QueueSink(queue, loop)
    writer = FanOutWriter([sink], chunk_size=1)

    task = asyncio.ensure_future(asyncio.to_thread(writer.write, b"abc"))
    await asyncio.sleep(0.2)

    assert queue.qsize() == 1
    assert not task.done()

    sink.detach()
    await task

    assert writer.failed == ["stream"]
    assert writer.sinks == []
    assert queue.get_nowait() == b"a"
