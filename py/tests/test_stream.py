from __future__ import annotations

import asyncio
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from turbohttp.stream import AsyncIteratorSource, BodySource, BodyStream  # noqa: E402


def _record(source) -> list[tuple]:  # noqa: ANN001
    events: list[tuple] = []
    source.on("data", lambda chunk: events.append(("data", chunk)))
    source.on("end", lambda: events.append(("end",)))
    source.on("error", lambda exc: events.append(("error", exc)))
    return events


class TestBodyStream(unittest.TestCase):
    def test_satisfies_body_source(self) -> None:
        self.assertIsInstance(BodyStream(), BodySource)

    def test_queues_until_resumed_and_preserves_order(self) -> None:
        stream = BodyStream()
        events = _record(stream)
        stream.push(b"a")
        stream.push("b")
        stream.push(None)
        self.assertEqual(events, [])
        self.assertTrue(stream.closed)

        stream.resume()
        self.assertEqual(events, [("data", b"a"), ("data", b"b"), ("end",)])

    def test_pause_holds_remaining_events(self) -> None:
        stream = BodyStream()
        events: list[bytes] = []

        def on_data(chunk: bytes) -> None:
            events.append(chunk)
            stream.pause()

        stream.on("data", on_data)
        stream.push(b"1")
        stream.push(b"2")
        stream.resume()
        self.assertEqual(events, [b"1"])
        stream.resume()
        self.assertEqual(events, [b"1", b"2"])

    def test_fail_delivers_error(self) -> None:
        stream = BodyStream()
        events = _record(stream)
        stream.resume()
        err = OSError("io")
        stream.fail(err)
        self.assertEqual(events, [("error", err)])

    def test_push_after_close_raises(self) -> None:
        stream = BodyStream()
        stream.end()
        with self.assertRaisesRegex(RuntimeError, "already closed"):
            stream.push(b"late")

    def test_unknown_event_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown stream event"):
            BodyStream().on("close", lambda: None)

    def test_rejects_non_bytes_chunks(self) -> None:
        with self.assertRaisesRegex(TypeError, "bytes-like or str"):
            BodyStream().push(123)

    def test_close_discards_queued_and_later_events(self) -> None:
        stream = BodyStream()
        events = _record(stream)
        stream.push(b"a")
        stream.close()
        stream.push(b"b")
        stream.end()
        stream.resume()
        self.assertEqual(events, [])


class TestAsyncIteratorSource(unittest.IsolatedAsyncioTestCase):
    async def test_pumps_chunks_then_end_after_resume(self) -> None:
        async def chunks():
            yield b"x"
            yield b""
            yield "y"

        source = AsyncIteratorSource(chunks())
        events = _record(source)
        await asyncio.sleep(0)
        self.assertEqual(events, [])

        source.resume()
        for _ in range(5):
            await asyncio.sleep(0)
        self.assertEqual(events, [("data", b"x"), ("data", b"y"), ("end",)])

    async def test_iterator_failure_becomes_error_event(self) -> None:
        err = RuntimeError("broken pipe")

        async def chunks():
            yield b"x"
            raise err

        source = AsyncIteratorSource(chunks())
        events = _record(source)
        source.resume()
        for _ in range(5):
            await asyncio.sleep(0)
        self.assertEqual(events, [("data", b"x"), ("error", err)])

    async def test_close_cancels_pump_and_closes_iterator(self) -> None:
        released: list[bool] = []

        async def chunks():
            try:
                while True:
                    yield b"x"
            finally:
                released.append(True)

        source = AsyncIteratorSource(chunks())
        events: list[bytes] = []

        def on_data(chunk: bytes) -> None:
            events.append(chunk)
            source.pause()
            source.close()

        source.on("data", on_data)
        source.resume()
        for _ in range(5):
            await asyncio.sleep(0)

        self.assertEqual(events, [b"x"])
        self.assertFalse(source.pumping)
        self.assertEqual(released, [True])

        source.resume()
        await asyncio.sleep(0)
        self.assertFalse(source.pumping)
