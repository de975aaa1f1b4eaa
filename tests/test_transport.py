import pytest

from gelf_manager.codecs import GzipCodec, ZlibCodec
from gelf_manager.protocol.chunk import make_chunks
from gelf_manager.runtime.manager import GelfManager
from gelf_manager.runtime.scheduler import FakeClock
from gelf_manager.runtime.sink import MemorySink
from gelf_manager.transport.base import pump
from gelf_manager.transport.mock import MockTransport
from gelf_manager.transport.udp import UdpDatagramSender, UdpDatagramSource

RECORD = {"version": "1.1", "host": "db-2", "short_message": "slow query", "_ms": 812}


class _Feed:
    def __init__(self) -> None:
        self.datagrams: list[bytes] = []

    def feed(self, datagram: bytes) -> None:
        self.datagrams.append(datagram)


def test_mock_transport_fifo_and_drop_pattern() -> None:
    transport = MockTransport(drop_pattern=[False, True])
    for datagram in (b"a", b"b", b"c", b"d"):
        transport.send(datagram)
    assert transport.dropped == 2
    assert transport.recv(0) == b"a"
    assert transport.recv(0) == b"c"
    assert transport.recv(0) is None
    transport.close()
    with pytest.raises(RuntimeError, match="closed"):
        transport.send(b"e")


def test_pump_stops_on_empty_source_without_timeout() -> None:
    transport = MockTransport()
    for datagram in (b"1", b"2", b"3"):
        transport.send(datagram)
    feed = _Feed()
    assert pump(transport, feed, timeout_ms=0) == 3
    assert feed.datagrams == [b"1", b"2", b"3"]


def test_pump_respects_max_datagrams() -> None:
    transport = MockTransport()
    for datagram in (b"1", b"2", b"3"):
        transport.send(datagram)
    feed = _Feed()
    assert pump(transport, feed, max_datagrams=2) == 2
    assert transport.pending() == 1
    with pytest.raises(ValueError, match="max_datagrams must be >= 0"):
        pump(transport, feed, max_datagrams=-1)


def test_reordered_chunks_decode_through_manager() -> None:
    transport = MockTransport(reorder=True, seed=7)
    for chunk in make_chunks(b"reorder!", GzipCodec().encode(RECORD), max_chunk_size=6):
        transport.send(chunk)
    sink = MemorySink()
    manager = GelfManager(sink, clock=FakeClock(), start_reaper=False)
    pump(transport, manager, timeout_ms=0)
    assert sink.records == [RECORD]
    assert manager.stats()["pending"] == 0


def test_lost_chunk_leaves_entry_pending() -> None:
    transport = MockTransport(drop_pattern=[False, False, True])
    chunks = make_chunks(b"lossy!!!", ZlibCodec().encode(RECORD), max_chunk_size=10)
    for chunk in chunks:
        transport.send(chunk)
    sink = MemorySink()
    manager = GelfManager(sink, clock=FakeClock(), start_reaper=False)
    pump(transport, manager, timeout_ms=0)
    assert sink.records == []
    assert manager.stats()["pending"] == 1


def test_udp_loopback() -> None:
    source = UdpDatagramSource(host="127.0.0.1", port=0)
    sender = UdpDatagramSender(*source.address)
    try:
        payload = ZlibCodec().encode(RECORD)
        sender.send(payload)
        assert source.recv(timeout_ms=2000) == payload
        assert source.recv(timeout_ms=10) is None
    finally:
        sender.close()
        source.close()
