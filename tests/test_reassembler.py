import pytest

from gelf_manager.protocol.chunk import ChunkHeader, message_key
from gelf_manager.protocol.errors import InconsistentChunk, InvalidChunkedMessage
from gelf_manager.runtime.reassembler import ChunkReassembler, ReassemblyEntry
from gelf_manager.runtime.scheduler import FakeClock

MSG_ID = b"abcdefgh"
KEY = message_key(MSG_ID)


def _chunk(seq: int, total: int, payload: bytes, message_id: bytes = MSG_ID) -> bytes:
    return ChunkHeader(
        message_id=message_id, seq_number=seq, seq_total=total, payload=payload
    ).to_bytes()


class _MemLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def log_event(self, event: str, fields: dict[str, object]) -> None:
        self.events.append((event, fields))


def test_entry_ignores_duplicates() -> None:
    entry = ReassemblyEntry(total=2, created_ms=0)
    assert entry.add(1, b"b")
    assert not entry.add(1, b"X")
    assert entry.count == 1
    assert entry.chunks[1] == b"b"
    assert not entry.complete
    assert entry.add(0, b"a")
    assert entry.complete
    assert entry.join() == b"ab"


def test_reassembler_completes_in_sequence_order() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    assert reassembler.handle_chunk(_chunk(2, 3, b"CC")) is None
    assert reassembler.handle_chunk(_chunk(0, 3, b"AA")) is None
    assert KEY in reassembler
    assert reassembler.handle_chunk(_chunk(1, 3, b"BB")) == b"AABBCC"
    assert KEY not in reassembler
    assert reassembler.pending() == 0


def test_reassembler_single_chunk_message() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    assert reassembler.handle_chunk(_chunk(0, 1, b"only")) == b"only"
    assert reassembler.pending() == 0


def test_reassembler_duplicate_chunk_does_not_complete() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    assert reassembler.handle_chunk(_chunk(0, 2, b"first")) is None
    assert reassembler.handle_chunk(_chunk(0, 2, b"first")) is None
    assert reassembler.handle_chunk(_chunk(0, 2, b"other")) is None
    assert reassembler.pending_ids() == [KEY]
    assert reassembler.handle_chunk(_chunk(1, 2, b"second")) == b"firstsecond"


def test_reassembler_keeps_messages_apart() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    other = b"zyxwvuts"
    assert reassembler.handle_chunk(_chunk(0, 2, b"a1")) is None
    assert reassembler.handle_chunk(_chunk(1, 2, b"b2", message_id=other)) is None
    assert reassembler.pending() == 2
    assert reassembler.handle_chunk(_chunk(0, 2, b"b1", message_id=other)) == b"b1b2"
    assert reassembler.pending_ids() == [KEY]


def test_reassembler_rejects_short_chunk() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    with pytest.raises(InvalidChunkedMessage):
        reassembler.handle_chunk(b"\x1e\x0f" + MSG_ID + b"\x00\x01")
    assert reassembler.pending() == 0


@pytest.mark.parametrize(
    ("seq", "total", "match"),
    [
        (0, 0, "seq_total=0"),
        (3, 3, "seq_number=3"),
        (200, 2, "seq_number=200"),
    ],
)
def test_reassembler_bounds_checks(seq: int, total: int, match: str) -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    datagram = b"\x1e\x0f" + MSG_ID + bytes([seq, total]) + b"payload"
    with pytest.raises(InvalidChunkedMessage, match=match):
        reassembler.handle_chunk(datagram)
    assert reassembler.pending() == 0


def test_reassembler_max_chunks() -> None:
    reassembler = ChunkReassembler(clock=FakeClock(), max_chunks=4)
    with pytest.raises(InvalidChunkedMessage, match="exceeds 4"):
        reassembler.handle_chunk(_chunk(0, 5, b"x"))
    with pytest.raises(ValueError, match="max_chunks must be 1..255"):
        ChunkReassembler(max_chunks=0)


def test_reassembler_rejects_inconsistent_total_and_keeps_entry() -> None:
    reassembler = ChunkReassembler(clock=FakeClock())
    assert reassembler.handle_chunk(_chunk(0, 2, b"a")) is None
    with pytest.raises(InconsistentChunk, match="expected 2"):
        reassembler.handle_chunk(_chunk(1, 3, b"b"))
    assert reassembler.handle_chunk(_chunk(1, 2, b"b")) == b"ab"


def test_evict_expired_uses_strict_timeout() -> None:
    clock = FakeClock()
    reassembler = ChunkReassembler(clock=clock)
    reassembler.handle_chunk(_chunk(0, 2, b"old"))
    clock.sleep_ms(50)
    reassembler.handle_chunk(_chunk(0, 2, b"new", message_id=b"newnewne"))
    clock.sleep_ms(50)
    assert reassembler.evict_expired(100) == []
    clock.sleep_ms(1)
    assert reassembler.evict_expired(100) == [(KEY, 101)]
    assert reassembler.pending() == 1


def test_evicted_id_starts_fresh_entry() -> None:
    clock = FakeClock()
    reassembler = ChunkReassembler(clock=clock)
    reassembler.handle_chunk(_chunk(0, 3, b"stale"))
    clock.sleep_ms(30)
    assert [key for key, _ in reassembler.evict_expired(20)] == [KEY]
    assert reassembler.handle_chunk(_chunk(1, 2, b"B")) is None
    assert reassembler.handle_chunk(_chunk(0, 2, b"A")) == b"AB"


def test_reassembler_logs_chunk_events() -> None:
    logger = _MemLogger()
    reassembler = ChunkReassembler(clock=FakeClock(), logger=logger)
    reassembler.handle_chunk(_chunk(1, 2, b"b"))
    reassembler.handle_chunk(_chunk(0, 2, b"a"))
    assert [event for event, _ in logger.events] == [
        "chunk_received",
        "chunk_received",
        "chunk_complete",
    ]
    assert logger.events[0][1] == {"message_id": KEY, "seq_number": 1, "seq_total": 2}
    assert logger.events[2][1] == {"message_id": KEY, "chunks": 2}
