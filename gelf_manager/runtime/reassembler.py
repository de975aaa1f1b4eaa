from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from gelf_manager.protocol.chunk import MAX_SEQ_TOTAL, ChunkHeader
from gelf_manager.protocol.errors import InconsistentChunk, InvalidChunkedMessage
from gelf_manager.runtime.logging import NullLogger
from gelf_manager.runtime.scheduler import Clock, IEventLogger, RealClock


@dataclass
class ReassemblyEntry:
    total: int
    created_ms: int
    chunks: Dict[int, bytes] = field(default_factory=dict)
    count: int = 0

    @property
    def complete(self) -> bool:
        return self.count == self.total

    def add(self, seq_number: int, payload: bytes) -> bool:
        if seq_number in self.chunks:
            return False
        self.chunks[seq_number] = payload
        self.count += 1
        return True

    def join(self) -> bytes:
        return b"".join(self.chunks[seq] for seq in range(self.total))


class ChunkReassembler:
    """Collect GELF chunks per message id until every sequence number is in.

    The pool is only touched under ``self._lock``; completion and eviction
    both pop the entry inside the lock, so an entry is removed at most once.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        max_chunks: int = MAX_SEQ_TOTAL,
        logger: IEventLogger | None = None,
    ) -> None:
        if not (1 <= max_chunks <= MAX_SEQ_TOTAL):
            raise ValueError("max_chunks must be 1..255")
        self._clock = clock or RealClock()
        self._max_chunks = max_chunks
        self._logger = logger or NullLogger()
        self._lock = threading.Lock()
        self._pool: Dict[str, ReassemblyEntry] = {}

    def __contains__(self, message_id: str) -> bool:
        with self._lock:
            return message_id in self._pool

    def pending(self) -> int:
        with self._lock:
            return len(self._pool)

    def pending_ids(self) -> List[str]:
        with self._lock:
            return list(self._pool)

    def _check_bounds(self, header: ChunkHeader) -> None:
        if header.seq_total == 0:
            raise InvalidChunkedMessage("Invalid chunked message (seq_total=0)")
        if header.seq_total > self._max_chunks:
            raise InvalidChunkedMessage(
                f"Invalid chunked message (seq_total={header.seq_total} exceeds {self._max_chunks})"
            )
        if header.seq_number >= header.seq_total:
            raise InvalidChunkedMessage(
                f"Invalid chunked message (seq_number={header.seq_number}, "
                f"seq_total={header.seq_total})"
            )

    def handle_chunk(self, datagram: bytes) -> bytes | None:
        header = ChunkHeader.from_bytes(datagram)
        self._check_bounds(header)
        message_id = header.key
        self._logger.log_event(
            "chunk_received",
            {
                "message_id": message_id,
                "seq_number": header.seq_number,
                "seq_total": header.seq_total,
            },
        )
        with self._lock:
            entry = self._pool.get(message_id)
            if entry is None:
                entry = ReassemblyEntry(total=header.seq_total, created_ms=self._clock.now_ms())
                self._pool[message_id] = entry
            elif entry.total != header.seq_total:
                raise InconsistentChunk(
                    f"Chunk for message {message_id} declares seq_total={header.seq_total}, "
                    f"expected {entry.total}"
                )
            if not entry.add(header.seq_number, header.payload) or not entry.complete:
                return None
            del self._pool[message_id]
        self._logger.log_event("chunk_complete", {"message_id": message_id, "chunks": entry.total})
        return entry.join()

    def evict_expired(self, timeout_ms: int) -> List[Tuple[str, int]]:
        now = self._clock.now_ms()
        evicted = []
        with self._lock:
            for message_id, entry in list(self._pool.items()):
                age_ms = now - entry.created_ms
                if age_ms > timeout_ms:
                    del self._pool[message_id]
                    evicted.append((message_id, age_ms))
        return evicted
