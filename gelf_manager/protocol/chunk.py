from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import List

from gelf_manager.protocol.errors import InvalidChunkedMessage
from gelf_manager.protocol.types import MessageType

CHUNK_HEADER_BYTES = 12
MESSAGE_ID_BYTES = 8
MAX_SEQ_TOTAL = 255


@dataclass(frozen=True)
class ChunkHeader:
    message_id: bytes
    seq_number: int
    seq_total: int
    payload: bytes

    @property
    def key(self) -> str:
        return message_key(self.message_id)

    def to_bytes(self) -> bytes:
        if len(self.message_id) != MESSAGE_ID_BYTES:
            raise ValueError("message_id must be 8 bytes")
        if not (0 <= self.seq_number <= 255):
            raise ValueError("seq_number must be 0..255")
        if not (1 <= self.seq_total <= MAX_SEQ_TOTAL):
            raise ValueError("seq_total must be 1..255")
        return (
            MessageType.CHUNKED.to_bytes(2, "big")
            + self.message_id
            + bytes([self.seq_number, self.seq_total])
            + self.payload
        )

    @classmethod
    def from_bytes(cls, datagram: bytes) -> "ChunkHeader":
        if len(datagram) <= CHUNK_HEADER_BYTES:
            raise InvalidChunkedMessage("Invalid chunked message")
        return cls(
            message_id=bytes(datagram[2:10]),
            seq_number=datagram[10],
            seq_total=datagram[11],
            payload=bytes(datagram[CHUNK_HEADER_BYTES:]),
        )


def message_key(message_id: bytes) -> str:
    return base64.b64encode(message_id).decode("ascii")


def make_chunks(
    message_id: bytes,
    data: bytes,
    max_chunk_size: int,
    max_chunks: int = MAX_SEQ_TOTAL,
) -> List[bytes]:
    """Split an already-compressed GELF payload into chunk datagrams.

    ``max_chunk_size`` bounds the fragment payload, not the datagram; each
    datagram carries an extra 12 byte header.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")
    if not data:
        raise ValueError("data must be non-empty")
    total = (len(data) + max_chunk_size - 1) // max_chunk_size
    if total > max_chunks:
        raise ValueError(f"payload needs {total} chunks, limit is {max_chunks}")
    chunks = []
    for seq in range(total):
        segment = data[seq * max_chunk_size : (seq + 1) * max_chunk_size]
        header = ChunkHeader(
            message_id=message_id, seq_number=seq, seq_total=total, payload=segment
        )
        chunks.append(header.to_bytes())
    return chunks
