from gelf_manager.protocol.chunk import (
    CHUNK_HEADER_BYTES,
    ChunkHeader,
    make_chunks,
    message_key,
)
from gelf_manager.protocol.errors import (
    DecompressionFailed,
    GelfError,
    InconsistentChunk,
    InvalidChunkedMessage,
    InvalidCompressionType,
    InvalidMessage,
    MalformedRecord,
    UnknownMessageType,
)
from gelf_manager.protocol.types import MessageType, classify, read_marker

__all__ = [
    "CHUNK_HEADER_BYTES",
    "ChunkHeader",
    "make_chunks",
    "message_key",
    "GelfError",
    "InvalidMessage",
    "UnknownMessageType",
    "InvalidCompressionType",
    "DecompressionFailed",
    "MalformedRecord",
    "InvalidChunkedMessage",
    "InconsistentChunk",
    "MessageType",
    "classify",
    "read_marker",
]
