from gelf_manager.config import ManagerSpec
from gelf_manager.protocol import (
    DecompressionFailed,
    GelfError,
    InconsistentChunk,
    InvalidChunkedMessage,
    InvalidCompressionType,
    InvalidMessage,
    MalformedRecord,
    UnknownMessageType,
)
from gelf_manager.runtime import CallbackSink, GelfManager, IEventSink, MemorySink

__all__ = [
    "GelfManager",
    "ManagerSpec",
    "IEventSink",
    "CallbackSink",
    "MemorySink",
    "GelfError",
    "InvalidMessage",
    "UnknownMessageType",
    "InvalidCompressionType",
    "DecompressionFailed",
    "MalformedRecord",
    "InvalidChunkedMessage",
    "InconsistentChunk",
]
