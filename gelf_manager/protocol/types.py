from __future__ import annotations

from enum import IntEnum


class MessageType(IntEnum):
    CHUNKED = 0x1E0F
    GZIP = 0x1F8B
    ZLIB = 0x789C


COMPRESSED_TYPES = frozenset({MessageType.GZIP, MessageType.ZLIB})


def read_marker(datagram: bytes) -> int | None:
    if len(datagram) < 2:
        return None
    return int.from_bytes(datagram[:2], "big")


def classify(datagram: bytes) -> MessageType | None:
    """Map the leading marker to a known type, or None if it is not one."""
    marker = read_marker(datagram)
    if marker is None:
        return None
    try:
        return MessageType(marker)
    except ValueError:
        return None
