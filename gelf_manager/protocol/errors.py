from __future__ import annotations


class GelfError(ValueError):
    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidMessage(GelfError):
    pass


class UnknownMessageType(GelfError):
    def __init__(self, marker: int) -> None:
        super().__init__(f"Unknown message type (0x{marker:x})")
        self.marker = marker


class InvalidCompressionType(GelfError):
    def __init__(self, marker: int | None) -> None:
        if marker is None:
            super().__init__("Invalid compression type (payload too short)")
        else:
            super().__init__(f"Invalid compression type (0x{marker:x})")
        self.marker = marker


class DecompressionFailed(GelfError):
    pass


class MalformedRecord(GelfError):
    pass


class InvalidChunkedMessage(GelfError):
    pass


class InconsistentChunk(InvalidChunkedMessage):
    pass
