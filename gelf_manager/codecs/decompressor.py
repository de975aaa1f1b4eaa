from __future__ import annotations

from typing import Dict

from gelf_manager.codecs.base import ICodec, Record
from gelf_manager.codecs.gzip_codec import GzipCodec
from gelf_manager.codecs.zlib_codec import ZlibCodec
from gelf_manager.protocol.errors import InvalidCompressionType
from gelf_manager.protocol.types import MessageType, read_marker


class Decompressor:
    """Inflate a complete gzip or zlib GELF payload into a record.

    Reached both from single datagrams and from reassembled chunk output, so
    it checks the marker on its own instead of trusting the caller.
    """

    def __init__(self) -> None:
        self._codecs: Dict[int, ICodec] = {
            MessageType.GZIP: GzipCodec(),
            MessageType.ZLIB: ZlibCodec(),
        }

    def uncompress(self, data: bytes) -> Record:
        marker = read_marker(data)
        codec = self._codecs.get(marker) if marker is not None else None
        if codec is None:
            raise InvalidCompressionType(marker)
        return codec.decode(data)
