from __future__ import annotations

import zlib
from typing import Any, Mapping

from gelf_manager.codecs.base import Record, encode_record, parse_record
from gelf_manager.protocol.errors import DecompressionFailed


class ZlibCodec:
    """zlib at the default level; other levels change the 0x789c header."""

    codec_id = "zlib"

    def encode(self, record: Mapping[str, Any]) -> bytes:
        return zlib.compress(encode_record(record))

    def decode(self, payload: bytes) -> Record:
        try:
            raw = zlib.decompress(payload)
        except zlib.error as exc:
            raise DecompressionFailed(f"zlib payload could not be decompressed: {exc}") from exc
        return parse_record(raw)
