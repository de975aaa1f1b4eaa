from __future__ import annotations

import gzip
import zlib
from typing import Any, Mapping

from gelf_manager.codecs.base import Record, encode_record, parse_record
from gelf_manager.protocol.errors import DecompressionFailed


class GzipCodec:
    codec_id = "gzip"

    def __init__(self, level: int = 9) -> None:
        if level < 0 or level > 9:
            raise ValueError("gzip level must be 0..9")
        self._level = level

    def encode(self, record: Mapping[str, Any]) -> bytes:
        return gzip.compress(encode_record(record), compresslevel=self._level)

    def decode(self, payload: bytes) -> Record:
        try:
            raw = gzip.decompress(payload)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecompressionFailed(f"gzip payload could not be decompressed: {exc}") from exc
        return parse_record(raw)
