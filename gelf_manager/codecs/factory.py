from __future__ import annotations

from typing import Any, Dict

from gelf_manager.codecs.base import ICodec
from gelf_manager.codecs.gzip_codec import GzipCodec
from gelf_manager.codecs.zlib_codec import ZlibCodec


def create_codec(codec_id: str, params: Dict[str, Any] | None = None) -> ICodec:
    params = params or {}
    name = codec_id.lower()
    if name == "gzip":
        return GzipCodec(level=int(params.get("level", 9)))
    if name == "zlib":
        return ZlibCodec()
    raise ValueError(f"unknown codec id: {codec_id}")
