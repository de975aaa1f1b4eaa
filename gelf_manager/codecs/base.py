from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Protocol

from gelf_manager.protocol.errors import MalformedRecord

Record = Dict[str, Any]


class ICodec(Protocol):
    codec_id: str

    def encode(self, record: Mapping[str, Any]) -> bytes:
        ...

    def decode(self, payload: bytes) -> Record:
        ...


def encode_record(record: Mapping[str, Any]) -> bytes:
    return json.dumps(dict(record), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def parse_record(raw: bytes) -> Record:
    try:
        record = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedRecord(f"payload is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedRecord("payload JSON is nested too deeply") from exc
    if not isinstance(record, dict):
        raise MalformedRecord(f"payload is JSON {type(record).__name__}, expected object")
    return record
