from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

# camelCase keys accepted for configs written against the node gelf-manager.
_ALIASES = {
    "chunkTimeout": "chunk_timeout_ms",
    "gcTimeout": "gc_timeout_ms",
    "maxChunks": "max_chunks",
}


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"", "auto", "none", "null"}:
            return None
        if text in {"1", "true", "on", "yes"}:
            return True
        if text in {"0", "false", "off", "no"}:
            return False
    raise ValueError(f"invalid bool value: {value!r}")


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid {name} value: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"invalid {name} value: {value!r}")


@dataclass(frozen=True)
class ManagerSpec:
    debug: bool = False
    chunk_timeout_ms: int = 20000
    gc_timeout_ms: int = 10000
    max_chunks: int = 255
    log_dir: str | None = None
    run_id: str = "gelf"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerSpec":
        data = {_ALIASES.get(key, key): value for key, value in data.items()}
        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            raise ValueError(f"unknown manager keys: {', '.join(unknown)}")
        defaults = cls()
        log_dir = data.get("log_dir")
        return cls(
            debug=bool(_optional_bool(data.get("debug"))),
            chunk_timeout_ms=_int(
                data.get("chunk_timeout_ms", defaults.chunk_timeout_ms), "chunk_timeout_ms"
            ),
            gc_timeout_ms=_int(data.get("gc_timeout_ms", defaults.gc_timeout_ms), "gc_timeout_ms"),
            max_chunks=_int(data.get("max_chunks", defaults.max_chunks), "max_chunks"),
            log_dir=str(log_dir) if log_dir is not None else None,
            run_id=str(data.get("run_id", defaults.run_id)),
        )

    def validate(self) -> None:
        if not self.run_id:
            raise ValueError("run_id must be non-empty")
        if self.chunk_timeout_ms <= 0:
            raise ValueError("chunk_timeout_ms must be > 0")
        if self.gc_timeout_ms <= 0:
            raise ValueError("gc_timeout_ms must be > 0")
        if self.max_chunks <= 0 or self.max_chunks > 255:
            raise ValueError("max_chunks must be 1..255")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "debug": self.debug,
            "chunk_timeout_ms": self.chunk_timeout_ms,
            "gc_timeout_ms": self.gc_timeout_ms,
            "max_chunks": self.max_chunks,
            "log_dir": self.log_dir,
            "run_id": self.run_id,
        }


def _load_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        import yaml
    except ImportError as exc:
        raise RuntimeError("PyYAML is required to load YAML manager configs") from exc
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_spec(path: str | Path) -> ManagerSpec:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    if path.suffix.lower() in {".yaml", ".yml"}:
        data = _load_yaml(path)
    else:
        data = _load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"manager config must be a mapping: {path}")
    spec = ManagerSpec.from_dict(data)
    spec.validate()
    return spec


def save_spec(path: str | Path, spec: ManagerSpec) -> None:
    path = Path(path)
    data = spec.as_dict()
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise RuntimeError("PyYAML is required to write YAML manager configs") from exc
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
