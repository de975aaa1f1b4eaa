from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict

from gelf_manager.runtime.scheduler import Clock, RealClock


class NullLogger:
    def log_event(self, event: str, fields: Dict[str, Any]) -> None:
        return None

    def close(self) -> None:
        return None


class JsonlLogger:
    def __init__(
        self,
        out_dir: str | Path,
        run_id: str,
        clock: Clock | None = None,
    ) -> None:
        self._dir = Path(out_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._path = self._dir / f"{run_id}_gelf.jsonl"
        self._clock = clock or RealClock()
        self._run_id = run_id
        self._lock = threading.Lock()
        self._fh = self._path.open("a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def _base_event(self, event: str) -> Dict[str, Any]:
        return {
            "ts_ms": self._clock.now_ms(),
            "run_id": self._run_id,
            "event": event,
        }

    def log_event(self, event: str, fields: Dict[str, Any]) -> None:
        payload = self._base_event(event)
        payload.update(fields)
        self._write(payload)

    def _write(self, payload: Dict[str, Any]) -> None:
        line = json.dumps(payload, ensure_ascii=True) + "\n"
        # Reaper thread and decompression callbacks log concurrently.
        with self._lock:
            self._fh.write(line)
            self._fh.flush()

    def close(self) -> None:
        with self._lock:
            self._fh.close()
