from __future__ import annotations

import threading
import time
from typing import List, Protocol, Tuple


class Clock(Protocol):
    def now_ms(self) -> int:
        ...

    def sleep_ms(self, ms: int) -> None:
        ...


class RealClock:
    def now_ms(self) -> int:
        return int(time.monotonic() * 1000)

    def sleep_ms(self, ms: int) -> None:
        time.sleep(ms / 1000.0)


class FakeClock:
    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def sleep_ms(self, ms: int) -> None:
        self._now += max(0, int(ms))


class IExpiringPool(Protocol):
    def evict_expired(self, timeout_ms: int) -> List[Tuple[str, int]]:
        ...


class IEventLogger(Protocol):
    def log_event(self, event: str, fields: dict) -> None:
        ...


class Reaper:
    """Periodically drop reassembly entries that never completed.

    Each sweep is scheduled ``gc_timeout_ms`` after the previous one finished,
    so a slow sweep pushes the next one back instead of overlapping it.
    """

    def __init__(
        self,
        pool: IExpiringPool,
        chunk_timeout_ms: int,
        gc_timeout_ms: int,
        logger: IEventLogger,
    ) -> None:
        if chunk_timeout_ms <= 0:
            raise ValueError("chunk_timeout_ms must be > 0")
        if gc_timeout_ms <= 0:
            raise ValueError("gc_timeout_ms must be > 0")
        self._pool = pool
        self._chunk_timeout_ms = chunk_timeout_ms
        self._gc_timeout_ms = gc_timeout_ms
        self._logger = logger
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._counts_lock = threading.Lock()
        self._sweep_count = 0
        self._evicted_count = 0
        self._failed_sweeps = 0
        self.last_error: Exception | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def sweep_count(self) -> int:
        with self._counts_lock:
            return self._sweep_count

    @property
    def evicted_count(self) -> int:
        with self._counts_lock:
            return self._evicted_count

    @property
    def failed_sweeps(self) -> int:
        with self._counts_lock:
            return self._failed_sweeps

    def sweep(self) -> List[str]:
        evicted = self._pool.evict_expired(self._chunk_timeout_ms)
        # Entries are already gone from the pool; count them before logging can fail.
        with self._counts_lock:
            self._sweep_count += 1
            self._evicted_count += len(evicted)
        for message_id, age_ms in evicted:
            self._logger.log_event("chunk_timeout", {"message_id": message_id, "age_ms": age_ms})
        return [message_id for message_id, _ in evicted]

    def _run(self) -> None:
        while True:
            try:
                self.sweep()
            except Exception as exc:
                # Keep sweeping; a broken logger must not stop eviction.
                with self._counts_lock:
                    self._failed_sweeps += 1
                self.last_error = exc
            if self._stop.wait(self._gc_timeout_ms / 1000.0):
                break

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="gelf-reaper", daemon=True)
        self._thread.start()

    def stop(self, timeout_s: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout_s)
            self._thread = None
