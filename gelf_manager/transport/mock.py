from __future__ import annotations

import random
from collections import deque
from typing import Deque, List

from gelf_manager.transport.base import IDatagramSource


class MockTransport(IDatagramSource):
    """In-memory datagram queue with optional loss and reordering."""

    def __init__(
        self,
        drop_pattern: List[bool] | None = None,
        reorder: bool = False,
        seed: int = 0,
    ) -> None:
        self._queue: Deque[bytes] = deque()
        self._drop_pattern = drop_pattern
        self._reorder = reorder
        self._rng = random.Random(seed)
        self._counter = 0
        self._closed = False
        self.dropped = 0

    def _should_drop(self) -> bool:
        if not self._drop_pattern:
            return False
        drop = self._drop_pattern[self._counter % len(self._drop_pattern)]
        self._counter += 1
        return drop

    def send(self, datagram: bytes) -> None:
        if self._closed:
            raise RuntimeError("transport is closed")
        if self._should_drop():
            self.dropped += 1
            return
        if self._reorder and self._queue:
            self._queue.insert(self._rng.randrange(len(self._queue) + 1), datagram)
        else:
            self._queue.append(datagram)

    def recv(self, timeout_ms: int) -> bytes | None:
        if self._closed or not self._queue:
            return None
        return self._queue.popleft()

    def pending(self) -> int:
        return len(self._queue)

    def close(self) -> None:
        self._closed = True
        self._queue.clear()
