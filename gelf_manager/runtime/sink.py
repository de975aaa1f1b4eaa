from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from gelf_manager.protocol.errors import GelfError


class IEventSink(ABC):
    @abstractmethod
    def on_message(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_error(self, error: GelfError) -> None:
        raise NotImplementedError


class CallbackSink(IEventSink):
    def __init__(
        self,
        on_message: Callable[[Dict[str, Any]], None],
        on_error: Callable[[GelfError], None] | None = None,
    ) -> None:
        self._on_message = on_message
        self._on_error = on_error

    def on_message(self, record: Dict[str, Any]) -> None:
        self._on_message(record)

    def on_error(self, error: GelfError) -> None:
        if self._on_error is not None:
            self._on_error(error)


class MemorySink(IEventSink):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.records: List[Dict[str, Any]] = []
        self.errors: List[GelfError] = []

    def on_message(self, record: Dict[str, Any]) -> None:
        with self._lock:
            self.records.append(record)

    def on_error(self, error: GelfError) -> None:
        with self._lock:
            self.errors.append(error)

    def error_kinds(self) -> List[str]:
        with self._lock:
            return [error.kind for error in self.errors]
