from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from typing import Any, Dict

from gelf_manager.codecs.base import Record
from gelf_manager.codecs.decompressor import Decompressor
from gelf_manager.config.managerspec import ManagerSpec
from gelf_manager.protocol.errors import (
    DecompressionFailed,
    GelfError,
    InvalidMessage,
    UnknownMessageType,
)
from gelf_manager.protocol.types import COMPRESSED_TYPES, MessageType, classify, read_marker
from gelf_manager.runtime.logging import NullLogger
from gelf_manager.runtime.reassembler import ChunkReassembler
from gelf_manager.runtime.scheduler import Clock, IEventLogger, Reaper, RealClock
from gelf_manager.runtime.sink import IEventSink


def _unexpected_failure(
    exc: Exception, reason: str = "decompression failed"
) -> DecompressionFailed:
    error = DecompressionFailed(f"{reason}: {type(exc).__name__}: {exc}")
    error.__cause__ = exc
    return error


class GelfManager:
    """Turn raw GELF UDP datagrams into decoded records.

    Example::

        sink = MemorySink()
        with GelfManager(sink) as manager:
            manager.feed(datagram)

    ``feed`` never raises for bad input; every failure is handed to
    ``sink.on_error`` and the next datagram is processed normally. With an
    ``executor`` the decompression step runs there and records may reach the
    sink out of arrival order.
    """

    def __init__(
        self,
        sink: IEventSink,
        spec: ManagerSpec | None = None,
        clock: Clock | None = None,
        logger: IEventLogger | None = None,
        executor: Executor | None = None,
        start_reaper: bool = True,
    ) -> None:
        self._spec = spec or ManagerSpec()
        self._spec.validate()
        self._sink = sink
        self._clock = clock or RealClock()
        self._logger = logger if (logger is not None and self._spec.debug) else NullLogger()
        self._executor = executor
        self._decompressor = Decompressor()
        self._reassembler = ChunkReassembler(
            clock=self._clock, max_chunks=self._spec.max_chunks, logger=self._logger
        )
        self._reaper = Reaper(
            self._reassembler,
            chunk_timeout_ms=self._spec.chunk_timeout_ms,
            gc_timeout_ms=self._spec.gc_timeout_ms,
            logger=self._logger,
        )
        self._stats_lock = threading.Lock()
        self._received = 0
        self._decoded = 0
        self._errors = 0
        if start_reaper:
            self._reaper.start()

    @property
    def spec(self) -> ManagerSpec:
        return self._spec

    @property
    def reassembler(self) -> ChunkReassembler:
        return self._reassembler

    @property
    def reaper(self) -> Reaper:
        return self._reaper

    def start(self) -> None:
        self._reaper.start()

    def close(self) -> None:
        self._reaper.stop()

    def __enter__(self) -> "GelfManager":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def feed(self, datagram: bytes) -> None:
        with self._stats_lock:
            self._received += 1
        try:
            self._dispatch(datagram)
        except GelfError as exc:
            self._error(exc)

    def _dispatch(self, datagram: bytes) -> None:
        if not isinstance(datagram, (bytes, bytearray, memoryview)):
            raise InvalidMessage("Invalid message")
        datagram = bytes(datagram)
        if len(datagram) < 2:
            raise InvalidMessage("Invalid message")
        message_type = classify(datagram)
        if message_type in COMPRESSED_TYPES:
            self._uncompress(datagram)
        elif message_type is MessageType.CHUNKED:
            payload = self._reassembler.handle_chunk(datagram)
            if payload is not None:
                self._uncompress(payload)
        else:
            raise UnknownMessageType(read_marker(datagram))

    def _uncompress(self, data: bytes) -> None:
        if self._executor is None:
            try:
                record = self._decompressor.uncompress(data)
            except GelfError as exc:
                self._error(exc)
                return
            except Exception as exc:
                self._error(_unexpected_failure(exc))
                return
            self._emit(record)
            return
        try:
            future = self._executor.submit(self._decompressor.uncompress, data)
        except RuntimeError as exc:
            self._error(_unexpected_failure(exc, "could not schedule decompression"))
            return
        future.add_done_callback(self._deliver)

    def _deliver(self, future: Future) -> None:
        try:
            record = future.result()
        except GelfError as exc:
            self._error(exc)
            return
        except Exception as exc:
            self._error(_unexpected_failure(exc))
            return
        self._emit(record)

    def _emit(self, record: Record) -> None:
        with self._stats_lock:
            self._decoded += 1
        self._sink.on_message(record)

    def _error(self, error: GelfError) -> None:
        with self._stats_lock:
            self._errors += 1
        self._logger.log_event("decode_failed", {"kind": error.kind, "reason": str(error)})
        self._sink.on_error(error)

    def sweep(self) -> list[str]:
        return self._reaper.sweep()

    def stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            return {
                "received": self._received,
                "decoded": self._decoded,
                "errors": self._errors,
                "evicted": self._reaper.evicted_count,
                "pending": self._reassembler.pending(),
            }
