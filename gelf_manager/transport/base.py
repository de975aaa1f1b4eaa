from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class IDatagramSource(ABC):
    @abstractmethod
    def recv(self, timeout_ms: int) -> bytes | None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError


class IFeed(Protocol):
    def feed(self, datagram: bytes) -> None:
        ...


def pump(
    source: IDatagramSource,
    manager: IFeed,
    max_datagrams: int | None = None,
    timeout_ms: int = 200,
) -> int:
    """Feed datagrams from ``source`` into ``manager``.

    Stops after ``max_datagrams`` datagrams, or at the first receive timeout
    when ``max_datagrams`` is None and ``timeout_ms`` is 0.
    """
    if max_datagrams is not None and max_datagrams < 0:
        raise ValueError("max_datagrams must be >= 0")
    fed = 0
    while max_datagrams is None or fed < max_datagrams:
        datagram = source.recv(timeout_ms)
        if datagram is None:
            if timeout_ms <= 0:
                break
            continue
        manager.feed(datagram)
        fed += 1
    return fed
