from __future__ import annotations

import socket

from gelf_manager.transport.base import IDatagramSource

GELF_UDP_PORT = 12201
MAX_DATAGRAM_BYTES = 65535


class UdpDatagramSource(IDatagramSource):
    def __init__(self, host: str = "0.0.0.0", port: int = GELF_UDP_PORT) -> None:
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind((host, port))
        except OSError:
            self._sock.close()
            raise

    @property
    def address(self) -> tuple[str, int]:
        return self._sock.getsockname()

    def recv(self, timeout_ms: int) -> bytes | None:
        self._sock.settimeout(max(0, timeout_ms) / 1000.0)
        try:
            data, _ = self._sock.recvfrom(MAX_DATAGRAM_BYTES)
        except (socket.timeout, BlockingIOError):
            return None
        return data

    def close(self) -> None:
        self._sock.close()


class UdpDatagramSender:
    def __init__(self, host: str = "127.0.0.1", port: int = GELF_UDP_PORT) -> None:
        self._peer = (host, port)
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def send(self, datagram: bytes) -> None:
        self._sock.sendto(datagram, self._peer)

    def close(self) -> None:
        self._sock.close()
