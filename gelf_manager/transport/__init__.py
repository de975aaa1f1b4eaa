from gelf_manager.transport.base import IDatagramSource, pump
from gelf_manager.transport.mock import MockTransport
from gelf_manager.transport.udp import GELF_UDP_PORT, UdpDatagramSender, UdpDatagramSource

__all__ = [
    "IDatagramSource",
    "pump",
    "MockTransport",
    "GELF_UDP_PORT",
    "UdpDatagramSender",
    "UdpDatagramSource",
]
