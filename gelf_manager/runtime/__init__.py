from gelf_manager.runtime.logging import JsonlLogger, NullLogger
from gelf_manager.runtime.manager import GelfManager
from gelf_manager.runtime.reassembler import ChunkReassembler, ReassemblyEntry
from gelf_manager.runtime.scheduler import FakeClock, RealClock, Reaper
from gelf_manager.runtime.sink import CallbackSink, IEventSink, MemorySink

__all__ = [
    "GelfManager",
    "ChunkReassembler",
    "ReassemblyEntry",
    "Reaper",
    "RealClock",
    "FakeClock",
    "JsonlLogger",
    "NullLogger",
    "IEventSink",
    "CallbackSink",
    "MemorySink",
]
