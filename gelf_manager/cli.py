from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict

from gelf_manager.codecs import create_codec
from gelf_manager.config import ManagerSpec, load_spec
from gelf_manager.protocol.chunk import make_chunks
from gelf_manager.protocol.errors import GelfError
from gelf_manager.runtime.logging import JsonlLogger
from gelf_manager.runtime.manager import GelfManager
from gelf_manager.runtime.scheduler import RealClock
from gelf_manager.runtime.sink import CallbackSink
from gelf_manager.transport.base import pump
from gelf_manager.transport.udp import GELF_UDP_PORT, UdpDatagramSender, UdpDatagramSource

DEFAULT_CHUNK_SIZE = 1420


def _load_manager_spec(args: argparse.Namespace) -> ManagerSpec:
    spec = load_spec(args.config) if args.config else ManagerSpec()
    if args.debug and not spec.debug:
        data = spec.as_dict()
        data["debug"] = True
        spec = ManagerSpec.from_dict(data)
        spec.validate()
    return spec


def _print_record(record: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")
    sys.stdout.flush()


def _print_error(error: GelfError) -> None:
    sys.stderr.write(f"{error.kind}: {error}\n")
    sys.stderr.flush()


def _run_listen(args: argparse.Namespace) -> int:
    spec = _load_manager_spec(args)
    clock = RealClock()
    logger = None
    if spec.debug:
        logger = JsonlLogger(spec.log_dir or "logs", spec.run_id, clock=clock)
    source = UdpDatagramSource(host=args.host, port=args.port)
    manager = GelfManager(
        CallbackSink(_print_record, _print_error), spec=spec, clock=clock, logger=logger
    )
    try:
        pump(source, manager, max_datagrams=args.max_datagrams)
    except KeyboardInterrupt:
        pass
    finally:
        manager.close()
        source.close()
        if logger is not None:
            logger.close()
    return 0


def _read_record(args: argparse.Namespace) -> Dict[str, Any]:
    if args.record_file:
        text = Path(args.record_file).read_text(encoding="utf-8")
    elif args.record:
        text = args.record
    else:
        raise ValueError("--record or --record-file is required")
    record = json.loads(text)
    if not isinstance(record, dict):
        raise ValueError("record must be a JSON object")
    return record


def _run_send(args: argparse.Namespace) -> int:
    record = _read_record(args)
    payload = create_codec(args.codec).encode(record)
    if len(payload) <= args.chunk_size:
        datagrams = [payload]
    else:
        datagrams = make_chunks(os.urandom(8), payload, args.chunk_size)
    sender = UdpDatagramSender(host=args.host, port=args.port)
    try:
        for datagram in datagrams:
            sender.send(datagram)
    finally:
        sender.close()
    print(json.dumps({"datagrams": len(datagrams), "payload_bytes": len(payload)}))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="gelf-manager")
    sub = parser.add_subparsers(dest="cmd", required=True)

    listen = sub.add_parser("listen", help="decode GELF datagrams received over UDP")
    listen.add_argument("--host", default="0.0.0.0")
    listen.add_argument("--port", type=int, default=GELF_UDP_PORT)
    listen.add_argument("--config", help="JSON or YAML manager config")
    listen.add_argument("--debug", action="store_true")
    listen.add_argument("--max-datagrams", type=int)
    listen.set_defaults(func=_run_listen)

    send = sub.add_parser("send", help="compress, chunk and send one GELF record")
    send.add_argument("--host", default="127.0.0.1")
    send.add_argument("--port", type=int, default=GELF_UDP_PORT)
    send.add_argument("--record", help="record as a JSON object string")
    send.add_argument("--record-file")
    send.add_argument("--codec", choices=["gzip", "zlib"], default="gzip")
    send.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE)
    send.set_defaults(func=_run_send)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
