from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict

from . import __version__
from .bench import run_benchmark
from .client import ClientSession
from .constants import (
    CLIENT_TIMEOUT_S,
    DEFAULT_PORT,
    DEFAULT_SERVER_HOST,
    DEFAULT_STATUS_DEVICE,
    SERVER_TIMEOUT_S,
)
from .errors import RcalcError
from .net import Impairment, UdpEndpoint
from .server import Server
from .status import DeviceIndicator, NullIndicator, StatusIndicator

log = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> int:
    log.info("rcalc server, version %s", __version__)
    indicator: StatusIndicator = NullIndicator()
    if args.status_device:
        device = DeviceIndicator(args.status_device)
        if device.open():
            indicator = device

    try:
        udp = UdpEndpoint.listening(
            args.listen_host,
            args.port,
            impairment=Impairment(args.loss_rate, args.delay_ms),
        )
    except RcalcError as exc:
        log.error("%s", exc)
        indicator.close()
        return 1

    try:
        Server(udp, indicator=indicator, receive_timeout=args.timeout_s).serve_forever()
    except KeyboardInterrupt:
        log.info("interrupted; shutting down")
    finally:
        udp.close()
        indicator.close()
    return 0


def cmd_call(args: argparse.Namespace) -> int:
    session = ClientSession(
        remote_port=args.port,
        timeout_s=args.timeout_s,
        impairment=Impairment(args.loss_rate, args.delay_ms),
    )
    try:
        session.set_remote_address(args.host)
        with session:
            if args.func_name == "m":
                result = session.multiply(args.op1, args.op2)
            else:
                result = session.divide(args.op1, args.op2)
    except RcalcError as exc:
        log.debug("call failed: %s", exc)
        payload = {"error": exc.status, "message": str(exc)}
        print(json.dumps(payload, indent=2) if args.json else f"Got an error: {exc.status}")
        return 1

    payload = {"result": result}
    print(json.dumps(payload, indent=2) if args.json else f"Result: {result}")
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    r = run_benchmark(
        calls=args.calls,
        loss_rate=args.loss_rate,
        delay_ms=args.delay_ms,
        timeout_s=args.timeout_s,
    )
    payload = {"role": "bench", **asdict(r)}
    print(json.dumps(payload, indent=2) if args.json else payload)
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="rcalc", description="Remote multiply/divide over UDP.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(x: argparse.ArgumentParser, timeout_s: float) -> None:
        x.add_argument("--port", type=int, default=DEFAULT_PORT)
        x.add_argument("--timeout-s", type=float, default=timeout_s)
        x.add_argument("--loss-rate", type=float, default=0.0)
        x.add_argument("--delay-ms", type=int, default=0)
        x.add_argument("--json", action="store_true")

    serve = sub.add_parser("serve", help="answer requests until interrupted")
    add_common(serve, SERVER_TIMEOUT_S)
    serve.add_argument("--listen-host", default="0.0.0.0")
    serve.add_argument("--status-device", default=None, help=f"e.g. {DEFAULT_STATUS_DEVICE}")
    serve.set_defaults(func=cmd_serve)

    call = sub.add_parser("call", help="send one request and print the result")
    add_common(call, CLIENT_TIMEOUT_S)
    call.add_argument("op1", type=int)
    call.add_argument("op2", type=int)
    call.add_argument("func_name", metavar="func", choices=["m", "d"], help="m = multiply, d = divide")
    call.add_argument("--host", default=DEFAULT_SERVER_HOST)
    call.set_defaults(func=cmd_call)

    bench = sub.add_parser("bench", help="loopback benchmark")
    add_common(bench, 0.25)
    bench.add_argument("--calls", type=int, default=1000)
    bench.set_defaults(func=cmd_bench)

    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
