from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from .client import ClientSession
from .errors import NetworkTimeout, ServerError
from .net import Impairment, UdpEndpoint
from .server import Server


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    calls: int
    succeeded: int
    server_errors: int
    timeouts: int
    duration_s: float
    calls_per_s: float


def run_benchmark(
    *,
    calls: int,
    loss_rate: float = 0.0,
    delay_ms: int = 0,
    timeout_s: float = 0.25,
) -> BenchmarkResult:
    """Alternate multiply/divide calls against an in-process loopback server."""
    impair = Impairment(loss_rate=loss_rate, delay_ms=delay_ms)

    server_ep = UdpEndpoint.listening("127.0.0.1", 0, impairment=impair)
    host, port = server_ep.local_address
    server = Server(server_ep, receive_timeout=0.1)
    stop = threading.Event()

    t = threading.Thread(target=server.serve_forever, args=(stop,), daemon=True)
    t.start()

    succeeded = server_errors = timeouts = 0
    start = time.perf_counter()
    try:
        with ClientSession(host, port, timeout_s=timeout_s, impairment=impair) as session:
            for i in range(calls):
                try:
                    if i % 2 == 0:
                        session.multiply(i, 3)
                    else:
                        # every tenth divide hits the server's error path
                        session.divide(i, 0 if i % 20 == 1 else 2)
                except NetworkTimeout:
                    timeouts += 1
                except ServerError:
                    server_errors += 1
                else:
                    succeeded += 1
    finally:
        stop.set()
        t.join(timeout=5.0)
        server_ep.close()

    duration_s = max(0.001, time.perf_counter() - start)
    return BenchmarkResult(
        calls=calls,
        succeeded=succeeded,
        server_errors=server_errors,
        timeouts=timeouts,
        duration_s=duration_s,
        calls_per_s=calls / duration_s,
    )
