from __future__ import annotations

import threading

import pytest

from rcalc.net import UdpEndpoint
from rcalc.server import Server


class RecordingIndicator:
    def __init__(self):
        self.seen: list[str] = []

    def notify(self, ch: str) -> None:
        self.seen.append(ch)

    def close(self) -> None:
        pass


@pytest.fixture
def indicator() -> RecordingIndicator:
    return RecordingIndicator()


@pytest.fixture
def endpoint():
    ep = UdpEndpoint.listening("127.0.0.1", 0)
    try:
        yield ep
    finally:
        ep.close()


@pytest.fixture
def server(indicator):
    """A loopback server answering in a background thread."""
    ep = UdpEndpoint.listening("127.0.0.1", 0)
    srv = Server(ep, indicator=indicator, receive_timeout=0.05)
    stop = threading.Event()
    t = threading.Thread(target=srv.serve_forever, args=(stop,), daemon=True)
    t.start()
    try:
        yield srv
    finally:
        stop.set()
        t.join(timeout=2.0)
        ep.close()
