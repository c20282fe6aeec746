from __future__ import annotations

import logging
import random
import socket
import time
from dataclasses import dataclass
from typing import Tuple

from .constants import RECV_BUFSIZE
from .errors import BindError, NetworkTimeout, SocketError
from .timeout import Deadline

log = logging.getLogger(__name__)

Address = Tuple[str, int]


@dataclass(frozen=True, slots=True)
class Impairment:
    """Simulated datagram loss and latency for loopback runs of ``rcalc bench``.

    Applied on both send and receive, so a lossy client sees lost requests
    and lost replies alike as ``NetworkTimeout``.
    """

    loss_rate: float = 0.0
    delay_ms: int = 0

    def should_drop(self) -> bool:
        return self.loss_rate > 0 and random.random() < self.loss_rate

    def sleep_if_needed(self) -> None:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)


class UdpEndpoint:
    def __init__(self, sock: socket.socket, impairment: Impairment | None = None):
        self.sock = sock
        self.impairment = impairment or Impairment()
        self.deadline = Deadline()

    @classmethod
    def listening(
        cls,
        host: str,
        port: int,
        impairment: Impairment | None = None,
    ) -> "UdpEndpoint":
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            raise SocketError(f"cannot create socket: {exc}") from exc
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            raise BindError(f"cannot bind {host}:{port}: {exc}") from exc
        return cls(sock, impairment)

    @classmethod
    def ephemeral(cls, impairment: Impairment | None = None) -> "UdpEndpoint":
        return cls.listening("0.0.0.0", 0, impairment=impairment)

    @property
    def local_address(self) -> Address:
        return self.sock.getsockname()

    def sendto(self, data: bytes, addr: Address) -> None:
        if self.impairment.should_drop():
            log.debug("dropped outbound %d bytes to %s", len(data), addr)
            return
        self.impairment.sleep_if_needed()
        self.sock.sendto(data, addr)

    def recvfrom(self, timeout: float | None = None, bufsize: int = RECV_BUFSIZE) -> Tuple[bytes, Address]:
        """Wait for one datagram; raise NetworkTimeout once ``timeout`` seconds pass."""
        self.deadline.reset()
        if timeout is not None:
            self.deadline.start(timeout)
        while True:
            remaining = self.deadline.remaining()
            if remaining is not None and remaining <= 0:
                self.deadline.expire()
                raise NetworkTimeout(f"no datagram within {timeout}s")
            self.sock.settimeout(remaining)
            try:
                data, addr = self.sock.recvfrom(bufsize)
            except socket.timeout as exc:
                self.deadline.expire()
                raise NetworkTimeout(f"no datagram within {timeout}s") from exc
            if self.impairment.should_drop():
                log.debug("dropped inbound %d bytes from %s", len(data), addr)
                continue
            self.impairment.sleep_if_needed()
            self.deadline.stop()
            return data, addr

    def close(self) -> None:
        self.sock.close()
