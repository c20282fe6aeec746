"""Client side of the protocol.

A ``ClientSession`` owns one UDP socket between ``open()`` and ``close()``.
It is not reentrant: replies are matched to requests purely by arrival order,
so a session must only ever have one transaction in flight.
"""
from __future__ import annotations

import enum
import logging
import socket
from dataclasses import dataclass, field
from typing import Sequence

from .constants import (
    CLIENT_TIMEOUT_S,
    DEFAULT_PORT,
    DEFAULT_SERVER_HOST,
    MAX_ADDRESS_LEN,
    OPERAND_COUNT,
    U32_MAX,
)
from .errors import (
    AddressLengthError,
    AlreadyOpenError,
    DecodeError,
    InvalidArgument,
    NotOpenError,
    ServerError,
    SocketError,
    UnknownServerReply,
)
from .net import Address, Impairment, UdpEndpoint
from .packet import FunctionId, Packet

log = logging.getLogger(__name__)


class SessionState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"


def _check_operand(value: int) -> int:
    # signed operands have no agreed meaning on the wire, so refuse them
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"operand must be an integer, got {value!r}")
    if not 0 <= value <= U32_MAX:
        raise InvalidArgument(f"operand out of range 0..{U32_MAX}: {value}")
    return value


@dataclass(slots=True)
class ClientSession:
    remote_host: str = DEFAULT_SERVER_HOST
    remote_port: int = DEFAULT_PORT
    timeout_s: float = CLIENT_TIMEOUT_S
    impairment: Impairment | None = None
    state: SessionState = field(default=SessionState.CLOSED, init=False)
    _udp: UdpEndpoint | None = field(default=None, init=False, repr=False)
    _remote: Address | None = field(default=None, init=False, repr=False)

    def set_remote_address(self, address: str) -> None:
        """Point the next ``open()`` at another server host."""
        if not address:
            raise AddressLengthError("remote address is empty")
        if len(address) > MAX_ADDRESS_LEN:
            raise AddressLengthError(f"remote address longer than {MAX_ADDRESS_LEN} characters")
        self.remote_host = address

    def open(self) -> None:
        if self.state is SessionState.OPEN:
            raise AlreadyOpenError("session already open")
        try:
            remote_ip = socket.gethostbyname(self.remote_host)
        except OSError as exc:
            raise SocketError(f"cannot resolve {self.remote_host}: {exc}") from exc
        self._udp = UdpEndpoint.ephemeral(self.impairment)
        self._remote = (remote_ip, self.remote_port)
        self.state = SessionState.OPEN
        log.debug("session open; local=%s remote=%s", self._udp.local_address, self._remote)

    def close(self) -> None:
        if self.state is not SessionState.OPEN or self._udp is None:
            raise NotOpenError("session is not open")
        self._udp.close()
        self._udp = None
        self._remote = None
        self.state = SessionState.CLOSED

    def __enter__(self) -> "ClientSession":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        if self.state is SessionState.OPEN:
            self.close()

    def call_function(self, function_id: int, operands: Sequence[int]) -> tuple[int, ...]:
        if self.state is not SessionState.OPEN or self._udp is None or self._remote is None:
            raise NotOpenError("session is not open")
        if len(operands) != OPERAND_COUNT:
            raise InvalidArgument(f"expected {OPERAND_COUNT} operands, got {len(operands)}")

        request = Packet.request(function_id, (_check_operand(x) for x in operands))
        self._udp.sendto(request.to_bytes(), self._remote)
        log.debug("sent function %d %s to %s", function_id, request.operands, self._remote)

        raw, _ = self._udp.recvfrom(self.timeout_s)

        try:
            reply = Packet.from_bytes(raw)
        except InvalidArgument as exc:
            raise DecodeError(f"undecodable reply: {exc}") from exc

        if reply.is_error:
            if not reply.operands[0]:
                raise UnknownServerReply("error packet without an error code")
            raise ServerError(reply.error_code)
        if reply.is_response:
            return reply.operands
        raise UnknownServerReply(f"unexpected reply kind {reply.kind}")

    def _binary(self, function_id: int, op1: int, op2: int) -> int:
        params = [op1, op2] + [0] * (OPERAND_COUNT - 2)
        return self.call_function(function_id, params)[0]

    def multiply(self, op1: int, op2: int) -> int:
        return self._binary(FunctionId.MULTIPLY, op1, op2)

    def divide(self, op1: int, op2: int) -> int:
        return self._binary(FunctionId.DIVIDE, op1, op2)
