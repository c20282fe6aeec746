from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Mapping

from .constants import (
    SERVER_TIMEOUT_S,
    STATUS_DIVIDE,
    STATUS_DIVIDE_ERROR,
    STATUS_IDLE,
    STATUS_MULTIPLY,
    STATUS_NO_SUCH_FUNCTION,
    U32_MAX,
)
from .errors import DomainError, InvalidArgument, NetworkTimeout
from .net import UdpEndpoint
from .packet import ErrorCode, FunctionId, Mode, Packet, PacketKind
from .status import NullIndicator, StatusIndicator

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Operation:
    name: str
    func: Callable[[int, int], int]
    symbol: str
    done_status: str
    error_status: str | None = None


def multiply(a: int, b: int) -> int:
    return (a * b) & U32_MAX


def divide(a: int, b: int) -> int:
    if b == 0:
        raise DomainError("division by zero")
    return a // b


OperationTable = Mapping[int, Operation]


def default_table() -> dict[int, Operation]:
    return {
        FunctionId.MULTIPLY: Operation("multiply", multiply, "*", STATUS_MULTIPLY),
        FunctionId.DIVIDE: Operation("divide", divide, "/", STATUS_DIVIDE, STATUS_DIVIDE_ERROR),
    }


@dataclass(slots=True)
class Server:
    udp: UdpEndpoint
    table: OperationTable = field(default_factory=default_table)
    indicator: StatusIndicator = field(default_factory=NullIndicator)
    receive_timeout: float | None = SERVER_TIMEOUT_S

    def _notify(self, ch: str) -> None:
        try:
            self.indicator.notify(ch)
        except Exception:
            log.exception("status indicator failed")

    def _execute(self, request: Packet) -> Packet:
        op = self.table.get(request.function_id)
        if op is None:
            log.warning("no such function: %d", request.function_id)
            self._notify(STATUS_NO_SUCH_FUNCTION)
            return Packet.error(ErrorCode.NO_SUCH_FUNCTION, request.function_id)

        a, b = request.operands[0], request.operands[1]
        log.info("calculating %d %s %d", a, op.symbol, b)
        try:
            result = op.func(a, b)
            if not isinstance(result, int) or not 0 <= result <= U32_MAX:
                raise DomainError(f"result does not fit in 32 bits: {result!r}")
        except DomainError as exc:
            log.warning("%s failed: %s", op.name, exc)
            if op.error_status is not None:
                self._notify(op.error_status)
            return Packet.error(ErrorCode.FUNC_EXEC_ERROR, request.function_id)

        self._notify(op.done_status)
        return Packet.response(request.function_id, (result,) + request.operands[1:])

    def handle(self, raw: bytes) -> Packet:
        """Validate one datagram and build the reply for it."""
        try:
            request = Packet.from_bytes(raw)
        except InvalidArgument as exc:
            log.warning("undecodable datagram: %s", exc)
            return Packet.error(ErrorCode.GENERAL_ERROR)

        if request.kind != PacketKind.REQUEST:
            log.warning("rejecting packet of kind %d", request.kind)
            return Packet.error(ErrorCode.INVALID_TYPE, request.function_id)
        if request.mode != Mode.CLIENT:
            log.warning("rejecting packet of mode %d", request.mode)
            return Packet.error(ErrorCode.INVALID_MODE, request.function_id)

        return self._execute(request)

    def serve_once(self) -> bool:
        """Run one receive/reply cycle. Returns False if the receive timed out."""
        try:
            raw, addr = self.udp.recvfrom(self.receive_timeout)
        except NetworkTimeout:
            log.info("no request within %ss; still listening", self.receive_timeout)
            return False

        reply = self.handle(raw)
        try:
            self.udp.sendto(reply.to_bytes(), addr)
        except OSError as exc:
            log.warning("cannot reply to %s: %s", addr, exc)
        return True

    def serve_forever(self, stop: threading.Event | None = None) -> None:
        log.info("serving on %s:%d", *self.udp.local_address)
        self._notify(STATUS_IDLE)
        while stop is None or not stop.is_set():
            self.serve_once()
