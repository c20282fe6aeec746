from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Iterable, Sequence

from .constants import (
    ERR_FUNC_EXEC,
    ERR_GENERAL,
    ERR_INVALID_MODE,
    ERR_INVALID_TYPE,
    ERR_NO_SUCH_FUNCTION,
    ERROR,
    FID_DIVIDE,
    FID_MULTIPLY,
    MODE_CLIENT,
    MODE_SERVER,
    OPERAND_COUNT,
    REQUEST,
    RESPONSE,
)
from .errors import InvalidArgument


class PacketKind(enum.IntEnum):
    REQUEST = REQUEST
    RESPONSE = RESPONSE
    ERROR = ERROR


class Mode(enum.IntEnum):
    CLIENT = MODE_CLIENT
    SERVER = MODE_SERVER


class FunctionId(enum.IntEnum):
    MULTIPLY = FID_MULTIPLY
    DIVIDE = FID_DIVIDE


class ErrorCode(enum.IntEnum):
    GENERAL_ERROR = ERR_GENERAL
    INVALID_TYPE = ERR_INVALID_TYPE
    INVALID_MODE = ERR_INVALID_MODE
    FUNC_EXEC_ERROR = ERR_FUNC_EXEC
    NO_SUCH_FUNCTION = ERR_NO_SUCH_FUNCTION


@dataclass(frozen=True, slots=True)
class Field:
    """One named slot of the wire layout: ``count`` consecutive big-endian words."""

    name: str
    fmt: str = "I"
    count: int = 1


PACKET_SCHEMA: tuple[Field, ...] = (
    Field("kind"),
    Field("mode"),
    Field("function_id"),
    Field("operands", count=OPERAND_COUNT),
)

PACKET_STRUCT = struct.Struct("!" + "".join(f"{f.count}{f.fmt}" for f in PACKET_SCHEMA))
PACKET_SIZE = PACKET_STRUCT.size


def _coerce(enum_cls: type[enum.IntEnum], value: int) -> int:
    # unknown values stay plain ints so the server can still reject them
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _flatten(packet: "Packet") -> list[int]:
    values: list[int] = []
    for f in PACKET_SCHEMA:
        v = getattr(packet, f.name)
        if f.count == 1:
            values.append(v)
        else:
            values.extend(v)
    return values


def _unflatten(values: Sequence[int]) -> dict[str, object]:
    fields: dict[str, object] = {}
    pos = 0
    for f in PACKET_SCHEMA:
        if f.count == 1:
            fields[f.name] = values[pos]
        else:
            fields[f.name] = tuple(values[pos : pos + f.count])
        pos += f.count
    return fields


@dataclass(frozen=True, slots=True)
class Packet:
    kind: int
    mode: int
    function_id: int
    operands: tuple[int, ...] = (0,) * OPERAND_COUNT

    def __post_init__(self) -> None:
        operands = tuple(self.operands)
        if len(operands) != OPERAND_COUNT:
            raise InvalidArgument(f"expected {OPERAND_COUNT} operands, got {len(operands)}")
        object.__setattr__(self, "operands", operands)
        object.__setattr__(self, "kind", _coerce(PacketKind, self.kind))
        object.__setattr__(self, "mode", _coerce(Mode, self.mode))

    @property
    def is_request(self) -> bool:
        return self.kind == PacketKind.REQUEST

    @property
    def is_response(self) -> bool:
        return self.kind == PacketKind.RESPONSE

    @property
    def is_error(self) -> bool:
        return self.kind == PacketKind.ERROR

    @property
    def error_code(self) -> int | None:
        if not self.is_error:
            return None
        return _coerce(ErrorCode, self.operands[0])

    def to_bytes(self) -> bytes:
        buf = bytearray(PACKET_SIZE)
        self.pack_into(buf)
        return bytes(buf)

    def pack_into(self, buffer: bytearray | memoryview, offset: int = 0) -> None:
        if offset < 0 or len(buffer) - offset < PACKET_SIZE:
            raise InvalidArgument(
                f"buffer too small: need {PACKET_SIZE} bytes, have {max(0, len(buffer) - offset)}"
            )
        try:
            PACKET_STRUCT.pack_into(buffer, offset, *_flatten(self))
        except struct.error as exc:
            raise InvalidArgument(f"field out of range: {exc}") from exc

    @staticmethod
    def from_bytes(raw: bytes | bytearray | memoryview) -> "Packet":
        if len(raw) < PACKET_SIZE:
            raise InvalidArgument(f"datagram too small to be a packet: {len(raw)} < {PACKET_SIZE}")
        return Packet(**_unflatten(PACKET_STRUCT.unpack_from(raw)))  # type: ignore[arg-type]

    @staticmethod
    def request(function_id: int, operands: Iterable[int]) -> "Packet":
        return Packet(
            kind=PacketKind.REQUEST,
            mode=Mode.CLIENT,
            function_id=function_id,
            operands=tuple(operands),
        )

    @staticmethod
    def response(function_id: int, operands: Iterable[int]) -> "Packet":
        return Packet(
            kind=PacketKind.RESPONSE,
            mode=Mode.SERVER,
            function_id=function_id,
            operands=tuple(operands),
        )

    @staticmethod
    def error(code: int, function_id: int = 0) -> "Packet":
        return Packet(
            kind=PacketKind.ERROR,
            mode=Mode.SERVER,
            function_id=function_id,
            operands=(code,) + (0,) * (OPERAND_COUNT - 1),
        )
