from __future__ import annotations

import struct

import pytest

from rcalc.errors import InvalidArgument
from rcalc.packet import PACKET_SIZE, ErrorCode, FunctionId, Mode, Packet, PacketKind


def test_packet_size():
    assert PACKET_SIZE == 20


def test_roundtrip_request():
    p = Packet.request(FunctionId.MULTIPLY, (6, 7))
    q = Packet.from_bytes(p.to_bytes())
    assert q == p
    assert q.is_request
    assert q.mode is Mode.CLIENT


def test_roundtrip_error():
    e = Packet.error(ErrorCode.NO_SUCH_FUNCTION, function_id=9)
    q = Packet.from_bytes(e.to_bytes())
    assert q == e
    assert q.error_code is ErrorCode.NO_SUCH_FUNCTION
    assert q.function_id == 9


def test_roundtrip_extremes():
    p = Packet.response(0xFFFFFFFF, (0xFFFFFFFF, 0))
    assert Packet.from_bytes(p.to_bytes()) == p


def test_wire_layout_is_big_endian():
    raw = Packet.request(FunctionId.DIVIDE, (0x01020304, 5)).to_bytes()
    assert raw == bytes.fromhex(
        "00000001"  # kind
        "00000001"  # mode
        "00000002"  # function id
        "01020304"
        "00000005"
    )


def test_constructors_set_kind_and_mode():
    assert Packet.response(1, (42, 0)).kind is PacketKind.RESPONSE
    assert Packet.response(1, (42, 0)).mode is Mode.SERVER
    err = Packet.error(ErrorCode.FUNC_EXEC_ERROR)
    assert err.kind is PacketKind.ERROR
    assert err.mode is Mode.SERVER
    assert err.operands[0] == 4


def test_unknown_enum_values_survive_decode():
    raw = struct.pack("!5I", 99, 7, 1, 0, 0)
    p = Packet.from_bytes(raw)
    assert p.kind == 99
    assert not isinstance(p.kind, PacketKind)
    assert p.mode == 7
    assert p.to_bytes() == raw


def test_decode_too_short():
    raw = Packet.request(1, (1, 2)).to_bytes()
    with pytest.raises(InvalidArgument):
        Packet.from_bytes(raw[:-1])
    with pytest.raises(InvalidArgument):
        Packet.from_bytes(b"")


def test_decode_ignores_trailing_bytes():
    p = Packet.request(2, (20, 4))
    assert Packet.from_bytes(p.to_bytes() + b"\xff" * 8) == p


def test_pack_into_undersized_buffer():
    p = Packet.request(1, (1, 2))
    buf = bytearray(PACKET_SIZE - 1)
    with pytest.raises(InvalidArgument):
        p.pack_into(buf)
    assert buf == bytearray(PACKET_SIZE - 1)

    buf = bytearray(PACKET_SIZE + 4)
    with pytest.raises(InvalidArgument):
        p.pack_into(buf, offset=8)


def test_pack_into_offset():
    p = Packet.request(1, (3, 4))
    buf = bytearray(PACKET_SIZE + 4)
    p.pack_into(buf, offset=4)
    assert bytes(buf[4:]) == p.to_bytes()
    assert buf[:4] == b"\x00\x00\x00\x00"


def test_out_of_range_operand():
    with pytest.raises(InvalidArgument):
        Packet.request(1, (-1, 2)).to_bytes()
    with pytest.raises(InvalidArgument):
        Packet.request(1, (2**32, 2)).to_bytes()


def test_wrong_operand_count():
    with pytest.raises(InvalidArgument):
        Packet.request(1, (1, 2, 3))
    with pytest.raises(InvalidArgument):
        Packet.request(1, (1,))
