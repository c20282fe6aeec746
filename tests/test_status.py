from __future__ import annotations

import pytest

from rcalc.status import DeviceIndicator, NullIndicator


def test_device_indicator_writes_single_characters(tmp_path):
    dev = tmp_path / "7segment"
    ind = DeviceIndicator(str(dev))
    assert ind.open()
    ind.notify("0")
    ind.notify("E")
    ind.close()
    assert dev.read_bytes() == b"0E"


def test_missing_device_is_not_fatal(tmp_path):
    ind = DeviceIndicator(str(tmp_path / "missing" / "7segment"))
    assert ind.open() is False
    ind.notify("1")
    ind.close()


def test_rejects_multi_character_status(tmp_path):
    ind = DeviceIndicator(str(tmp_path / "dev"))
    with pytest.raises(ValueError):
        ind.notify("12")


def test_null_indicator():
    NullIndicator().notify("1")


def test_server_reports_idle_then_outcomes(server, indicator):
    from rcalc.client import ClientSession

    host, port = server.udp.local_address
    with ClientSession(host, port, timeout_s=2.0) as s:
        s.multiply(2, 3)
        s.divide(8, 2)
    assert indicator.seen == ["0", "1", "2"]
