from __future__ import annotations

import json

from rcalc.cli import main


def call(server, *args: str) -> list[str]:
    host, port = server.udp.local_address
    return ["call", *args, "--host", host, "--port", str(port), "--timeout-s", "2"]


def test_call_multiply(server, capsys):
    assert main(call(server, "6", "7", "m")) == 0
    assert capsys.readouterr().out.strip() == "Result: 42"


def test_call_divide_by_zero(server, capsys):
    assert main(call(server, "5", "0", "d")) == 1
    assert capsys.readouterr().out.strip() == "Got an error: -4"


def test_call_json(server, capsys):
    assert main(call(server, "20", "4", "d") + ["--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"result": 5}


def test_call_timeout(endpoint, capsys):
    host, port = endpoint.local_address
    rc = main(["call", "1", "2", "m", "--host", host, "--port", str(port), "--timeout-s", "0.1"])
    assert rc == 1
    assert capsys.readouterr().out.strip() == "Got an error: -105"


def test_call_negative_operand_refused(server, capsys):
    assert main(call(server, "-3", "2", "m")) == 1
    assert capsys.readouterr().out.strip() == "Got an error: -106"


def test_bench(capsys):
    assert main(["bench", "--calls", "10", "--timeout-s", "2", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["role"] == "bench"
    assert out["calls"] == 10


def test_call_dispatches_on_function_letter(server, capsys):
    assert main(call(server, "9", "3", "d")) == 0
    assert main(call(server, "9", "3", "m")) == 0
    assert capsys.readouterr().out.split() == ["Result:", "3", "Result:", "27"]
