from __future__ import annotations

import io

import pytest

import rsc
from rsc.config import RuntimeSettings
from rsc.errors import InputAttemptsExceeded
from rsc.rng import Randomizer
from rsc.runtime import Runtime, default_runtime, reset_default_runtime


def test_runtime_uses_injected_streams_and_settings():
    stdin = io.StringIO("bad\n9\n")
    stdout = io.StringIO()
    settings = RuntimeSettings(prompt="? ", invalid_message="again")
    rt = Runtime(randomizer=Randomizer(seed=1), stdin=stdin, stdout=stdout, settings=settings)

    assert rt.read_number() == 9.0
    rt.print_number(9.0)
    assert stdout.getvalue() == "? again\n? 9.00\n"


def test_runtime_attempt_cap_from_settings():
    rt = Runtime(
        stdin=io.StringIO("a\nb\n"),
        stdout=io.StringIO(),
        settings=RuntimeSettings(max_input_attempts=1),
    )
    with pytest.raises(InputAttemptsExceeded):
        rt.read_number()


def test_runtime_seed_from_settings():
    a = Runtime(settings=RuntimeSettings(seed=77))
    b = Runtime(randomizer=Randomizer(seed=77))
    assert a.init() == 77
    b.init()
    assert a.rand() == b.rand()


def test_streams_resolve_at_call_time(capsys, monkeypatch):
    rt = Runtime()
    monkeypatch.setattr("sys.stdin", io.StringIO("1.25\n"))
    assert rt.read_number() == 1.25
    rt.print_number(1.25)
    assert capsys.readouterr().out == "Input: 1.25\n"


def test_module_level_operations_share_default_runtime(capsys, monkeypatch):
    rsc.init()
    rsc.init()
    v = rsc.rand()
    assert -32768.0 <= v <= 32768.0

    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n3.5\n"))
    assert rsc.read_number() == 3.5
    rsc.print_number(3.14159)

    out = capsys.readouterr().out
    assert out == "Input: Invalid entry, try again.\nInput: 3.14\n"


def test_reset_default_runtime_builds_a_new_one():
    first = default_runtime()
    assert default_runtime() is first
    reset_default_runtime()
    assert default_runtime() is not first
