from __future__ import annotations

import io
import math

import pytest

from rsc.config import RuntimeSettings
from rsc.errors import InputExhausted, StepLimitExceeded
from rsc.interpreter import Machine, divide, run_program
from rsc.parser import parse
from rsc.rng import Randomizer
from rsc.runtime import Runtime


def make_runtime(stdin: str = "", seed: int = 7, **settings) -> Runtime:
    return Runtime(
        randomizer=Randomizer(seed=seed),
        stdin=io.StringIO(stdin),
        stdout=io.StringIO(),
        settings=RuntimeSettings(**settings),
    )


def run(source: str, stdin: str = "", **kwargs):
    result = parse(source)
    result.raise_for_errors()
    runtime = make_runtime(stdin)
    outcome = run_program(result.instructions, runtime=runtime, **kwargs)
    return outcome, runtime.stdout.getvalue()


def test_load_store_output():
    outcome, out = run("LDC 5\nSTA 1\nOUT 1\nSTP\n")
    assert out == "5.00\n"
    assert outcome.accumulator == 5.0
    assert outcome.memory[1] == 5.0
    assert outcome.steps == 4


def test_input_and_addition():
    source = "INP 1\nINP 2\nLDA 1\nADD 2\nSTA 3\nOUT 3\nSTP"
    _, out = run(source, stdin="2\nnope\n3.5\n")
    assert out == "Input: Input: Invalid entry, try again.\nInput: 5.50\n"


def test_arithmetic():
    source = """
        # mem[1] = 4, mem[2] = 10
        LDC 4
        STA 1
        LDC 10
        STA 2
        # ((10 - 4) * 4) / 4 + 1.5
        SUB 1
        MUL 1
        DIV 1
        ADC 1.5
        STA 3
        OUT 3
        STP
    """
    outcome, out = run(source)
    assert out == "7.50\n"
    assert outcome.accumulator == 7.5


def test_countdown_loop():
    source = "\n".join(
        [
            "LDC 3",   # 1
            "STA 1",   # 2
            "LDC 1",   # 3
            "STA 2",   # 4
            "OUT 1",   # 5
            "SUB 2",   # 6
            "STA 1",   # 7
            "BPA 5",   # 8
            "STP",     # 9
        ]
    )
    _, out = run(source)
    assert out == "3.00\n2.00\n1.00\n"


def test_branch_target_on_comment_line_resumes_at_next_instruction():
    source = "LDC 0\nBZA 4\nLDC 9\n# skip here\nSTA 1\nOUT 1\nSTP"
    _, out = run(source)
    assert out == "0.00\n"


def test_negative_branch():
    source = "LDC -1\nBNA 5\nLDC 1\nSTP\nSTA 2\nOUT 2\nSTP"
    _, out = run(source)
    assert out == "-1.00\n"


def test_branches_not_taken_fall_through():
    source = "LDC 0\nBPA 6\nBNA 6\nLDC 2\nBZA 6\nSTA 1\nOUT 1\nSTP"
    _, out = run(source)
    assert out == "2.00\n"


def test_unconditional_branch_backwards_until_input_runs_out():
    source = "INP 1\nOUT 1\nBRU 1\nSTP"
    result = parse(source)
    runtime = make_runtime("1\n2\n")
    with pytest.raises(InputExhausted):
        run_program(result.instructions, runtime=runtime)
    assert runtime.stdout.getvalue() == "Input: 1.00\nInput: 2.00\nInput: "


def test_branch_past_last_instruction_ends_program():
    outcome, out = run("BRU 99\nLDC 1\nSTP")
    assert out == ""
    assert outcome.steps == 1


def test_running_off_the_end_stops():
    # STP exists but is skipped over
    outcome, _ = run("BRU 3\nSTP\nLDC 2")
    assert outcome.accumulator == 2.0


def test_step_limit():
    with pytest.raises(StepLimitExceeded) as ei:
        run("BRU 1\nSTP", max_steps=10)
    assert ei.value.max_steps == 10


def test_step_limit_from_settings():
    result = parse("BRU 1\nSTP")
    runtime = make_runtime(max_steps=5)
    with pytest.raises(StepLimitExceeded):
        run_program(result.instructions, runtime=runtime)


def test_uninitialized_cells_and_accumulator_come_from_the_generator():
    expected = Randomizer(seed=7)
    expected.init()
    accumulator = expected.rand()
    cell = expected.rand()

    outcome, out = run("OUT 9\nSTP")
    assert out == f"{cell:.2f}\n"
    assert outcome.memory == {9: cell}

    untouched, _ = run("STP")
    assert untouched.accumulator == accumulator


def test_first_store_still_draws_a_value():
    expected = Randomizer(seed=7)
    expected.init()
    expected.rand()  # accumulator
    expected.rand()  # cell 1 on first store
    next_value = expected.rand()

    _, out = run("LDC 1\nSTA 1\nOUT 2\nSTP")
    assert out == f"{next_value:.2f}\n"


def test_same_seed_same_run():
    source = "ADD 1\nMUL 2\nSTA 3\nOUT 3\nSTP"
    assert run(source)[1] == run(source)[1]


def test_division_by_zero_follows_ieee():
    _, out = run("LDC 0\nSTA 2\nLDC 1\nDIV 2\nSTA 3\nOUT 3\nSTP")
    assert out == "inf\n"


def test_divide():
    assert divide(6, 3) == 2.0
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))
    assert math.isnan(divide(math.nan, 0.0))


def test_machine_initializes_runtime_each_run():
    result = parse("OUT 1\nSTP")
    runtime = make_runtime()
    machine = Machine(runtime)
    machine.run(result.instructions)
    machine.run(result.instructions)
    first, second = runtime.stdout.getvalue().splitlines()
    assert first == second
