from __future__ import annotations

import logging
import math
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from .errors import StepLimitExceeded
from .parser import Instruction, Opcode
from .runtime import Runtime

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    accumulator: float
    memory: Dict[int, float] = field(default_factory=dict)
    steps: int = 0


def divide(a: float, b: float) -> float:
    """IEEE 754 division: dividing by zero gives a signed infinity or nan."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


class Machine:
    """
    Accumulator machine executing parsed RSC instructions against a Runtime.

    Memory is sparse. A location read or written for the first time starts
    out holding a generated value, as does the accumulator, so a program that
    forgets to initialize something sees noise rather than zero.

    Branch operands are source line numbers: execution resumes at the first
    instruction on or after that line, and the program ends if there is none.
    """

    def __init__(self, runtime: Runtime, max_steps: Optional[int] = None) -> None:
        self.runtime = runtime
        self.max_steps = max_steps
        self.accumulator = 0.0
        self.memory: Dict[int, float] = {}

    def _cell(self, location: int) -> float:
        if location not in self.memory:
            self.memory[location] = self.runtime.rand()
        return self.memory[location]

    def _store(self, location: int, value: float) -> None:
        # Creating a cell always draws a value, even one about to be overwritten.
        self._cell(location)
        self.memory[location] = value

    def run(self, instructions: Sequence[Instruction]) -> RunResult:
        self.runtime.init()
        self.accumulator = self.runtime.rand()
        self.memory = {}

        linenos = [instr.lineno for instr in instructions]
        pc = 0
        steps = 0
        while pc < len(instructions):
            if self.max_steps is not None and steps >= self.max_steps:
                raise StepLimitExceeded(self.max_steps)
            instr = instructions[pc]
            steps += 1
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("line %d: %s (acc=%r)", instr.lineno, instr, self.accumulator)

            if instr.opcode is Opcode.STP:
                break

            target = self.execute(instr)
            if target is None:
                pc += 1
            else:
                pc = bisect_left(linenos, target)

        logger.info("Program finished after %d step(s)", steps)
        return RunResult(self.accumulator, dict(self.memory), steps)

    def execute(self, instr: Instruction) -> Optional[int]:
        """Execute one non-STP instruction; return a branch target line or None."""
        op = instr.opcode
        operand = instr.operand

        if op is Opcode.LDA:
            self.accumulator = self._cell(operand)
        elif op is Opcode.LDC:
            self.accumulator = float(operand)
        elif op is Opcode.STA:
            self._store(operand, self.accumulator)
        elif op is Opcode.INP:
            self._store(operand, self.runtime.read_number())
        elif op is Opcode.OUT:
            self.accumulator = self._cell(operand)
            self.runtime.print_number(self.accumulator)
        elif op is Opcode.ADC:
            self.accumulator += float(operand)
        elif op is Opcode.ADD:
            self.accumulator += self._cell(operand)
        elif op is Opcode.SUB:
            self.accumulator -= self._cell(operand)
        elif op is Opcode.MUL:
            self.accumulator *= self._cell(operand)
        elif op is Opcode.DIV:
            self.accumulator = divide(self.accumulator, self._cell(operand))
        elif op is Opcode.BRU:
            return operand
        elif op is Opcode.BPA:
            return operand if self.accumulator > 0 else None
        elif op is Opcode.BNA:
            return operand if self.accumulator < 0 else None
        elif op is Opcode.BZA:
            return operand if self.accumulator == 0 else None
        else:  # pragma: no cover - every opcode is handled above
            raise ValueError(f"Unsupported opcode: {op}")
        return None


def run_program(
    instructions: Sequence[Instruction],
    runtime: Optional[Runtime] = None,
    max_steps: Optional[int] = None,
) -> RunResult:
    runtime = runtime or Runtime()
    if max_steps is None:
        max_steps = runtime.settings.max_steps
    return Machine(runtime, max_steps=max_steps).run(instructions)


__all__ = ["Machine", "RunResult", "divide", "run_program"]
