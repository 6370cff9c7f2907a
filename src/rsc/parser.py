"""
Parser for RSC (Reasonably Simple Computer) assembly.

A program is one instruction per line: an opcode followed by at most one
operand, separated by whitespace. Blank lines and lines starting with ``#``
are ignored. Problems do not stop the parse; each one is collected as a
:class:`Diagnostic` holding character offsets into the source, so every error
in a file can be reported at once.

Instruction set (``n`` is a memory location, ``c`` a numeric constant):

======  ===========================================================
LDA n   load the value at location n into the accumulator
LDC c   load constant c into the accumulator
STA n   store the accumulator at location n
INP n   read a number from the keyboard into location n
OUT n   load location n into the accumulator and print it
ADC c   add constant c to the accumulator
ADD n   add the value at location n to the accumulator
SUB n   subtract the value at location n from the accumulator
MUL n   multiply the accumulator by the value at location n
DIV n   divide the accumulator by the value at location n
BRU n   branch to line n
BPA n   branch to line n if the accumulator is positive
BNA n   branch to line n if the accumulator is negative
BZA n   branch to line n if the accumulator is zero
STP     stop; every program needs at least one
======  ===========================================================
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from colorama import Fore, Style

from .console import parse_number
from .errors import ProgramError

MAX_LOCATION = 0xFFFFFFFF

_TOKEN_RE = re.compile(r"\S+")
_LOCATION_RE = re.compile(r"\+?\d+", re.ASCII)


class Opcode(str, Enum):
    LDA = "LDA"
    LDC = "LDC"
    STA = "STA"
    INP = "INP"
    OUT = "OUT"
    ADC = "ADC"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    BRU = "BRU"
    BPA = "BPA"
    BNA = "BNA"
    BZA = "BZA"
    STP = "STP"

    @property
    def takes_constant(self) -> bool:
        return self in (Opcode.LDC, Opcode.ADC)

    @property
    def takes_operand(self) -> bool:
        return self is not Opcode.STP


Operand = Union[int, float]


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    operand: Optional[Operand]
    lineno: int

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.value
        if self.opcode.takes_constant:
            return f"{self.opcode.value} {self.operand:g}"
        return f"{self.opcode.value} {self.operand}"


class DiagnosticType(Enum):
    INVALID_OPCODE = "Invalid opcode"
    INVALID_OPERAND = "Invalid operand, expected a number"
    MISSING_OPERAND = "Missing operand"
    TOO_MANY_OPERANDS = "Only one operand expected"
    MISSING_STP = "Program must contain at least one STP instruction"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticType
    start: int
    end: int

    def annotate(self, source: str, color: bool = False) -> str:
        return annotate_range(source, self.start, self.end, self.kind.message, color=color)


@dataclass
class ParseResult:
    instructions: List[Instruction] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    source: str = ""

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def report(self, color: bool = False, limit: Optional[int] = None) -> str:
        """Annotate diagnostics in source order, separated by blank lines."""
        diagnostics = self.diagnostics if limit is None else self.diagnostics[:limit]
        return "\n\n".join(d.annotate(self.source, color=color) for d in diagnostics)

    def raise_for_errors(self) -> None:
        if not self.ok:
            raise ProgramError(self)


def _paint(text: str, colour: str, color: bool) -> str:
    if not color:
        return text
    return f"{colour}{text}{Style.RESET_ALL}"


def _numbered(lineno: int, line: str, color: bool) -> str:
    prefix = _paint(f"{lineno}.", Fore.BLUE, color)
    if line.lstrip().startswith("#"):
        line = _paint(line, Fore.GREEN, color)
    return f"{prefix} {line}"


def annotate_range(source: str, start: int, end: int, message: str, color: bool = False) -> str:
    """Render the line holding ``start`` with an underline from start to end.

    Up to two non-blank lines are shown before and after it for context. Line
    numbers are the real 1-based numbers of the source.
    """
    start = max(0, min(start, len(source)))
    end = max(start, min(end, len(source)))
    lines = source.split("\n")
    index = source.count("\n", 0, start)
    bol = source.rfind("\n", 0, start) + 1

    before = [(i, lines[i]) for i in range(index) if lines[i].strip()][-2:]
    after = [(i, lines[i]) for i in range(index + 1, len(lines)) if lines[i].strip()][:2]

    out = [_numbered(i + 1, line, color) for i, line in before]
    current = index + 1
    out.append(_numbered(current, lines[index], color))

    indent = " " * (len(f"{current}. ") + start - bol)
    underline = "^" + "-" * max(end - start - 1, 0) + " " + message
    out.append(indent + _paint(underline, Fore.RED, color))

    out.extend(_numbered(i + 1, line, color) for i, line in after)
    return "\n".join(out)


def _parse_location(token: str) -> Optional[int]:
    if not _LOCATION_RE.fullmatch(token):
        return None
    value = int(token)
    if value > MAX_LOCATION:
        return None
    return value


def _parse_line(
    line: str, line_start: int, lineno: int
) -> Tuple[Optional[Instruction], List[Diagnostic]]:
    tokens = [(m.group(), line_start + m.start()) for m in _TOKEN_RE.finditer(line)]
    line_end = line_start + len(line.rstrip())
    name, name_start = tokens[0]
    operands = tokens[1:]
    diagnostics: List[Diagnostic] = []

    try:
        opcode = Opcode(name)
    except ValueError:
        if len(operands) > 1:
            diagnostics.append(Diagnostic(DiagnosticType.TOO_MANY_OPERANDS, operands[1][1], line_end))
        diagnostics.append(Diagnostic(DiagnosticType.INVALID_OPCODE, name_start, name_start + len(name)))
        return None, diagnostics

    if not opcode.takes_operand:
        if operands:
            diagnostics.append(Diagnostic(DiagnosticType.TOO_MANY_OPERANDS, operands[0][1], line_end))
        return Instruction(opcode, None, lineno), diagnostics

    if len(operands) > 1:
        diagnostics.append(Diagnostic(DiagnosticType.TOO_MANY_OPERANDS, operands[1][1], line_end))

    if not operands:
        name_end = name_start + len(name)
        diagnostics.append(Diagnostic(DiagnosticType.MISSING_OPERAND, name_end, name_end))
        return None, diagnostics

    token, token_start = operands[0]
    value: Optional[Operand]
    if opcode.takes_constant:
        value = parse_number(token)
    else:
        value = _parse_location(token)
    if value is None:
        diagnostics.append(Diagnostic(DiagnosticType.INVALID_OPERAND, token_start, token_start + len(token)))
        return None, diagnostics

    return Instruction(opcode, value, lineno), diagnostics


def parse(source: str) -> ParseResult:
    """Parse RSC source text, collecting every diagnostic rather than stopping at the first."""
    result = ParseResult(source=source)
    found_stp = False
    line_start = 0

    for lineno, line in enumerate(source.split("\n"), start=1):
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            instruction, diagnostics = _parse_line(line, line_start, lineno)
            result.diagnostics.extend(diagnostics)
            if instruction is not None:
                result.instructions.append(instruction)
                found_stp = found_stp or instruction.opcode is Opcode.STP
        line_start += len(line) + 1

    if not found_stp:
        end = len(source)
        result.diagnostics.append(Diagnostic(DiagnosticType.MISSING_STP, end, end))

    return result


def parse_file(path) -> ParseResult:
    with open(path, "r", encoding="utf-8") as f:
        return parse(f.read())


__all__ = [
    "Diagnostic",
    "DiagnosticType",
    "Instruction",
    "Opcode",
    "ParseResult",
    "annotate_range",
    "parse",
    "parse_file",
]
