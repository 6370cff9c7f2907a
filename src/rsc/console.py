from __future__ import annotations

import logging
import re
from typing import Optional, TextIO

from .errors import InputAttemptsExceeded, InputExhausted

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Input: "
DEFAULT_INVALID_MESSAGE = "Invalid entry, try again."

# Decimal, exponent, inf and nan forms in ASCII. Hexadecimal forms such as
# "0x1p3" and Python-only spellings such as "1_000" are not accepted.
_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII,
)


def parse_number(text: str) -> Optional[float]:
    """Parse one number from a line of input, or return None if it is not one."""
    candidate = text.strip()
    if not _NUMBER_RE.fullmatch(candidate):
        return None
    return float(candidate)


def read_number(
    stdin: TextIO,
    stdout: TextIO,
    prompt: str = DEFAULT_PROMPT,
    invalid_message: str = DEFAULT_INVALID_MESSAGE,
    max_attempts: Optional[int] = None,
) -> float:
    """Prompt until a line holding a valid number is entered and return it.

    Each rejected line is discarded in full and answered with
    ``invalid_message``. With ``max_attempts`` left as None the prompt repeats
    for as long as input keeps coming; otherwise InputAttemptsExceeded is
    raised once that many lines were rejected. End of input raises
    InputExhausted, since no further attempt could ever succeed.
    """
    attempts = 0
    while True:
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        if line == "":
            raise InputExhausted("End of input reached while waiting for a number")
        attempts += 1

        value = parse_number(line)
        if value is not None:
            return value

        logger.debug("Rejected input line %r (attempt %d)", line, attempts)
        stdout.write(invalid_message + "\n")
        if max_attempts is not None and attempts >= max_attempts:
            raise InputAttemptsExceeded(attempts)


def format_number(value: float) -> str:
    return f"{value:.2f}"


def print_number(value: float, stdout: TextIO) -> None:
    """Write ``value`` with two decimals followed by a newline."""
    stdout.write(format_number(value) + "\n")
