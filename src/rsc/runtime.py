from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from . import console
from .config import RuntimeSettings
from .rng import Randomizer

logger = logging.getLogger(__name__)


class Runtime:
    """
    The four operations RSC programs call into: init, rand, input and output.

    Streams default to the process's stdin/stdout at call time, so pytest's
    capsys and monkeypatched streams are honored.
    """

    def __init__(
        self,
        randomizer: Optional[Randomizer] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        settings: Optional[RuntimeSettings] = None,
    ) -> None:
        self.settings = settings or RuntimeSettings()
        self.randomizer = randomizer or Randomizer(seed=self.settings.seed)
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def init(self) -> int:
        seed = self.randomizer.init()
        logger.info("Runtime initialized (seed=%d)", seed)
        return seed

    def rand(self) -> float:
        return self.randomizer.rand()

    def read_number(self) -> float:
        return console.read_number(
            self.stdin,
            self.stdout,
            prompt=self.settings.prompt,
            invalid_message=self.settings.invalid_message,
            max_attempts=self.settings.max_input_attempts,
        )

    def print_number(self, value: float) -> None:
        console.print_number(value, self.stdout)


_default_runtime: Optional[Runtime] = None


def default_runtime() -> Runtime:
    """Return the process-wide runtime, creating it on first use.

    It is not thread-safe; callers sharing it across threads must serialize.
    """
    global _default_runtime
    if _default_runtime is None:
        _default_runtime = Runtime()
    return _default_runtime


def reset_default_runtime() -> None:
    global _default_runtime
    _default_runtime = None


def init() -> int:
    """Seed the default runtime's generator from the current time."""
    return default_runtime().init()


def rand() -> float:
    """Return the next scaled, two-decimal value from the default runtime."""
    return default_runtime().rand()


def read_number() -> float:
    """Prompt on stdout and read a number from stdin, retrying on bad input."""
    return default_runtime().read_number()


def print_number(value: float) -> None:
    """Print ``value`` with two decimals and a newline."""
    default_runtime().print_number(value)
