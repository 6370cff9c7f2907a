"""
RSC (Reasonably Simple Computer) runtime and toolchain.

The runtime offers the operations compiled RSC programs call into:

- ``init()`` seeds the pseudo-random generator from the current time
- ``rand()`` returns a scaled value rounded to two decimals
- ``read_number()`` prompts until a valid number is entered
- ``print_number(value)`` prints a value with two decimals

The module-level functions use a shared default :class:`Runtime`; build a
``Runtime`` with your own :class:`Randomizer` and streams for anything that
needs to be reproducible. :mod:`rsc.parser` and :mod:`rsc.interpreter` parse
and execute whole programs.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rsc")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

from .errors import (
    ConfigError,
    ExecutionError,
    InputAttemptsExceeded,
    InputError,
    InputExhausted,
    ProgramError,
    RscError,
    StepLimitExceeded,
)
from .rng import Randomizer
from .runtime import Runtime, init, print_number, rand, read_number

__all__ = [
    "__version__",
    "ConfigError",
    "ExecutionError",
    "InputAttemptsExceeded",
    "InputError",
    "InputExhausted",
    "ProgramError",
    "Randomizer",
    "RscError",
    "Runtime",
    "StepLimitExceeded",
    "init",
    "print_number",
    "rand",
    "read_number",
]
