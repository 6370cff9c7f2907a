from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .parser import ParseResult


class RscError(Exception):
    """Base error for RSC runtime and toolchain exceptions."""


class InputError(RscError):
    """Raised when the console cannot produce a number."""


class InputExhausted(InputError):
    """Raised when the input stream reaches end of file before a valid number was read."""


class InputAttemptsExceeded(InputError):
    """Raised when the configured number of input attempts is used up."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No valid number after {attempts} attempt(s)")


class ProgramError(RscError):
    """Raised when a program cannot be parsed."""

    def __init__(self, result: "ParseResult", message: Optional[str] = None):
        self.result = result
        count = len(result.diagnostics)
        super().__init__(message or f"Program has {count} error(s)")


class ExecutionError(RscError):
    """Raised when a running program has to be aborted."""


class StepLimitExceeded(ExecutionError):
    """Raised when a program executes more instructions than allowed."""

    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"Program exceeded the step limit of {max_steps} instructions")


class ConfigError(RscError):
    """Raised when settings cannot be loaded or fail validation."""
