from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MIN_VALUE = -0x10000
MAX_VALUE = 0x10000
MIN_DIVISOR = 2
MAX_DIVISOR = 12


def round_half_away(value: float, ndigits: int = 2) -> float:
    """Round to ``ndigits`` decimals, breaking ties away from zero.

    Python's built-in ``round`` breaks ties to even, so ``round(0.125, 2)``
    gives ``0.12`` where this helper gives ``0.13``. The scaled value is
    compared against its integer part, which is exact for any double below
    2**52, so no tie is lost to an extra floating-point addition.
    """
    factor = 10 ** ndigits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    whole = math.trunc(scaled)
    if abs(scaled - whole) >= 0.5:
        whole += 1 if scaled > 0 else -1
    return whole / factor


def scale(base: int, divisor: int) -> float:
    """Return ``base / divisor`` rounded to two decimals."""
    return round_half_away(base / divisor, 2)


@dataclass
class Randomizer:
    """
    Pseudo-random value source for RSC programs.

    Holds its own random.Random instead of touching the module-level
    generator, so tests can inject a fixed seed and several runtimes can
    coexist. ``init`` seeds from the wall clock (second resolution) unless a
    fixed ``seed`` was given.
    """

    seed: Optional[int] = None
    clock: Callable[[], float] = field(default=time.time, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random()
        self._active_seed: Optional[int] = None

    @property
    def active_seed(self) -> Optional[int]:
        """Seed used by the last ``init`` call, or None if never initialized."""
        return self._active_seed

    def init(self) -> int:
        """Seed the generator and return the seed that was used.

        Calling it again restarts the sequence from the new seed.
        """
        seed = self.seed if self.seed is not None else int(self.clock())
        self._rng.seed(seed)
        self._active_seed = seed
        logger.debug("Seeded randomizer with %d", seed)
        return seed

    def divisor(self) -> int:
        """Draw a divisor uniformly from 2..12."""
        return self._rng.randint(MIN_DIVISOR, MAX_DIVISOR)

    def base(self) -> int:
        """Draw a base value uniformly from -65536..65536."""
        return self._rng.randint(MIN_VALUE, MAX_VALUE)

    def rand(self) -> float:
        """Return a scaled value with two decimal places of precision."""
        divisor = self.divisor()
        return scale(self.base(), divisor)

    def state(self):
        """Return the internal PRNG state for debugging or persistence."""
        return self._rng.getstate()

    def set_state(self, state) -> None:
        """Restore the internal PRNG state."""
        self._rng.setstate(state)


__all__ = [
    "MAX_DIVISOR",
    "MAX_VALUE",
    "MIN_DIVISOR",
    "MIN_VALUE",
    "Randomizer",
    "round_half_away",
    "scale",
]
