"""Seeded random number generation for reproducible training runs."""

from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class SeededRNG:
    """Seeded random number generator for reproducible results."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._gen = np.random.default_rng(seed)

    @property
    def seed(self) -> Optional[int]:
        """Get the current seed."""
        return self._seed

    def set_seed(self, seed: Optional[int]):
        """Restart the stream from a new seed."""
        self._seed = seed
        self._gen = np.random.default_rng(seed)

    def random(self) -> float:
        """Generate a random float in [0.0, 1.0)."""
        return float(self._gen.random())

    def randrange(self, stop: int) -> int:
        """Generate a random integer in [0, stop)."""
        return int(self._gen.integers(0, stop))

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        return seq[self.randrange(len(seq))]
