"""
Deterministic RNG - Seeded pseudo-random streams.

Every random decision in the engine goes through a Mulberry32 stream so
that the same seed always reproduces the same drawing, across runs and
across machines. The arithmetic below emulates 32-bit unsigned integer
math exactly.
"""

from __future__ import annotations

import random

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0
_MAX_SEED = 2147483647


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low 32 bits kept."""
    return (a * b) & _MASK32


class Mulberry32:
    """
    Mulberry32 pseudo-random generator.

    Calling the instance returns the next float in [0, 1). Two
    generators built from the same seed yield identical sequences.
    """

    def __init__(self, seed: int | float):
        self._state = int(seed) & _MASK32

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        self._state = (self._state + _INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    def __call__(self) -> float:
        return self.next_uint32() / _TWO_POW_32

    def uniform(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        return low + self() * (high - low)


def create_rng(seed: int | float) -> Mulberry32:
    """Create a seeded random stream."""
    return Mulberry32(seed)


def random_seed() -> int:
    """Pick a fresh seed for a new project (not reproducible)."""
    return random.randrange(_MAX_SEED)
