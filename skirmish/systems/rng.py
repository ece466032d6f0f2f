"""Seeded linear-congruential RNG.

The Golden Rule: the event log of a battle depends ONLY on its input,
which includes the seed.  The generator is an explicit object owned by one
battle, never a module-level singleton, so independent battles can run side
by side without sharing a stream.

Recurrence (mod 2**32):  state = state * 1664525 + 1013904223
"""

from __future__ import annotations

_MODULUS = 1 << 32
_MASK = _MODULUS - 1
_MULTIPLIER = 1664525
_INCREMENT = 1013904223


class DeterministicRNG:
    """Stateful LCG producing uniform floats in [0, 1) and bounded ints.

    Integer arithmetic only, so the stream is identical on every platform.
    """

    __slots__ = ("_seed", "_state", "_draws")

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._state = seed & _MASK
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values consumed so far."""
        return self._draws

    def _advance(self) -> int:
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK
        self._draws += 1
        return self._state

    def next_float(self) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._advance() / _MODULUS

    def next_int(self, max_value: int) -> int:
        """Return a deterministic integer in [0, max_value)."""
        if max_value <= 0:
            raise ValueError(f"next_int bound must be positive, got {max_value}")
        return int(self.next_float() * max_value)

    def __repr__(self) -> str:
        return f"DeterministicRNG(seed={self._seed}, draws={self._draws})"
