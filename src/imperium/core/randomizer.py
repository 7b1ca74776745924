"""
Centralised random source.

Every stochastic decision in a run (adjacency shuffles, birth draws,
weather, snowy immobility, initial population) goes through one
``Randomizer`` so that a seed fully determines the outcome.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class Randomizer:
    """Thin wrapper around ``numpy.random.Generator``."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self.generator = np.random.default_rng(seed)

    def reset(self) -> None:
        """Rewind to the initial seed (a fresh entropy draw if unseeded)."""
        self.generator = np.random.default_rng(self.seed)

    def uniform(self) -> float:
        """Float in [0, 1)."""
        return float(self.generator.random())

    def int_in(self, low: int, high: int) -> int:
        """Integer in [low, high)."""
        return int(self.generator.integers(low, high))

    def chance(self, probability: float) -> bool:
        """Bernoulli draw that succeeds when ``uniform() <= probability``."""
        return self.uniform() <= probability

    def shuffled(self, items: Sequence[T]) -> list[T]:
        """Return a new list holding *items* in random order."""
        if len(items) < 2:
            return list(items)
        order = self.generator.permutation(len(items))
        return [items[i] for i in order]

    def sex(self) -> str:
        return "M" if self.int_in(0, 2) == 0 else "F"

    def spawn(self, n: int) -> list[Randomizer]:
        """Derive *n* independent child randomizers from this one."""
        children: list[Randomizer] = []
        for child in self.generator.spawn(n):
            r = Randomizer.__new__(Randomizer)
            r.seed = None
            r.generator = child
            children.append(r)
        return children
