"""Injectable random sources for the mock data generators.

Generators only ever call ``random()`` on the source they are handed, so any
object with that method can stand in for ``random.Random``. Helpers below
derive uniform floats, integers and choices from that single primitive.
"""

import random
from collections.abc import Sequence
from typing import Optional, Protocol, TypeVar

T = TypeVar("T")

# Process-wide source used when a caller does not inject one
_shared = random.Random()


class RandomSource(Protocol):
    """Anything producing floats in [0, 1)."""

    def random(self) -> float: ...


class SequenceRandom:
    """Random source replaying a fixed list of values in a cycle."""

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Value {value} outside [0, 1)")
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def resolve(rng: Optional[RandomSource]) -> RandomSource:
    """Fall back to the process-wide random source."""
    return rng if rng is not None else _shared


def uniform(rng: RandomSource, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


def randint(rng: RandomSource, low: int, high: int) -> int:
    """Integer in [low, high], both inclusive."""
    return low + min(int(rng.random() * (high - low + 1)), high - low)


def choice(rng: RandomSource, items: Sequence[T]) -> T:
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[min(int(rng.random() * len(items)), len(items) - 1)]


def jitter(rng: RandomSource, magnitude: float) -> float:
    """Symmetric noise in [-magnitude, magnitude); zero for a draw of 0.5."""
    return (rng.random() - 0.5) * 2 * magnitude
