"""Shared utility helpers used across boxing-sim modules.

Centralises small clamping primitives and the random-selection helpers
that every engine module draws through.  All selection helpers consume
only ``rng.random()`` so a scripted source can replay a tick exactly.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping, Sequence
from typing import TypeVar

T = TypeVar("T")


def clamp_int(value: int, minimum: int, maximum: int) -> int:
    """Clamp *value* to the inclusive ``[minimum, maximum]`` range."""
    return max(minimum, min(maximum, int(value)))


def clamp_float(value: float, minimum: float, maximum: float) -> float:
    """Clamp *value* to the inclusive ``[minimum, maximum]`` range."""
    return max(minimum, min(maximum, float(value)))


def clamp_probability(value: object, default: float) -> float:
    """Parse *value* as a float and clamp it to ``[0.0, 1.0]``.

    Returns *default* (also clamped) if *value* cannot be converted.
    """
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return max(0.0, min(1.0, default))
    return max(0.0, min(1.0, numeric))


def weighted_select(weights: Mapping[T, float], rng: random.Random) -> T:
    """Pick a key from *weights* with probability proportional to its weight.

    A single uniform draw is compared against the cumulative weights.
    Non-positive weights are never chosen unless every weight is
    non-positive, in which case the first key is returned.
    """
    entries = [(key, max(0.0, float(weight))) for key, weight in weights.items()]
    if not entries:
        raise ValueError("Cannot select from an empty weight map")
    total = sum(weight for _, weight in entries)
    if total <= 0.0:
        return entries[0][0]

    draw = rng.random() * total
    cumulative = 0.0
    last_positive = entries[0][0]
    for key, weight in entries:
        if weight <= 0.0:
            continue
        cumulative += weight
        last_positive = key
        if draw < cumulative:
            return key
    # Floating point drift can leave the draw a hair above the total.
    return last_positive


def select_from(options: Sequence[T], rng: random.Random) -> T:
    """Return a uniformly chosen element of *options*."""
    if not options:
        raise ValueError("Cannot select from an empty sequence")
    index = min(len(options) - 1, int(rng.random() * len(options)))
    return options[index]


def random_int(low: int, high: int, rng: random.Random) -> int:
    """Return an integer in the inclusive ``[low, high]`` range."""
    if high <= low:
        return low
    return low + min(high - low, int(rng.random() * (high - low + 1)))


class SequenceRandom(random.Random):
    """Random source that replays a fixed list of draws.

    Useful for reproducing a tick exactly: every engine helper only calls
    :meth:`random`, so the same sequence always yields the same decisions
    and resolutions.  The sequence wraps around when exhausted.
    """

    def __init__(self, draws: Iterable[float]) -> None:
        self._draws = [float(value) for value in draws]
        if not self._draws:
            raise ValueError("SequenceRandom needs at least one draw")
        if any(value < 0.0 or value >= 1.0 for value in self._draws):
            raise ValueError("SequenceRandom draws must lie in [0, 1)")
        self._index = 0
        super().__init__(0)

    def random(self) -> float:
        value = self._draws[self._index % len(self._draws)]
        self._index += 1
        return value

    @property
    def draws_used(self) -> int:
        return self._index
