"""Variance helpers shared by the match and interference engines.

Every engine takes a ``random.Random`` so a seeded source makes a whole
show reproducible. Nothing in this package touches the module-level
``random`` state.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Random source for an engine; seeded when a seed is given."""
    return random.Random(seed)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value between min and max."""
    return max(min_val, min(max_val, value))


def round_to_step(value: float, step: float = 0.25) -> float:
    """Round to the nearest multiple of step."""
    return round(value / step) * step


def jitter(rng: random.Random, spread: float) -> float:
    """Uniform noise in [-spread, +spread]."""
    return rng.uniform(-spread, spread)


def variance_factor(rng: random.Random, bound: float) -> float:
    """Multiplier in [1 - bound, 1 + bound]."""
    return 1.0 + rng.uniform(-bound, bound)


def roll_dice(rng: random.Random, count: int, sides: int) -> int:
    """Sum of count dice with the given number of sides."""
    return sum(rng.randint(1, sides) for _ in range(count))


def weighted_index(rng: random.Random, weights: Sequence[float]) -> int:
    """
    Pick an index with probability proportional to its weight.

    All-zero weights fall back to a uniform pick.
    """
    total = sum(weights)
    if total <= 0:
        return rng.randrange(len(weights))
    roll = rng.random() * total
    cumulative = 0.0
    for i, weight in enumerate(weights):
        cumulative += weight
        if roll < cumulative:
            return i
    return len(weights) - 1


def weighted_choice(rng: random.Random, items: Sequence[T], weights: Sequence[float]) -> T:
    return items[weighted_index(rng, weights)]
