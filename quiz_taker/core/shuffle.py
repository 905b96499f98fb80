"""Uniform shuffling used for both option order and question order."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")

_default_rng = random.Random()


def shuffle_items(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly shuffled copy of ``items``; the input is left untouched."""
    rng = rng or _default_rng
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
