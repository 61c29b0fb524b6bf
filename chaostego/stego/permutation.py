"""
Seeded Permutation Generator.

Turns a seed string into a reproducible shuffle of slot positions. Encoder and
decoder must agree on every swap, so the generator constants, the traversal
order and the ``floor`` rounding below are part of the stored format and must
never change.

The generator is a small-modulus linear congruential generator. It is good
enough to scatter bits across a carrier; it has no security value.

Example:
    >>> from chaostego.stego.permutation import generate_permutation
    >>> generate_permutation(5, "")
    [0, 1, 2, 3, 4]
    >>> generate_permutation(5, "key") == generate_permutation(5, "key")
    True
"""

import math
from typing import List, MutableSequence, Optional, TypeVar

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class SeededRandom:
    """
    Deterministic pseudo-random source seeded from a string.

    The initial state is the sum of the code points of every character in the
    seed. Each call to :meth:`next` advances the state with
    ``state = (state * 9301 + 49297) % 233280`` and returns
    ``state / 233280``.
    """

    def __init__(self, seed: str):
        self._state = sum(ord(ch) for ch in seed)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Advance the generator and return a float in ``[0, 1)``."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS


def shuffle_in_place(sequence: MutableSequence[T], seed: Optional[str]) -> MutableSequence[T]:
    """
    Fisher-Yates shuffle driven by :class:`SeededRandom`.

    Walks from the last index down to 1, drawing
    ``j = floor(next() * (i + 1))`` and swapping positions ``i`` and ``j``.
    An empty or missing seed leaves the sequence untouched.

    Args:
        sequence: Mutable indexable sequence, modified in place
        seed: Seed string; ``None`` or ``""`` disables shuffling

    Returns:
        The same sequence object, for chaining
    """
    if not seed:
        return sequence

    rng = SeededRandom(seed)
    for i in range(len(sequence) - 1, 0, -1):
        j = math.floor(rng.next() * (i + 1))
        sequence[i], sequence[j] = sequence[j], sequence[i]
    return sequence


def generate_permutation(n: int, seed: Optional[str]) -> List[int]:
    """
    Return the seeded permutation of ``range(n)``.

    The same ``seed`` and ``n`` always produce the same list.

    Raises:
        ValueError: If ``n`` is negative
    """
    if n < 0:
        raise ValueError(f"Permutation size must be non-negative, got {n}")
    return shuffle_in_place(list(range(n)), seed)
