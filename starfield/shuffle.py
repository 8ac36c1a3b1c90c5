"""Seeded Fisher-Yates shuffle over canvas coordinates.

Candidates are visited in a shuffled order rather than row-major order;
row-major visits interact with the proximity test and leave a visible grid
pattern in the accepted stars.  The permutation must be reproducible, so the
random source is SplitMix64 with a fixed seed instead of whatever generator
the platform happens to ship.

Bounded draws use the upper 32 bits of each output:
``j = ((z >> 32) * (i + 1)) >> 32`` gives ``j`` in ``[0, i]`` without any
floating point.
"""

import numpy as np

__all__ = [
    "SplitMix64",
    "splitmix64_block",
    "shuffled_indices",
    "shuffled_coordinates",
]

_MASK64 = 0xFFFFFFFFFFFFFFFF
_GAMMA = 0x9E3779B97F4A7C15
_MIX1 = 0xBF58476D1CE4E5B9
_MIX2 = 0x94D049BB133111EB


class SplitMix64:
    """Reference scalar SplitMix64 generator."""

    def __init__(self, seed):
        self.state = seed & _MASK64

    def next(self):
        self.state = (self.state + _GAMMA) & _MASK64
        z = self.state
        z = ((z ^ (z >> 30)) * _MIX1) & _MASK64
        z = ((z ^ (z >> 27)) * _MIX2) & _MASK64
        return z ^ (z >> 31)

    def below(self, bound):
        """Return an integer in ``[0, bound)``; *bound* must fit in 32 bits."""
        return ((self.next() >> 32) * bound) >> 32


def splitmix64_block(seed: int, count: int) -> np.ndarray:
    """Return the first *count* outputs of ``SplitMix64(seed)`` as ``uint64``.

    Each state is ``seed + k * gamma``, so the whole block is computed at
    once instead of stepping the generator.
    """
    steps = np.arange(1, count + 1, dtype=np.uint64)
    # uint64 array arithmetic wraps modulo 2**64
    z = steps * np.uint64(_GAMMA) + np.uint64(seed & _MASK64)
    z = (z ^ (z >> np.uint64(30))) * np.uint64(_MIX1)
    z = (z ^ (z >> np.uint64(27))) * np.uint64(_MIX2)
    return z ^ (z >> np.uint64(31))


def shuffled_indices(count: int, seed: int) -> np.ndarray:
    """Return a Fisher-Yates permutation of ``range(count)``.

    Swaps run from the last index down to 1, consuming one draw per step.
    """
    if count < 2:
        return np.arange(count, dtype=np.int64)

    bounds = np.arange(count, 1, -1, dtype=np.uint64)
    draws = splitmix64_block(seed, count - 1)
    picks = (((draws >> np.uint64(32)) * bounds) >> np.uint64(32)).tolist()

    order = list(range(count))
    for i, j in zip(range(count - 1, 0, -1), picks):
        order[i], order[j] = order[j], order[i]
    return np.asarray(order, dtype=np.int64)


def shuffled_coordinates(width: int, height: int, seed: int) -> np.ndarray:
    """Return all ``(x, y)`` coordinates of the grid in shuffled order.

    The permutation is applied to row-major indices; the result has shape
    ``(width * height, 2)``.
    """
    order = shuffled_indices(width * height, seed)
    return np.stack((order % width, order // width), axis=1)
