"""Accepted star positions."""

from typing import NamedTuple

import numpy as np

__all__ = ["Star", "StarRegistry"]


class Star(NamedTuple):
    x: int
    y: int


class StarRegistry:
    """Read-only sequence of stars in the order they were accepted.

    The registry is built once by :func:`starfield.placement.generate_stars`
    from an append-only list and never changes afterwards.  Acceptance order
    is stable across runs, so callers may index into it.
    """

    __slots__ = ("_stars", "_array")

    def __init__(self, stars=()):
        self._stars = tuple(Star(int(x), int(y)) for x, y in stars)
        arr = np.array(self._stars, dtype=np.int64).reshape(-1, 2)
        arr.flags.writeable = False
        self._array = arr

    def __len__(self):
        return len(self._stars)

    def __iter__(self):
        return iter(self._stars)

    def __getitem__(self, index):
        return self._stars[index]

    def __contains__(self, item):
        return item in self._stars

    def __eq__(self, other):
        if not isinstance(other, StarRegistry):
            return NotImplemented
        return self._stars == other._stars

    def __hash__(self):
        return hash(self._stars)

    def __repr__(self):
        return f'StarRegistry({len(self._stars)} stars)'

    @property
    def xs(self) -> np.ndarray:
        return self._array[:, 0]

    @property
    def ys(self) -> np.ndarray:
        return self._array[:, 1]

    def as_array(self) -> np.ndarray:
        """Return the stars as a read-only ``(N, 2)`` array of ``(x, y)``."""
        return self._array
