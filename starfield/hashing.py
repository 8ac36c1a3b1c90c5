"""Coordinate hashing.

Star eligibility and per-star animation offsets are both derived from a hash
of the integer coordinate alone, so stars always land on the same positions
regardless of the pixels around them.  The hash is Jenkins' one-at-a-time
function applied to the coordinate packed as two little-endian signed 32-bit
integers (``x`` first, then ``y``).  Packing with an explicit byte order
keeps the result identical on every platform.

Two implementations are provided: :func:`hash_pair` for single coordinates
and :func:`hash_points` which hashes whole coordinate arrays with numpy
``uint32`` arithmetic.  Both produce the same values.
"""

import struct

import numpy as np

__all__ = [
    "one_at_a_time",
    "hash_pair",
    "hash_points",
    "hash_grid",
]

_MASK32 = 0xFFFFFFFF
_PAIR = struct.Struct("<ii")

_U10 = np.uint32(10)
_U6 = np.uint32(6)
_U3 = np.uint32(3)
_U11 = np.uint32(11)
_U15 = np.uint32(15)
_U8 = np.uint32(8)
_BYTE = np.uint32(0xFF)


def one_at_a_time(data: bytes) -> int:
    """Return Jenkins' one-at-a-time hash of *data* as an unsigned 32-bit int."""
    h = 0
    for b in data:
        h = (h + b) & _MASK32
        h = (h + (h << 10)) & _MASK32
        h ^= h >> 6
    h = (h + (h << 3)) & _MASK32
    h ^= h >> 11
    h = (h + (h << 15)) & _MASK32
    return h


def hash_pair(x: int, y: int) -> int:
    """Hash a single ``(x, y)`` coordinate."""
    return one_at_a_time(_PAIR.pack(x, y))


def _as_u32(values):
    # two's complement reinterpretation, matching struct's "<i" bytes
    return (np.asarray(values, dtype=np.int64) & _MASK32).astype(np.uint32)


def hash_points(xs, ys) -> np.ndarray:
    """Vectorised :func:`hash_pair` over broadcastable coordinate arrays.

    Returns a ``uint32`` array with the broadcast shape of *xs* and *ys*.
    """
    xu, yu = np.broadcast_arrays(_as_u32(xs), _as_u32(ys))
    h = np.zeros(xu.shape, dtype=np.uint32)

    for word in (xu, yu):
        for byte_index in range(4):
            h += (word >> (_U8 * np.uint32(byte_index))) & _BYTE
            h += h << _U10
            h ^= h >> _U6

    h += h << _U3
    h ^= h >> _U11
    h += h << _U15
    return h


def hash_grid(width: int, height: int) -> np.ndarray:
    """Return the hash of every coordinate of a ``width`` x ``height`` grid.

    The result has shape ``(height, width)`` so it lines up with canvas rows.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    return hash_points(xs, ys)
