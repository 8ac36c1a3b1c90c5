import struct

import numpy as np

from starfield.hashing import hash_grid
from starfield.hashing import hash_pair
from starfield.hashing import hash_points
from starfield.hashing import one_at_a_time


def test_one_at_a_time_reference_values():
    assert one_at_a_time(b'a') == 0xCA2E9442
    assert one_at_a_time(b'The quick brown fox jumps over the lazy dog') == 0x519E91F5


def test_one_at_a_time_empty():
    assert one_at_a_time(b'') == 0


def test_hash_pair_uses_little_endian_packing():
    for x, y in [(0, 0), (1, 2), (31, 7), (1023, 511)]:
        assert hash_pair(x, y) == one_at_a_time(struct.pack('<ii', x, y))


def test_hash_pair_is_order_sensitive():
    assert hash_pair(3, 5) != hash_pair(5, 3)


def test_hash_pair_fits_32_bits():
    for x in range(0, 50, 7):
        for y in range(0, 50, 11):
            assert 0 <= hash_pair(x, y) <= 0xFFFFFFFF


def test_hash_points_matches_scalar():
    xs = np.array([0, 1, 2, 17, 255, 256, 4000, -1])
    ys = np.array([0, 9, 2, 33, 1, 65535, 3, -5])
    hashed = hash_points(xs, ys)
    assert hashed.dtype == np.uint32
    assert hashed.tolist() == [hash_pair(int(x), int(y)) for x, y in zip(xs, ys)]


def test_hash_grid_layout():
    grid = hash_grid(7, 4)
    assert grid.shape == (4, 7)
    for y in range(4):
        for x in range(7):
            assert int(grid[y, x]) == hash_pair(x, y)
