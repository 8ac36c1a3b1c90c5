"""Star placement by rejection sampling.

All coordinates of the canvas are visited once in a seeded shuffled order.
A coordinate becomes a candidate only when its hash passes the eligibility
mask, and a candidate is accepted only when no opaque pixel lies within
``radius`` of it.  Each accepted star is drawn into the canvas straight
away, so it blocks every later candidate around it.  The shuffle order
therefore decides which of two nearby candidates wins.

Visiting in random order alone still produces rings around content that was
already in the image, since the proximity test places stars at the nearest
free spot.  Combining the random order with the positional hash removes
both the grid and the ring patterns.

The pass is strictly sequential: ``generate_stars`` owns the canvas for its
whole duration and nothing else may read or write it in the meantime.
"""

import logging
import time

import cv2
import numpy as np

from . import constants
from .canvas import draw_pixel
from .canvas import opaque_mask
from .canvas import validate_canvas
from .exceptions import StarfieldConfigError
from .hashing import hash_grid
from .registry import StarRegistry
from .shuffle import shuffled_coordinates

__all__ = [
    "eligibility_map",
    "iter_candidates",
    "disk_kernel",
    "exclusion_zone",
    "is_isolated",
    "generate_stars",
]


logger = logging.getLogger('starfield')


def _check_int(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise StarfieldConfigError(f'{name} must be an integer, got {value!r}')
    if value < minimum:
        raise StarfieldConfigError(f'{name} must be >= {minimum}, got {value}')
    return int(value)


def eligibility_map(width: int, height: int, mask: int = constants.ELIGIBILITY_MASK) -> np.ndarray:
    """Return a ``(height, width)`` boolean map of hash-eligible coordinates."""
    return (hash_grid(width, height) & np.uint32(mask)) == 0


def iter_candidates(width, height, seed=constants.SHUFFLE_SEED, mask=constants.ELIGIBILITY_MASK):
    """Yield eligible ``(x, y)`` coordinates in shuffled visiting order."""
    coords = shuffled_coordinates(width, height, seed)
    eligible = eligibility_map(width, height, mask)
    # boolean indexing keeps the permutation order
    for x, y in coords[eligible[coords[:, 1], coords[:, 0]]].tolist():
        yield x, y


def disk_kernel(radius: int) -> np.ndarray:
    """Return a ``uint8`` kernel marking offsets with ``dx*dx + dy*dy <= radius*radius``."""
    dy, dx = np.ogrid[-radius:radius + 1, -radius:radius + 1]
    return ((dx * dx + dy * dy) <= radius * radius).astype(np.uint8)


def exclusion_zone(canvas, radius: int) -> np.ndarray:
    """Return a boolean map of pixels within *radius* of existing content.

    Pixels outside the canvas never count as content.
    """
    opaque = opaque_mask(canvas).astype(np.uint8)
    # dilate pads with the minimum value, so the border adds nothing
    zone = cv2.dilate(opaque, disk_kernel(radius))
    return zone.astype(bool)


def is_isolated(alpha, x, y, kernel) -> bool:
    """Return True when no opaque pixel of *alpha* falls under *kernel* at ``(x, y)``.

    The kernel window is clipped to the canvas bounds.
    """
    h, w = alpha.shape
    kh, kw = kernel.shape
    r = kh // 2

    # overlap between kernel and canvas
    y0 = max(y - r, 0)
    y1 = min(y + r + 1, h)
    x0 = max(x - r, 0)
    x1 = min(x + r + 1, w)
    ky0 = y0 - (y - r)
    ky1 = kh - ((y + r + 1) - y1)
    kx0 = x0 - (x - r)
    kx1 = kw - ((x + r + 1) - x1)

    window = alpha[y0:y1, x0:x1]
    return not np.any(window[kernel[ky0:ky1, kx0:kx1] != 0])


def generate_stars(canvas, radius=constants.RADIUS, seed=constants.SHUFFLE_SEED,
                   mask=constants.ELIGIBILITY_MASK, min_size=constants.MIN_CANVAS_SIZE) -> StarRegistry:
    """Place stars on *canvas* and return them in acceptance order.

    *canvas* is modified in place: every accepted star is drawn as an opaque
    black pixel.  A canvas with no room for stars yields an empty registry.
    All arguments are validated before the canvas is touched.
    """
    radius = _check_int('radius', radius, 1)
    seed = _check_int('seed', seed, 0)
    mask = _check_int('mask', mask, 0)
    if mask > 0xFFFFFFFF:
        raise StarfieldConfigError(f'mask must fit in 32 bits, got {mask:#x}')
    min_size = _check_int('min_size', min_size, 1)
    width, height = validate_canvas(canvas, min_size)

    start = time.time()

    kernel = disk_kernel(radius)
    # existing content does not change during the pass, so its zone is
    # computed once; stars placed below are caught by the window scan
    blocked = exclusion_zone(canvas, radius)
    alpha = canvas[:, :, constants.ALPHA]

    stars = []
    eligible = 0
    rejected_content = 0
    rejected_star = 0

    for x, y in iter_candidates(width, height, seed, mask):
        eligible += 1

        if blocked[y, x]:
            rejected_content += 1
            continue

        if not is_isolated(alpha, x, y, kernel):
            rejected_star += 1
            continue

        stars.append((x, y))
        draw_pixel(canvas, x, y)

    registry = StarRegistry(stars)

    logger.info('Placed %d stars on %dx%d canvas (radius=%d seed=%d): %d eligible of %d, rejected %d near content, %d near stars, time=%.3fs',
                len(registry), width, height, radius, seed, eligible, width * height,
                rejected_content, rejected_star, time.time() - start)

    return registry
