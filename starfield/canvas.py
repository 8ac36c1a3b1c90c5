"""Gray + alpha pixel buffers.

A canvas is a ``uint8`` array of shape ``(height, width, 2)``: channel 0 is
the gray level and channel 1 the alpha.  Zero alpha marks pixels that may
receive stars; everything else counts as content.
"""

import numpy as np

from . import constants
from .exceptions import StarfieldConfigError

__all__ = [
    "new_canvas",
    "validate_canvas",
    "in_bounds",
    "draw_pixel",
    "opaque_mask",
    "count_opaque",
]


def new_canvas(width: int, height: int) -> np.ndarray:
    """Return a fully transparent canvas."""
    return np.zeros((height, width, constants.CHANNELS), dtype=np.uint8)


def validate_canvas(canvas, min_size: int = constants.MIN_CANVAS_SIZE):
    """Check the layout of *canvas* and return its ``(width, height)``."""
    if not isinstance(canvas, np.ndarray):
        raise StarfieldConfigError(f'Canvas must be a numpy array, got {type(canvas).__name__}')
    if canvas.ndim != 3 or canvas.shape[2] != constants.CHANNELS:
        raise StarfieldConfigError(f'Canvas must have shape (height, width, 2), got {canvas.shape}')
    if canvas.dtype != np.uint8:
        raise StarfieldConfigError(f'Canvas must be uint8, got {canvas.dtype}')

    height, width = canvas.shape[:2]
    if width < min_size or height < min_size:
        raise StarfieldConfigError(f'Canvas too small ({width},{height}), minimum is {min_size}')

    return width, height


def in_bounds(canvas, x, y):
    height, width = canvas.shape[:2]
    return 0 <= x < width and 0 <= y < height


def draw_pixel(canvas, x, y):
    """Set ``(x, y)`` to opaque black; coordinates off the canvas are ignored."""
    if in_bounds(canvas, x, y):
        canvas[y, x, constants.GRAY] = constants.STAR_GRAY
        canvas[y, x, constants.ALPHA] = constants.OPAQUE


def opaque_mask(canvas) -> np.ndarray:
    return canvas[:, :, constants.ALPHA] != 0


def count_opaque(canvas) -> int:
    return int(np.count_nonzero(canvas[:, :, constants.ALPHA]))
