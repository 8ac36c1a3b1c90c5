"""Glitter animation for placed stars.

Every star cycles through four phases, each lasting ``divisor`` frames:

  0 - erased, the star is not drawn
  1 - plain single pixel
  2 - glitter, the pixel plus its four cardinal neighbours
  3 - plain single pixel

The phase offset of each star comes from its coordinate hash so stars do not
flicker in sync.  The offset is taken from the hash rather than from the
star's index in the registry since the index is not a stable property of
the position.

The pixels a star owns are its centre and the four neighbours.  Rendering
resets all owned pixels before drawing, so a frame can be rendered on top of
any earlier frame and rendering the same frame twice changes nothing.
Writes that fall off the canvas are skipped.
"""

import concurrent.futures
import logging
import time

import cv2
import numpy as np

from . import constants
from .canvas import validate_canvas
from .exceptions import StarfieldConfigError
from .hashing import hash_pair
from .hashing import hash_points

__all__ = [
    "star_phase",
    "star_phases",
    "glitter_offsets",
    "render_frame",
    "render_frames",
]


logger = logging.getLogger('starfield')

_CENTER = (0, 0)


def _check_frame(frame, divisor):
    if isinstance(frame, bool) or not isinstance(frame, (int, np.integer)) or frame < 0:
        raise StarfieldConfigError(f'Frame must be a non-negative integer, got {frame!r}')
    if isinstance(divisor, bool) or not isinstance(divisor, (int, np.integer)) or divisor < 1:
        raise StarfieldConfigError(f'Phase divisor must be a positive integer, got {divisor!r}')


def star_phase(x: int, y: int, frame: int, divisor: int = constants.PHASE_DIVISOR) -> int:
    """Return the glitter phase (0..3) of the star at ``(x, y)`` for *frame*."""
    _check_frame(frame, divisor)
    offset = hash_pair(x, y) >> constants.PHASE_SHIFT
    return ((offset + int(frame)) // int(divisor)) % constants.PHASE_COUNT


def star_phases(registry, frame: int, divisor: int = constants.PHASE_DIVISOR) -> np.ndarray:
    """Vectorised :func:`star_phase` for every star of *registry*, in order."""
    _check_frame(frame, divisor)
    divisor = int(divisor)
    period = constants.PHASE_COUNT * divisor
    # the phase repeats every period frames, so reduce first to stay in int64
    frame = int(frame) % period
    dtype = np.int64 if period < 2 ** 62 else object
    offsets = (hash_points(registry.xs, registry.ys) >> np.uint32(constants.PHASE_SHIFT)).astype(dtype)
    phases = ((offsets + frame) // divisor) % constants.PHASE_COUNT
    return phases.astype(np.int64)


def glitter_offsets():
    """Return the ``(dx, dy)`` offsets of the glitter cross arms."""
    cross = cv2.getStructuringElement(cv2.MORPH_CROSS, (3, 3))
    dys, dxs = np.nonzero(cross)
    return [(int(dx) - 1, int(dy) - 1) for dx, dy in zip(dxs, dys) if (dx, dy) != (1, 1)]


_ARMS = glitter_offsets()


def _paint(canvas, xs, ys, dx, dy, gray, alpha):
    """Write ``(gray, alpha)`` at each ``(x + dx, y + dy)`` that lies on the canvas."""
    h, w = canvas.shape[:2]
    nx = xs + dx
    ny = ys + dy
    inside = (nx >= 0) & (nx < w) & (ny >= 0) & (ny < h)
    if not np.any(inside):
        return
    canvas[ny[inside], nx[inside], constants.GRAY] = gray
    canvas[ny[inside], nx[inside], constants.ALPHA] = alpha


def render_frame(canvas, registry, frame: int, divisor: int = constants.PHASE_DIVISOR,
                 min_size: int = constants.MIN_CANVAS_SIZE):
    """Draw the stars of *registry* on *canvas* as they appear at *frame*.

    *canvas* is modified in place and also returned.
    """
    _check_frame(frame, divisor)
    validate_canvas(canvas, min_size)

    if len(registry) == 0:
        return canvas

    xs = registry.xs
    ys = registry.ys
    phases = star_phases(registry, frame, divisor)

    # reset every owned pixel first so overlapping crosses resolve the same
    # way regardless of star order
    for dx, dy in [_CENTER] + _ARMS:
        _paint(canvas, xs, ys, dx, dy, constants.TRANSPARENT, constants.TRANSPARENT)

    visible = phases != constants.PHASE_ERASE
    _paint(canvas, xs[visible], ys[visible], 0, 0, constants.STAR_GRAY, constants.OPAQUE)

    glitter = phases == constants.PHASE_GLITTER
    for dx, dy in _ARMS:
        _paint(canvas, xs[glitter], ys[glitter], dx, dy, constants.STAR_GRAY, constants.OPAQUE)

    logger.debug('Rendered frame %d: %d visible, %d glittering of %d stars',
                 frame, int(np.count_nonzero(visible)), int(np.count_nonzero(glitter)), len(registry))

    return canvas


def render_frames(canvas, registry, frames, divisor: int = constants.PHASE_DIVISOR,
                  workers: int = constants.RENDER_WORKERS, min_size: int = constants.MIN_CANVAS_SIZE):
    """Render each of *frames* into its own copy of *canvas*.

    Frames are rendered concurrently; each worker writes only to its private
    copy, and the registry is read-only.  *canvas* itself is left untouched.
    Returns the rendered canvases in the order of *frames*.
    """
    frames = list(frames)
    for frame in frames:
        _check_frame(frame, divisor)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise StarfieldConfigError(f'Render workers must be a positive integer, got {workers!r}')
    validate_canvas(canvas, min_size)

    start = time.time()

    def _render_one(frame):
        return render_frame(canvas.copy(), registry, frame, divisor, min_size)

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as exe:
        rendered = list(exe.map(_render_one, frames))

    logger.info('Rendered %d frames of %d stars, time=%.3fs', len(rendered), len(registry), time.time() - start)
    return rendered
