"""Config driven entry point for starfield generation and animation.

Typical use::

    from starfield.canvas import new_canvas
    from starfield.starfield import Starfield

    sf = Starfield({'STARFIELD_RADIUS': 8})
    base = new_canvas(400, 240)
    stars = sf.generate(base)
    frames = sf.render_sequence(base, stars, range(20))
"""

import logging

from . import constants
from .animate import render_frame
from .animate import render_frames
from .canvas import validate_canvas
from .exceptions import StarfieldConfigError
from .placement import generate_stars


logger = logging.getLogger('starfield')


class Starfield:
    """Place and animate glitter stars on gray+alpha canvases.

    Configuration keys (all optional):
      * STARFIELD_RADIUS            : int (default 12) - minimum distance
        from a star to any opaque pixel
      * STARFIELD_SEED              : int (default 1) - shuffle seed
      * STARFIELD_ELIGIBILITY_MASK  : int (default 0x11111) - hash bits that
        must be clear for a coordinate to be a candidate
      * STARFIELD_PHASE_DIVISOR     : int (default 5) - frames per glitter phase
      * STARFIELD_MIN_SIZE          : int (default 10) - smallest canvas side
      * STARFIELD_RENDER_WORKERS    : int (default 4) - threads used by
        :meth:`render_sequence`

    Values are read when the object is created; out-of-range values raise
    :class:`~starfield.exceptions.StarfieldConfigError` at that point.
    """

    def __init__(self, config=None):
        self.config = dict(config or {})

        self.radius = self._get_int('STARFIELD_RADIUS', constants.RADIUS, 1)
        self.seed = self._get_int('STARFIELD_SEED', constants.SHUFFLE_SEED, 0)
        self.mask = self._get_int('STARFIELD_ELIGIBILITY_MASK', constants.ELIGIBILITY_MASK, 0, 0xFFFFFFFF)
        self.divisor = self._get_int('STARFIELD_PHASE_DIVISOR', constants.PHASE_DIVISOR, 1)
        self.min_size = self._get_int('STARFIELD_MIN_SIZE', constants.MIN_CANVAS_SIZE, 1)
        self.workers = self._get_int('STARFIELD_RENDER_WORKERS', constants.RENDER_WORKERS, 1)

    def _get_int(self, key, default, minimum, maximum=None):
        raw = self.config.get(key, default)
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise StarfieldConfigError(f'{key} must be an integer, got {raw!r}')
        try:
            value = int(raw)
        except (TypeError, ValueError) as e:
            raise StarfieldConfigError(f'{key} must be an integer, got {raw!r}') from e

        if value < minimum:
            raise StarfieldConfigError(f'{key} must be >= {minimum}, got {value}')
        if maximum is not None and value > maximum:
            raise StarfieldConfigError(f'{key} must be <= {maximum:#x}, got {value:#x}')
        return value

    def generate(self, canvas):
        """Place stars on *canvas* (in place) and return the registry."""
        return generate_stars(canvas, radius=self.radius, seed=self.seed,
                              mask=self.mask, min_size=self.min_size)

    def render(self, canvas, registry, frame):
        """Render a single *frame* into *canvas* in place."""
        return render_frame(canvas, registry, frame, self.divisor, self.min_size)

    def render_sequence(self, canvas, registry, frames):
        """Render *frames* into fresh copies of *canvas*."""
        return render_frames(canvas, registry, frames, self.divisor,
                             workers=self.workers, min_size=self.min_size)

    def animate(self, canvas, frames):
        """Generate stars for *canvas* and return ``(registry, rendered_frames)``.

        Generation runs on a private copy; *canvas* is not modified.
        """
        validate_canvas(canvas, self.min_size)
        base = canvas.copy()
        registry = self.generate(base)
        logger.info('Animating %d stars', len(registry))
        return registry, self.render_sequence(base, registry, frames)
