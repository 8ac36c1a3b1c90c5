"""Tunable constants for star placement and glitter animation."""

# Minimum distance between a star and any opaque pixel.
RADIUS = 12

# A coordinate is a star candidate when hash & ELIGIBILITY_MASK == 0.
# Five independent bits, so roughly one coordinate in 32 qualifies.
ELIGIBILITY_MASK = 0x11111

# Number of frames each glitter phase lasts.
PHASE_DIVISOR = 5

# Low hash bits feed the eligibility test; the phase offset skips them.
PHASE_SHIFT = 4

SHUFFLE_SEED = 1

# Smallest accepted canvas width/height.
MIN_CANVAS_SIZE = 10

RENDER_WORKERS = 4

# Canvas channel layout (gray + alpha).
GRAY = 0
ALPHA = 1
CHANNELS = 2

STAR_GRAY = 0
OPAQUE = 255
TRANSPARENT = 0

PHASE_ERASE = 0
PHASE_PLAIN = 1
PHASE_GLITTER = 2
PHASE_PLAIN_TAIL = 3
PHASE_COUNT = 4
