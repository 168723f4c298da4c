"""Numerical defaults shared by the field pipeline and the renderer.

Every value here can be overridden through the YAML files in ``config/``
(see :mod:`aurora_field.config.settings`).
"""

# Downsampling
DEFAULT_TARGET_COUNT = 20_000
DEFAULT_MIN_PROBABILITY = 3.0
CELL_LAT_DEG = 2.5
CELL_LON_DEG = 6.0
POLE_EPSILON_DEG = 0.01

# Physical circle size (meters)
BASE_RADIUS_M = 60_000.0
RADIUS_SPAN_M = 50_000.0
MIN_SCREEN_RADIUS_PX = 0.5

# Opacity model
BASE_OPACITY = 0.12
OPACITY_SPAN = 0.18
BOOST_THRESHOLD = 0.25
BOOST_FACTOR = 4.0

# Gradient anchors (r, g, b) at probability 0, 10, ..., 100:
# dark green -> light green -> teal -> purple -> pink
COLOR_STOPS = (
    (0.06, 0.20, 0.08),
    (0.12, 0.35, 0.12),
    (0.18, 0.55, 0.20),
    (0.25, 0.75, 0.35),
    (0.35, 0.80, 0.45),
    (0.40, 0.75, 0.60),
    (0.55, 0.60, 0.75),
    (0.60, 0.45, 0.80),
    (0.75, 0.40, 0.82),
    (0.85, 0.45, 0.85),
    (0.95, 0.55, 0.90),
)

# Web Mercator
EARTH_RADIUS_M = 6_378_137.0
MERCATOR_MAX_LAT = 85.05112878
TILE_SIZE_PX = 256

# Camera framing per hemisphere
HEMISPHERE_CENTER_LAT = 65.0
VISIBILITY_THRESHOLD = 50.0
