# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as particle
geometry, boundary sampling resolution, or rendering properties that are
not part of the user-editable configuration.
"""
import math

# --- Shapes ---
SHAPE_RECTANGLE = "rectangle"
SHAPE_CIRCLE = "circle"
SHAPE_ELLIPSE = "ellipse"
SHAPE_IRREGULAR = "irregular"
SHAPES = (SHAPE_RECTANGLE, SHAPE_CIRCLE, SHAPE_ELLIPSE, SHAPE_IRREGULAR)

# --- Canvas defaults ---
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600
# Gap between the default circle boundary and the nearest canvas edge.
CIRCLE_MARGIN = 20

# --- Particle settings ---
PARTICLE_RADIUS = 6
# Distance between neighbouring particles of a freshly spawned batch.
SPAWN_SPACING = 2
DEFAULT_PARTICLE_COUNT = 1
DEFAULT_SPEED = 3.0

# --- Ellipse defaults ---
DEFAULT_ELLIPSE_RADIUS_X = 300
DEFAULT_ELLIPSE_RADIUS_Y = 200
# Ellipse penetration correction pulls particles just inside the curve.
ELLIPSE_PULL_IN = 0.99

# --- Irregular boundary settings ---
BOUNDARY_SAMPLES = 512
MIN_CONTROL_POINTS = 3
DEFAULT_CONTROL_POINTS = 12
DEFAULT_IRREGULAR_AMPLITUDE = 0.7
DEFAULT_IRREGULAR_SEED = 42
IRREGULAR_BASE_RADIUS_X = 280
IRREGULAR_BASE_RADIUS_Y = 180
# Samples on either side of a matched index used to estimate the tangent.
NORMAL_SAMPLE_OFFSET = 5
# Regenerate draws new seeds from [0, REGENERATE_SEED_RANGE).
REGENERATE_SEED_RANGE = 10000

# --- Linear congruential generator (32-bit) ---
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32

# --- Control point editing ---
HIT_RADIUS = 15
HANDLE_RADIUS = 6

TWO_PI = 2.0 * math.pi

# --- Visualization settings ---
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (24, 24, 24) # Dark Gray
BOUNDARY_COLOR = (70, 96, 160)
BOUNDARY_LINE_WIDTH = 3

# Golden trail left behind each particle, alpha out of 255.
PATH_COLOR = (255, 223, 0, 204)
PATH_LINE_WIDTH = 4

# Ratio of the halo size to the particle radius. e.g., 2.5 means halo is 2.5x bigger.
PARTICLE_HALO_RATIO = 2.5
# Alpha value for the particle halo (0-255).
PARTICLE_HALO_ALPHA = 70
# Alpha for the UI panel background
UI_BACKGROUND_ALPHA = 100

HANDLE_COLOR = (33, 150, 243)
HANDLE_ACTIVE_COLOR = (243, 156, 18)
HANDLE_OUTLINE_COLOR = (255, 255, 255)
GUIDE_LINE_COLOR = (33, 150, 243, 77)

# The fixed particle palette. Particles in a batch cycle through it.
PARTICLE_COLORS = [
    (233, 69, 96),    # #e94560
    (255, 107, 107),  # #ff6b6b
    (238, 90, 111),   # #ee5a6f
    (255, 71, 87),    # #ff4757
    (255, 99, 72),    # #ff6348
    (255, 121, 121),  # #ff7979
    (235, 77, 75),    # #eb4d4b
    (243, 104, 224),  # #f368e0
    (255, 159, 243),  # #ff9ff3
    (254, 202, 87),   # #feca57
]
