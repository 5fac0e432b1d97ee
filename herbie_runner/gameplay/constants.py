"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.
"""

# =============================================================================
# VIEW
# =============================================================================
VIEW_WIDTH = 800              # px
VIEW_HEIGHT = 600             # px
GROUND_LEVEL = 0.7            # surface sits 70% down the view

# =============================================================================
# CARAVAN
# =============================================================================
HIKER_COUNT = 5
BASE_SPEEDS = (1.0, 1.15, 1.3, 1.45, 1.6)   # Herbie (index 0) is slowest
BASE_SPEED_STEP = 0.15        # ramp used past the fifth hiker
HERBIE_INDEX = 0
HIKER_SIZE = 16
HERBIE_GLOW_RADIUS = 16
HIKER_GLOW_RADIUS = 10

TARGET_SPACING = 60.0         # px between neighbours
MAX_STRETCH = 220.0           # px, any wider gap ends the run
WAIT_RATIO = 0.8              # closer than this * spacing -> waiting
CATCH_UP_RATIO = 1.5          # further than this * spacing -> catch up
CATCH_UP_FACTOR = 1.2         # catch-up speed = base_speed * factor
TENSION_RATIO = 2.0           # tension lines from this * spacing

DISTANCE_SCALE = 100.0        # px per second at speed 1.0
Y_SMOOTHING = 5.0             # per second
BOOST_DECAY = 0.5             # boost units per second

OFFLOAD_PENALTY = -0.2        # tapped follower
OFFLOAD_BOOST = 0.4           # Herbie, capped (not additive)
PULSE_DURATION = 0.8          # seconds
HERBIE_LABEL_TIME = 6.0       # seconds the label shows at run start

MIN_FLOW = 1.0
MAX_FLOW = 3.0

HIKER_HIT_PADDING = 20        # px added to hiker size for taps

# =============================================================================
# TERRAIN
# =============================================================================
SEGMENT_WIDTH = 150.0
SEGMENT_HEIGHT = 20.0         # drawn thickness
INITIAL_SEGMENTS = 10
SCROLL_SPEED = 80.0           # px per second when no leader is supplied
CAMERA_LEAD = 0.3             # leader sits 30% into the view
CAMERA_EASE = 4.0             # per second
LOOK_AHEAD = 200.0            # px generated past the right edge
SEGMENT_PRUNE_MARGIN = 100.0
DECORATION_PRUNE_MARGIN = 200.0
ON_GROUND_TOLERANCE = 5.0

# =============================================================================
# OBSTACLES
# =============================================================================
FIRST_SPAWN_DISTANCE = 400.0
BASE_SPAWN_RATE = 180.0       # px between obstacles at difficulty 0
MIN_SPAWN_RATE = 120.0        # px between obstacles at difficulty 1
SPAWN_JITTER = 80.0
DIFFICULTY_RAMP = 0.0002      # difficulty per px of distance
SPAWN_OFFSET = 200.0          # px past the right edge of the view
CLEAR_RATE = 2.0              # clear progress per second
GLOW_RATE = 2.0
COLLISION_PADDING = 5.0       # shrinks the hiker box
HIT_PADDING = 20.0            # grows obstacle boxes for taps
OBSTACLE_PRUNE_MARGIN = 200.0

# =============================================================================
# RUN
# =============================================================================
START_X = 200.0
SCORE_DIVISOR = 10.0
MAX_DELTA_TIME = 0.1          # seconds
HUD_UPDATE_INTERVAL_MS = 100.0
