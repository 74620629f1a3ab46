# Scout Pathfinder: tunable parameters
# Rover path planning with dynamic obstacle discovery

# =============================================================================
# TUNABLE PARAMETERS - Adjust these to change behavior
# =============================================================================

# --- Field Dimensions ---
GRID_WIDTH = 50  # Grid width in cells (x)
GRID_HEIGHT = 30  # Grid height in cells (y)

# --- Rover Initial Placement ---
START = (5, 5)
GOAL = (45, 25)

# --- Planner Selection ---
ALGORITHMS = ("A*", "D*-Lite", "Field D*")
DEFAULT_ALGORITHM = "A*"

# --- Dynamic Obstacle Detection ---
DETECTION_RADIUS = 2  # Chebyshev distance at which an obstacle is discovered

# --- Fallback Planners ---
FALLBACK_MAX_STEPS = 1000  # Bound for the straight-line and greedy steppers

# --- Journey Safety ---
MAX_JOURNEY_STEPS = 1000  # Journey is paused after this many visited nodes

# --- Speed (tick interval = TICK_BASE_MS - TICK_STEP_MS * speed) ---
MIN_SPEED = 1
MAX_SPEED = 10
DEFAULT_SPEED = 5
TICK_BASE_MS = 1100
TICK_STEP_MS = 100

# --- Viewer ---
CELL_SIZE = 20  # Pixels per cell for rendering
FPS = 60
SCATTER_COUNT = 60  # Obstacle shapes placed by the random scatter key

# =============================================================================
# END TUNABLE PARAMETERS
# =============================================================================
