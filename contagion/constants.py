"""
Central configuration constants for the contagion simulation.

Defines physics tunables, default field parameters, and driver settings
used across multiple modules.
"""

# ============================================================================
# Subject Physics
# ============================================================================

# Upper bound on the magnitude of a freshly spawned subject's velocity
SUBJECT_INITIAL_MAX_VELOCITY = 1.0

# Upper bound on the random jostling force applied every tick
MAX_RANDOM_FORCE = 2.0

# Strength of the pull toward an assigned destination
DESTINATION_FORCE_FACTOR = 1.0

# Inside this distance the destination pull falls off linearly to zero
DESTINATION_ARRIVAL_RADIUS = 1.0


# ============================================================================
# Field Defaults
# ============================================================================

DEFAULT_SUBJECT_COUNT = 200
DEFAULT_SUBJECT_MASS = 10.0
DEFAULT_FRICTION_FACTOR = 0.98
DEFAULT_LO_BOUND = [0.0, 0.0]
DEFAULT_HI_BOUND = [640.0, 480.0]
DEFAULT_ODDS_OF_DESTINATION = 0.02
DEFAULT_INITIAL_SICK = 2
DEFAULT_INFECTION_RADIUS = 30.0
DEFAULT_ODDS_OF_INFECTION = 0.2
DEFAULT_MIN_INFECTION_TIME = 7   # ticks before time_scale is applied
DEFAULT_MAX_INFECTION_TIME = 21
DEFAULT_TIME_SCALE = 72
DEFAULT_MIN_STAY_TIME = 36
DEFAULT_MAX_STAY_TIME = 72

# Sentinel for "no scheduled change" / "not yet eradicated"
NO_TIME = -1


# ============================================================================
# Spatial Indexing Configuration
# ============================================================================

# Use scipy.cKDTree for the transmission pass
# Set to False to use the O(n) vectorized scan for comparison
USE_CKDTREE = True

# cKDTree build parameters
CKDTREE_LEAFSIZE = 16


# ============================================================================
# Driver / Performance Configuration
# ============================================================================

# Pacing interval between ticks for the stepping loop (seconds)
STEP_DELAY_SECONDS = 0.01

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100
