"""
Constants for the turnwind package.

This module contains all the mathematical, algorithmic, and domain-specific
constants used throughout the codebase. Constants are grouped by their purpose
and documented with their units where applicable.
"""

# =============================================================================
# CONVERSION FACTORS
# =============================================================================

# Speed conversions
METERS_PER_SECOND_TO_KNOTS = 1.94384  # 1 m/s = 1.94384 knots
KNOTS_TO_METERS_PER_SECOND = 1 / METERS_PER_SECOND_TO_KNOTS

# Distance conversions
METERS_TO_FEET = 3.28084  # 1 m = 3.28084 ft
METERS_PER_KILOMETER = 1000

# =============================================================================
# EARTH MODEL
# =============================================================================

EARTH_RADIUS_METERS = 6371000.0  # Spherical earth radius used by haversine
EARTH_RADIUS_KILOMETERS = EARTH_RADIUS_METERS / METERS_PER_KILOMETER

# =============================================================================
# ANGLE CONSTANTS (all in degrees)
# =============================================================================

FULL_CIRCLE_DEGREES = 360
ANGLE_WRAP_BOUNDARY_DEGREES = 180  # Heading deltas are wrapped into (-180, 180]
RECIPROCAL_OFFSET_DEGREES = 180  # Offset from track at min groundspeed to wind source

# =============================================================================
# FILTER AND BUFFER SIZES
# =============================================================================

DEFAULT_SMOOTHING_WINDOW = 5  # Samples for groundspeed/track/altitude smoothing
FIX_HISTORY_CAPACITY = 10  # Accepted fixes kept for delta computation
SAMPLE_HISTORY_CAPACITY = 100  # Smoothed samples retained per cycle
MIN_FIXES_FOR_DELTA = 2  # Fixes needed before a delta can be computed

# =============================================================================
# ACCEPTANCE AND COMPLETION THRESHOLDS
# =============================================================================

MAX_HORIZONTAL_ACCURACY_METERS = 20.0  # Fixes less accurate than this are rejected
TURN_COMPLETION_THRESHOLD_DEGREES = 350.0  # Accumulated turn that closes a cycle

# =============================================================================
# ALTITUDE UNITS
# =============================================================================

ALTITUDE_UNIT_METERS = "meters"
ALTITUDE_UNIT_FEET = "feet"
ALTITUDE_UNITS = (ALTITUDE_UNIT_METERS, ALTITUDE_UNIT_FEET)

# =============================================================================
# TRACK REPLAY
# =============================================================================

DEFAULT_REPLAY_ACCURACY_METERS = 0.0  # Accuracy assumed when a track carries none
GPS_UERE_METERS = 5.0  # User equivalent range error, scales HDOP into meters

# =============================================================================
# VALIDATION LIMITS
# =============================================================================

MAX_SMOOTHING_WINDOW = 100
MAX_HISTORY_CAPACITY = 10000
MAX_REASONABLE_GROUND_SPEED_KNOTS = 400  # Above this a sample is logged as suspicious

# =============================================================================
# VALIDATION
# =============================================================================

assert 0 < TURN_COMPLETION_THRESHOLD_DEGREES <= FULL_CIRCLE_DEGREES, \
    "Turn completion threshold must be within one full circle"
