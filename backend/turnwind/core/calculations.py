"""
Shared calculations module.

Great-circle geometry, angle arithmetic and unit conversions used by the
streaming processor and the wind estimator. Everything here is a pure function.
"""

import math
import logging
from dataclasses import dataclass

from turnwind.core.constants import (
    EARTH_RADIUS_METERS, FULL_CIRCLE_DEGREES, ANGLE_WRAP_BOUNDARY_DEGREES,
    METERS_PER_SECOND_TO_KNOTS, KNOTS_TO_METERS_PER_SECOND, METERS_TO_FEET,
    RECIPROCAL_OFFSET_DEGREES
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoDelta:
    """Distance and initial bearing from one coordinate to another."""
    distance_meters: float
    initial_bearing_deg: float


# =============================================================================
# BASIC GEOMETRIC CALCULATIONS
# =============================================================================

def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> GeoDelta:
    """
    Calculate great-circle distance and initial bearing between two points.

    Uses the spherical-earth haversine formula for the distance and the
    forward-azimuth formula for the bearing.

    Args:
        lat1, lon1: Origin in decimal degrees
        lat2, lon2: Destination in decimal degrees

    Returns:
        GeoDelta with distance in meters and bearing in degrees [0, 360).
        Identical points yield distance 0 and bearing 0.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a a hair outside [0, 1] for antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    distance = EARTH_RADIUS_METERS * c

    if distance == 0:
        return GeoDelta(distance_meters=0.0, initial_bearing_deg=0.0)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    bearing = normalize_angle(math.degrees(math.atan2(y, x)))

    return GeoDelta(distance_meters=distance, initial_bearing_deg=bearing)


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the initial bearing between two points in degrees."""
    return haversine(lat1, lon1, lat2, lon2).initial_bearing_deg


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in meters."""
    return haversine(lat1, lon1, lat2, lon2).distance_meters


# =============================================================================
# ANGLE ARITHMETIC
# =============================================================================

def normalize_angle(angle: float) -> float:
    """Normalize an angle in degrees into [0, 360)."""
    normalized = angle % FULL_CIRCLE_DEGREES
    # -1e-15 % 360 rounds to exactly 360.0
    if normalized >= FULL_CIRCLE_DEGREES:
        normalized = 0.0
    return normalized


def wrap_heading_delta(delta: float) -> float:
    """
    Wrap a heading difference into (-180, 180].

    Inputs are differences of two normalized headings, so a single
    correction of one full circle is always enough.
    """
    if delta > ANGLE_WRAP_BOUNDARY_DEGREES:
        delta -= FULL_CIRCLE_DEGREES
    elif delta <= -ANGLE_WRAP_BOUNDARY_DEGREES:
        delta += FULL_CIRCLE_DEGREES
    return delta


def reciprocal_bearing(bearing: float) -> float:
    """Return the bearing pointing the opposite way, in [0, 360)."""
    return normalize_angle(bearing + RECIPROCAL_OFFSET_DEGREES)


# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

def meters_per_second_to_knots(speed_ms: float) -> float:
    """Convert meters per second to knots."""
    return speed_ms * METERS_PER_SECOND_TO_KNOTS


def knots_to_meters_per_second(speed_knots: float) -> float:
    """Convert knots to meters per second."""
    return speed_knots * KNOTS_TO_METERS_PER_SECOND


def meters_to_feet(distance_m: float) -> float:
    """Convert meters to feet."""
    return distance_m * METERS_TO_FEET
