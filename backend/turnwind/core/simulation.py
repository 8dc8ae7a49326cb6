"""
Synthetic circling flight generator.

Produces the GPS fixes a vehicle would report while flying a constant-rate
turn at constant airspeed through a steady wind. Positions are advanced with
spherical destination math from geopy, using the same earth radius as the
haversine used by the processor, so the groundspeed and track recovered from
consecutive fixes match the simulated ground velocity.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import numpy as np
from geopy.distance import great_circle

from turnwind.core.calculations import knots_to_meters_per_second, normalize_angle
from turnwind.core.constants import EARTH_RADIUS_KILOMETERS
from turnwind.core.models.fix import Fix

logger = logging.getLogger(__name__)


def ground_velocity(
    heading_deg: float,
    airspeed_kt: float,
    wind_speed_kt: float,
    wind_from_deg: float
) -> Tuple[float, float]:
    """
    Combine air velocity and wind into groundspeed and track.

    Args:
        heading_deg: Direction the vehicle points through the air
        airspeed_kt: Speed through the air
        wind_speed_kt: Wind speed
        wind_from_deg: Direction the wind blows from

    Returns:
        Tuple of (groundspeed in knots, track in degrees [0, 360))
    """
    heading = math.radians(heading_deg)
    wind_toward = math.radians(wind_from_deg + 180)

    north = airspeed_kt * math.cos(heading) + wind_speed_kt * math.cos(wind_toward)
    east = airspeed_kt * math.sin(heading) + wind_speed_kt * math.sin(wind_toward)

    ground_speed = math.hypot(north, east)
    track = normalize_angle(math.degrees(math.atan2(east, north)))
    return ground_speed, track


def simulate_circling_flight(
    start_lat: float = 45.0,
    start_lon: float = 7.0,
    airspeed_kt: float = 40.0,
    wind_speed_kt: float = 10.0,
    wind_from_deg: float = 270.0,
    turn_rate_deg_s: float = 6.0,
    start_heading_deg: float = 0.0,
    duration_s: float = 120.0,
    sample_interval_s: float = 1.0,
    altitude_m: Optional[float] = 500.0,
    accuracy_m: float = 5.0,
    position_noise_m: float = 0.0,
    start_time: Optional[datetime] = None,
    seed: Optional[int] = None
) -> List[Fix]:
    """
    Generate fixes for a steady circling flight in wind.

    The heading for each interval is the heading at its start, and the
    vehicle moves in a straight line over the interval, so the chord between
    two consecutive fixes carries exactly the simulated ground velocity.

    Args:
        start_lat, start_lon: Position of the first fix
        airspeed_kt: Constant speed through the air
        wind_speed_kt: Steady wind speed
        wind_from_deg: Direction the wind blows from
        turn_rate_deg_s: Heading change per second, positive turns right
        start_heading_deg: Heading at the first fix
        duration_s: Length of the flight
        sample_interval_s: Time between fixes
        altitude_m: Constant altitude, or None to omit altitude
        accuracy_m: Reported horizontal accuracy of every fix
        position_noise_m: Standard deviation of random position error
        start_time: Timestamp of the first fix, defaults to 2024-01-01 UTC
        seed: Seed for the position noise generator

    Returns:
        List of Fix objects in time order
    """
    if start_time is None:
        start_time = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    rng = np.random.default_rng(seed)
    sample_count = int(round(duration_s / sample_interval_s)) + 1

    fixes = []
    lat, lon = start_lat, start_lon
    heading = start_heading_deg

    for index in range(sample_count):
        reported_lat, reported_lon = lat, lon
        if position_noise_m > 0:
            noise_distance = abs(rng.normal(0.0, position_noise_m))
            noise_bearing = rng.uniform(0.0, 360.0)
            reported_lat, reported_lon = _destination(lat, lon, noise_bearing, noise_distance)

        fixes.append(Fix(
            timestamp=start_time + timedelta(seconds=index * sample_interval_s),
            latitude=reported_lat,
            longitude=reported_lon,
            horizontal_accuracy=accuracy_m,
            altitude=altitude_m,
        ))

        ground_speed, track = ground_velocity(heading, airspeed_kt, wind_speed_kt, wind_from_deg)
        distance_m = knots_to_meters_per_second(ground_speed) * sample_interval_s
        lat, lon = _destination(lat, lon, track, distance_m)
        heading = normalize_angle(heading + turn_rate_deg_s * sample_interval_s)

    logger.debug(f"Simulated {len(fixes)} fixes: airspeed {airspeed_kt} kt, "
                 f"wind {wind_speed_kt} kt from {wind_from_deg}°")
    return fixes


def _destination(lat: float, lon: float, bearing: float, distance_m: float) -> Tuple[float, float]:
    point = great_circle(meters=distance_m, radius=EARTH_RADIUS_KILOMETERS).destination(
        (lat, lon), bearing=bearing
    )
    return point.latitude, point.longitude
