"""
Shared fixtures for turnwind tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from geopy.distance import great_circle

from turnwind.core.constants import EARTH_RADIUS_KILOMETERS
from turnwind.core.models import Fix
from turnwind.core.simulation import simulate_circling_flight

BASE_TIME = datetime(2024, 6, 1, 10, 0, 0, tzinfo=timezone.utc)


def make_fix(seconds, lat=45.0, lon=7.0, accuracy=5.0, altitude=100.0):
    """Build a fix at BASE_TIME + seconds."""
    return Fix(
        timestamp=BASE_TIME + timedelta(seconds=seconds),
        latitude=lat,
        longitude=lon,
        horizontal_accuracy=accuracy,
        altitude=altitude,
    )


def move(lat, lon, bearing, meters):
    """Return the (lat, lon) reached by travelling along a great circle."""
    point = great_circle(meters=meters, radius=EARTH_RADIUS_KILOMETERS).destination(
        (lat, lon), bearing=bearing
    )
    return point.latitude, point.longitude


@pytest.fixture
def circling_fixes():
    """Two minutes of 40 kt circling at 6°/s in a 10 kt wind from 270°."""
    return simulate_circling_flight(
        airspeed_kt=40.0,
        wind_speed_kt=10.0,
        wind_from_deg=270.0,
        turn_rate_deg_s=6.0,
        duration_s=120.0,
        altitude_m=500.0,
    )
