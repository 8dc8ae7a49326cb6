"""
End-of-turn wind derivation.

In a steady turn at constant airspeed and bank, groundspeed peaks on the
downwind leg and troughs on the upwind leg. Half the spread between the two
approximates the wind speed, and the track flown at minimum groundspeed
gives the direction.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from turnwind.core.calculations import meters_to_feet, reciprocal_bearing
from turnwind.core.constants import ALTITUDE_UNIT_METERS
from turnwind.core.models.fix import SmoothedSample
from turnwind.core.models.state import Extrema
from turnwind.core.wind.models import WindEstimate

logger = logging.getLogger(__name__)


def mean_altitude_feet(
    samples: Sequence[SmoothedSample],
    altitude_unit: str = ALTITUDE_UNIT_METERS
) -> Optional[float]:
    """
    Average the altitude of retained samples and express it in feet.

    Samples without altitude are ignored. The unit conversion is applied once
    to the mean, not per sample.

    Returns:
        Mean altitude in feet, or None if no sample carries an altitude
    """
    altitudes = [sample.altitude for sample in samples if sample.altitude is not None]
    if not altitudes:
        return None

    mean_altitude = float(np.mean(altitudes))
    if altitude_unit == ALTITUDE_UNIT_METERS:
        return meters_to_feet(mean_altitude)
    return mean_altitude


class WindEstimator:
    """Turns the extrema of one completed cycle into a WindEstimate."""

    def __init__(self, altitude_unit: str = ALTITUDE_UNIT_METERS):
        self.altitude_unit = altitude_unit

    def finalize(self, extrema: Extrema, samples: Sequence[SmoothedSample]) -> Optional[WindEstimate]:
        """
        Derive the wind estimate for a completed cycle.

        Args:
            extrema: Max/min smoothed groundspeed and the track at the minimum
            samples: Smoothed samples retained during the cycle, oldest first

        Returns:
            WindEstimate with speed in knots, direction the wind blows from,
            and mean altitude in feet, or None if no sample reached the extrema
        """
        if not extrema.is_set:
            logger.warning("Cycle closed without groundspeed extrema, no estimate")
            return None

        wind_speed = (extrema.max_ground_speed_kt - extrema.min_ground_speed_kt) / 2
        wind_from = reciprocal_bearing(extrema.track_at_min)
        altitude_ft = mean_altitude_feet(samples, self.altitude_unit)

        estimate = WindEstimate(
            wind_speed_kt=wind_speed,
            wind_direction_from_deg=wind_from,
            altitude_ft=altitude_ft,
            samples=list(samples),
        )

        logger.info(f"Cycle complete: {estimate.summary()} "
                    f"(GS {extrema.min_ground_speed_kt:.1f}-{extrema.max_ground_speed_kt:.1f} kt, "
                    f"{len(samples)} samples)")
        return estimate
