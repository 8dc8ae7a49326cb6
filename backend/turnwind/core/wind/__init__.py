"""
Wind estimation module.

This module turns the groundspeed extrema of a completed turn into a wind
estimate.
"""

# Import models first (no dependencies)
from .models import WindEstimate, estimates_to_dataframe
from .estimator import WindEstimator, mean_altitude_feet

__all__ = [
    'WindEstimate',
    'estimates_to_dataframe',
    'WindEstimator',
    'mean_altitude_feet',
]
