"""
Position fix and smoothed sample data models.

This module defines the raw GPS input consumed by the processor and the
smoothed per-delta samples it derives.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any
import math

import pandas as pd

from turnwind.core.constants import DEFAULT_REPLAY_ACCURACY_METERS


@dataclass(frozen=True)
class Fix:
    """
    A single GPS position report.

    Fixes are immutable once received. Altitude is optional because not
    every positioning source reports it.
    """
    timestamp: datetime
    latitude: float  # Decimal degrees
    longitude: float  # Decimal degrees
    horizontal_accuracy: float  # Meters, radius of 68% confidence
    altitude: Optional[float] = None  # Meters above the reference surface

    def to_dict(self) -> Dict[str, Any]:
        """Convert fix to dictionary for DataFrame creation."""
        return {
            'time': self.timestamp,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
            'horizontal_accuracy': self.horizontal_accuracy,
        }


@dataclass(frozen=True)
class SmoothedSample:
    """Filtered groundspeed, track and altitude derived from one fix delta."""
    ground_speed_kt: float
    track_deg: float  # Degrees true, [0, 360)
    altitude: Optional[float] = None  # Same unit as the fix altitude

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def fixes_to_dataframe(fixes: List[Fix]) -> pd.DataFrame:
    """
    Convert a list of fixes to a pandas DataFrame.

    Args:
        fixes: List of Fix objects

    Returns:
        DataFrame with time, latitude, longitude, altitude and
        horizontal_accuracy columns
    """
    if not fixes:
        return pd.DataFrame()

    return pd.DataFrame([fix.to_dict() for fix in fixes])


def dataframe_to_fixes(
    df: pd.DataFrame,
    default_accuracy: float = DEFAULT_REPLAY_ACCURACY_METERS
) -> List[Fix]:
    """
    Convert a track DataFrame to a list of Fix objects in row order.

    Args:
        df: DataFrame with 'time', 'latitude' and 'longitude' columns, and
            optionally 'altitude' and 'horizontal_accuracy'
        default_accuracy: Accuracy in meters used where the track has none

    Returns:
        List of Fix objects
    """
    fixes = []

    for _, row in df.iterrows():
        altitude = row.get('altitude')
        if altitude is not None and _is_missing(altitude):
            altitude = None

        accuracy = row.get('horizontal_accuracy')
        if accuracy is None or _is_missing(accuracy):
            accuracy = default_accuracy

        fixes.append(Fix(
            timestamp=pd.Timestamp(row['time']).to_pydatetime(),
            latitude=float(row['latitude']),
            longitude=float(row['longitude']),
            horizontal_accuracy=float(accuracy),
            altitude=float(altitude) if altitude is not None else None,
        ))

    return fixes


def samples_to_dataframe(samples: List[SmoothedSample]) -> pd.DataFrame:
    """Convert smoothed samples to a DataFrame, one row per sample."""
    if not samples:
        return pd.DataFrame(columns=['ground_speed_kt', 'track_deg', 'altitude'])

    return pd.DataFrame([sample.to_dict() for sample in samples])


def _is_missing(value: Any) -> bool:
    try:
        return math.isnan(value)
    except TypeError:
        return False
