"""
Wind estimate data model.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

import pandas as pd

from turnwind.core.models.fix import SmoothedSample, samples_to_dataframe


@dataclass(frozen=True)
class WindEstimate:
    """
    Wind derived from one completed circling cycle.

    Created exactly once per cycle and never mutated afterwards.
    """
    wind_speed_kt: float
    wind_direction_from_deg: float  # Degrees true, [0, 360)
    altitude_ft: Optional[float] = None  # Mean cycle altitude, None without altitude data
    samples: List[SmoothedSample] = field(default_factory=list)

    def to_dict(self, include_samples: bool = False) -> Dict[str, Any]:
        """Convert estimate to dictionary, optionally with its samples."""
        result = {
            'wind_speed_kt': self.wind_speed_kt,
            'wind_direction_from_deg': self.wind_direction_from_deg,
            'altitude_ft': self.altitude_ft,
            'sample_count': len(self.samples),
        }
        if include_samples:
            result['samples'] = [sample.to_dict() for sample in self.samples]
        return result

    def samples_dataframe(self) -> pd.DataFrame:
        return samples_to_dataframe(self.samples)

    def summary(self) -> str:
        """One-line human readable description."""
        text = f"Wind {self.wind_speed_kt:.1f} kt from {self.wind_direction_from_deg:03.0f}°"
        if self.altitude_ft is not None:
            text += f" at {self.altitude_ft:.0f} ft"
        return text


def estimates_to_dataframe(estimates: List[WindEstimate]) -> pd.DataFrame:
    """
    Convert a list of estimates to a pandas DataFrame.

    Args:
        estimates: List of WindEstimate objects

    Returns:
        DataFrame with one row per estimate (samples are summarized as a count)
    """
    if not estimates:
        return pd.DataFrame(
            columns=['wind_speed_kt', 'wind_direction_from_deg', 'altitude_ft', 'sample_count'])

    return pd.DataFrame([estimate.to_dict() for estimate in estimates])
