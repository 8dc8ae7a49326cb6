"""
Shared track analysis service.

This module provides the pipeline that takes a recorded track, replays it
through the streaming processor and summarizes the resulting wind estimates.
"""

import logging
from typing import Dict, Any, List, Optional

import numpy as np
import pandas as pd

from turnwind.config.settings import ReplayConfig
from turnwind.core.filters import average_angle
from turnwind.core.gpx import load_gpx_file
from turnwind.core.models import dataframe_to_fixes
from turnwind.core.processor import ProcessorParams
from turnwind.core.validation import validate_track_dataframe
from turnwind.core.wind import WindEstimate, estimates_to_dataframe
from turnwind.services.wind_service import get_wind_service

logger = logging.getLogger(__name__)


class TrackAnalysisResult:
    """Container for track analysis results."""

    def __init__(self,
                 track_data: pd.DataFrame,
                 estimates: List[WindEstimate],
                 metadata: Dict[str, Any],
                 filename: str,
                 rejected_count: int = 0,
                 residual_turn_deg: float = 0.0):
        self.track_data = track_data
        self.estimates = estimates
        self.metadata = metadata
        self.filename = filename
        self.rejected_count = rejected_count
        self.residual_turn_deg = residual_turn_deg

        self._calculate_summary_metrics()

    def _calculate_summary_metrics(self) -> None:
        """Calculate summary metrics from estimates."""
        self.point_count = len(self.track_data)
        self.cycle_count = len(self.estimates)

        if not self.estimates:
            self.mean_wind_speed = None
            self.mean_wind_direction = None
            self.mean_altitude_ft = None
            return

        self.mean_wind_speed = float(np.mean([e.wind_speed_kt for e in self.estimates]))
        self.mean_wind_direction = average_angle([e.wind_direction_from_deg for e in self.estimates])

        altitudes = [e.altitude_ft for e in self.estimates if e.altitude_ft is not None]
        self.mean_altitude_ft = float(np.mean(altitudes)) if altitudes else None

    @property
    def estimates_dataframe(self) -> pd.DataFrame:
        return estimates_to_dataframe(self.estimates)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'point_count': self.point_count,
            'rejected_count': self.rejected_count,
            'cycle_count': self.cycle_count,
            'residual_turn_deg': self.residual_turn_deg,
            'mean_wind_speed_kt': self.mean_wind_speed,
            'mean_wind_direction_from_deg': self.mean_wind_direction,
            'mean_altitude_ft': self.mean_altitude_ft,
            'estimates': [estimate.to_dict() for estimate in self.estimates],
        }


def analyze_track_data(
    track_data: pd.DataFrame,
    filename: str,
    metadata: Optional[Dict[str, Any]] = None,
    params: Optional[ProcessorParams] = None,
    default_accuracy: float = ReplayConfig.DEFAULT_ACCURACY
) -> TrackAnalysisResult:
    """
    Replay a track DataFrame and estimate wind for every completed turn.

    Args:
        track_data: DataFrame with time, latitude, longitude and optionally
            altitude and horizontal_accuracy columns
        filename: Name used in logs and results
        metadata: Optional metadata from the track source
        params: Processor parameters, or None for configured defaults
        default_accuracy: Accuracy in meters assumed for points without one

    Returns:
        TrackAnalysisResult

    Raises:
        ValidationError: If the track data is unusable
    """
    track_data = validate_track_dataframe(track_data, f"Track {filename}")
    fixes = dataframe_to_fixes(track_data, default_accuracy=default_accuracy)

    replay = get_wind_service(params).replay(fixes)

    logger.info(f"Analyzed {filename}: {len(replay.estimates)} cycles from {len(fixes)} points")
    return TrackAnalysisResult(
        track_data=track_data,
        estimates=replay.estimates,
        metadata=metadata or {},
        filename=filename,
        rejected_count=replay.rejected_count,
        residual_turn_deg=replay.residual_turn_deg,
    )


def analyze_gpx_file(
    gpx_file,
    filename: str,
    params: Optional[ProcessorParams] = None,
    default_accuracy: float = ReplayConfig.DEFAULT_ACCURACY
) -> TrackAnalysisResult:
    """
    Load a GPX file and analyze it.

    Args:
        gpx_file: File-like object containing GPX data
        filename: Name used in logs and results
        params: Processor parameters, or None for configured defaults
        default_accuracy: Accuracy in meters assumed for points without one

    Returns:
        TrackAnalysisResult

    Raises:
        ValidationError: If the file cannot be parsed
    """
    track_data, metadata = load_gpx_file(gpx_file)
    return analyze_track_data(
        track_data,
        filename=filename,
        metadata=metadata,
        params=params,
        default_accuracy=default_accuracy,
    )
