"""
GPX file parsing and handling.

This module contains functions for loading recorded tracks from GPX files so
they can be replayed through the processor, and for writing fixes back out.
"""

import os
import logging
from datetime import datetime, timezone
from typing import Tuple, Dict, List, Any, Optional

import gpxpy
import gpxpy.gpx
import numpy as np
import pandas as pd

from turnwind.core.constants import GPS_UERE_METERS
from turnwind.core.models.fix import Fix
from turnwind.core.validation import validate_track_dataframe, ValidationError

logger = logging.getLogger(__name__)

TRACK_COLUMNS = ['time', 'latitude', 'longitude', 'altitude', 'horizontal_accuracy']


def load_gpx_file(gpx_file) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load and parse a GPX file into a pandas DataFrame.

    Horizontal accuracy is estimated from the horizontal dilution of
    precision when a point carries one; otherwise it is left as NaN.

    Args:
        gpx_file: A file-like object (or string) containing GPX data

    Returns:
        tuple: (DataFrame with track data, dict with metadata)

    Raises:
        ValidationError: If parsing fails or the track is unusable
    """
    try:
        gpx = gpxpy.parse(gpx_file)
    except gpxpy.gpx.GPXException as e:
        raise ValidationError(f"Invalid GPX file format: {str(e)}") from e

    if not gpx.tracks:
        raise ValidationError("GPX file contains no tracks")

    metadata = {
        'name': None,
        'description': None,
        'time': None,
    }

    if gpx.tracks[0].name:
        metadata['name'] = gpx.tracks[0].name
    elif hasattr(gpx_file, 'name') and isinstance(gpx_file.name, str):
        filename = os.path.basename(gpx_file.name)
        metadata['name'] = os.path.splitext(filename)[0]

    if gpx.description:
        metadata['description'] = gpx.description
    if gpx.time:
        metadata['time'] = gpx.time

    data = []
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                accuracy = np.nan
                if point.horizontal_dilution is not None:
                    accuracy = point.horizontal_dilution * GPS_UERE_METERS
                data.append({
                    'time': point.time,
                    'latitude': point.latitude,
                    'longitude': point.longitude,
                    'altitude': point.elevation if point.elevation is not None else np.nan,
                    'horizontal_accuracy': accuracy,
                })

    df = pd.DataFrame(data, columns=TRACK_COLUMNS)
    df['time'] = pd.to_datetime(df['time'], utc=True)
    validated_df = validate_track_dataframe(df, f"GPX file {metadata.get('name') or 'unknown'}")

    logger.info(f"Successfully loaded GPX file with {len(validated_df)} track points")
    return validated_df, metadata


def load_gpx_from_path(file_path: str) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load a GPX file from disk path.

    Args:
        file_path: Path to the GPX file

    Returns:
        tuple: (DataFrame with track data, dict with metadata)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"GPX file not found: {file_path}")

    with open(file_path, 'r') as f:
        data, metadata = load_gpx_file(f)

    if not metadata['name']:
        metadata['name'] = os.path.splitext(os.path.basename(file_path))[0]

    return data, metadata


def _as_datetime(timestamp) -> datetime:
    if isinstance(timestamp, datetime):
        return timestamp
    return datetime.fromtimestamp(float(timestamp), tz=timezone.utc)


def fixes_to_gpx(fixes: List[Fix], name: Optional[str] = "turnwind track") -> str:
    """
    Serialize fixes as a single-track GPX document.

    Accuracy is written back as horizontal dilution so that a reload
    reproduces it.

    Args:
        fixes: Fixes in time order
        name: Track name, omitted when None

    Returns:
        GPX XML text
    """
    gpx = gpxpy.gpx.GPX()
    track = gpxpy.gpx.GPXTrack(name=name)
    segment = gpxpy.gpx.GPXTrackSegment()

    for fix in fixes:
        segment.points.append(gpxpy.gpx.GPXTrackPoint(
            latitude=fix.latitude,
            longitude=fix.longitude,
            elevation=fix.altitude,
            time=_as_datetime(fix.timestamp),
            horizontal_dilution=fix.horizontal_accuracy / GPS_UERE_METERS,
        ))

    track.segments.append(segment)
    gpx.tracks.append(track)
    return gpx.to_xml()
