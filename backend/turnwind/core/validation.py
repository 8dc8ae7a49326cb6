"""
Input validation utilities for core functions.

This module validates configuration and recorded tracks before they reach the
streaming processor. Per-fix anomalies are not validated here: the processor
absorbs those without raising.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np
import pandas as pd

from turnwind.core.constants import (
    ALTITUDE_UNITS, FULL_CIRCLE_DEGREES, MAX_SMOOTHING_WINDOW, MAX_HISTORY_CAPACITY,
    MIN_FIXES_FOR_DELTA
)

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


def validate_parameter_ranges(
    smoothing_window: Optional[int] = None,
    fix_history_capacity: Optional[int] = None,
    sample_history_capacity: Optional[int] = None,
    max_horizontal_accuracy: Optional[float] = None,
    turn_threshold: Optional[float] = None,
    altitude_unit: Optional[str] = None
) -> None:
    """
    Validate parameter ranges for the sample processor.

    Args:
        smoothing_window: Samples per smoothing window
        fix_history_capacity: Accepted fixes kept for deltas
        sample_history_capacity: Smoothed samples retained per cycle
        max_horizontal_accuracy: Accuracy rejection limit in meters
        turn_threshold: Accumulated turn that closes a cycle, in degrees
        altitude_unit: 'meters' or 'feet'

    Raises:
        ValidationError: If any parameter is out of valid range
    """
    if smoothing_window is not None:
        if not 1 <= smoothing_window <= MAX_SMOOTHING_WINDOW:
            raise ValidationError(
                f"Smoothing window must be 1-{MAX_SMOOTHING_WINDOW} samples, got {smoothing_window}")

    if fix_history_capacity is not None:
        if not MIN_FIXES_FOR_DELTA <= fix_history_capacity <= MAX_HISTORY_CAPACITY:
            raise ValidationError(
                f"Fix history capacity must be {MIN_FIXES_FOR_DELTA}-{MAX_HISTORY_CAPACITY}, "
                f"got {fix_history_capacity}")

    if sample_history_capacity is not None:
        if not 1 <= sample_history_capacity <= MAX_HISTORY_CAPACITY:
            raise ValidationError(
                f"Sample history capacity must be 1-{MAX_HISTORY_CAPACITY}, got {sample_history_capacity}")

    if max_horizontal_accuracy is not None:
        if np.isnan(max_horizontal_accuracy) or max_horizontal_accuracy < 0:
            raise ValidationError(
                f"Max horizontal accuracy must be a non-negative distance, got {max_horizontal_accuracy}")

    if turn_threshold is not None:
        if not 0 < turn_threshold <= FULL_CIRCLE_DEGREES:
            raise ValidationError(
                f"Turn threshold must be 0-{FULL_CIRCLE_DEGREES}°, got {turn_threshold}")

    if altitude_unit is not None and altitude_unit not in ALTITUDE_UNITS:
        raise ValidationError(f"Altitude unit must be one of {ALTITUDE_UNITS}, got {altitude_unit!r}")


def validate_track_dataframe(df: pd.DataFrame, context: str = "Track data") -> pd.DataFrame:
    """
    Validate a track DataFrame has the columns and values needed for replay.

    Args:
        df: DataFrame to validate
        context: Context description for error messages

    Returns:
        Validated DataFrame with rows missing a position or time dropped

    Raises:
        ValidationError: If validation fails
    """
    if df is None:
        raise ValidationError(f"{context}: DataFrame is None")

    if df.empty:
        raise ValidationError(f"{context}: DataFrame is empty")

    required_columns = ['time', 'latitude', 'longitude']
    missing_columns = [col for col in required_columns if col not in df.columns]

    if missing_columns:
        raise ValidationError(f"{context}: Missing required columns: {missing_columns}")

    incomplete = df[required_columns].isna().any(axis=1)
    if incomplete.any():
        logger.warning(f"{context}: dropping {incomplete.sum()} points without time or position")
        df = df[~incomplete].reset_index(drop=True)

    if not df['latitude'].between(-90, 90).all():
        invalid_count = (~df['latitude'].between(-90, 90)).sum()
        raise ValidationError(f"{context}: {invalid_count} invalid latitude values (must be -90 to 90)")

    if not df['longitude'].between(-180, 180).all():
        invalid_count = (~df['longitude'].between(-180, 180)).sum()
        raise ValidationError(f"{context}: {invalid_count} invalid longitude values (must be -180 to 180)")

    if len(df) < MIN_FIXES_FOR_DELTA:
        raise ValidationError(
            f"{context}: Need at least {MIN_FIXES_FOR_DELTA} data points for analysis, got {len(df)}")

    logger.debug(f"{context}: Validation passed for {len(df)} data points")
    return df


def validate_file_upload(uploaded_file: Any, max_size_bytes: int) -> None:
    """
    Validate an uploaded GPX file before parsing.

    Args:
        uploaded_file: File-like object, optionally with 'name' and 'size'
        max_size_bytes: Largest accepted upload

    Raises:
        ValidationError: If file validation fails
    """
    if uploaded_file is None:
        raise ValidationError("No file uploaded")

    if hasattr(uploaded_file, 'size') and uploaded_file.size is not None:
        if uploaded_file.size > max_size_bytes:
            raise ValidationError(
                f"File too large: {uploaded_file.size / 1024 / 1024:.1f}MB "
                f"(max {max_size_bytes / 1024 / 1024:.0f}MB)")

    if getattr(uploaded_file, 'name', None):
        file_path = Path(uploaded_file.name)
        if file_path.suffix.lower() != '.gpx':
            raise ValidationError(f"Invalid file type: {file_path.suffix} (expected .gpx)")

    logger.debug(f"File validation passed: {getattr(uploaded_file, 'name', 'unknown')}")
