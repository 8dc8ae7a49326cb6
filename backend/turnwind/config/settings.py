"""
Application settings and configuration.

This module contains application-specific configuration and defaults.
For algorithmic constants, see turnwind.core.constants.
"""

import os
import logging
from typing import Dict, Any

from turnwind.core.constants import (
    DEFAULT_SMOOTHING_WINDOW,
    FIX_HISTORY_CAPACITY,
    SAMPLE_HISTORY_CAPACITY,
    MAX_HORIZONTAL_ACCURACY_METERS,
    TURN_COMPLETION_THRESHOLD_DEGREES,
    ALTITUDE_UNIT_METERS,
    DEFAULT_REPLAY_ACCURACY_METERS
)

# App information
APP_NAME = "turnwind"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Estimate wind from GPS fixes recorded while circling"

# Environment overrides
LOG_LEVEL = os.environ.get("TURNWIND_LOG_LEVEL", "INFO").upper()
DEFAULT_TURN_THRESHOLD = float(
    os.environ.get("TURNWIND_TURN_THRESHOLD", TURN_COMPLETION_THRESHOLD_DEGREES))
DEFAULT_MAX_ACCURACY = float(
    os.environ.get("TURNWIND_MAX_ACCURACY", MAX_HORIZONTAL_ACCURACY_METERS))

# Processing defaults
DEFAULT_SMOOTH_ALTITUDE = True
DEFAULT_ALTITUDE_UNIT = ALTITUDE_UNIT_METERS

# Upload limits
MAX_UPLOAD_SIZE_BYTES = 50 * 1024 * 1024  # 50MB
MIN_UPLOAD_SIZE_BYTES = 100  # Smaller files cannot hold a GPX track

# Logging configuration
LOGGING_CONFIG = {
    "level": getattr(logging, LOG_LEVEL, logging.INFO),
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    "handlers": [
        logging.StreamHandler(),
    ]
}


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class EstimatorConfig:
    """Configuration parameters for the streaming processor."""
    SMOOTHING_WINDOW = DEFAULT_SMOOTHING_WINDOW
    FIX_HISTORY_CAPACITY = FIX_HISTORY_CAPACITY
    SAMPLE_HISTORY_CAPACITY = SAMPLE_HISTORY_CAPACITY
    MAX_HORIZONTAL_ACCURACY = DEFAULT_MAX_ACCURACY
    TURN_THRESHOLD = DEFAULT_TURN_THRESHOLD
    SMOOTH_ALTITUDE = DEFAULT_SMOOTH_ALTITUDE
    ALTITUDE_UNIT = DEFAULT_ALTITUDE_UNIT

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get estimator configuration as a dictionary."""
        return {
            'smoothing_window': cls.SMOOTHING_WINDOW,
            'fix_history_capacity': cls.FIX_HISTORY_CAPACITY,
            'sample_history_capacity': cls.SAMPLE_HISTORY_CAPACITY,
            'max_horizontal_accuracy': cls.MAX_HORIZONTAL_ACCURACY,
            'turn_threshold': cls.TURN_THRESHOLD,
            'smooth_altitude': cls.SMOOTH_ALTITUDE,
            'altitude_unit': cls.ALTITUDE_UNIT,
        }


class ReplayConfig:
    """Configuration parameters for replaying recorded tracks."""
    DEFAULT_ACCURACY = DEFAULT_REPLAY_ACCURACY_METERS
    MAX_UPLOAD_SIZE = MAX_UPLOAD_SIZE_BYTES
    MIN_UPLOAD_SIZE = MIN_UPLOAD_SIZE_BYTES

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get replay configuration as a dictionary."""
        return {
            'default_accuracy': cls.DEFAULT_ACCURACY,
            'max_upload_size': cls.MAX_UPLOAD_SIZE,
            'min_upload_size': cls.MIN_UPLOAD_SIZE,
        }
