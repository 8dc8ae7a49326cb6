"""
Sliding-window smoothing filters.

This module provides the two bounded filters used to smooth per-fix values:
1. MovingAverageFilter - arithmetic mean over the last N values (speed, altitude)
2. CircularMeanFilter - vector mean over the last N headings

Headings cannot be averaged arithmetically: the mean of 350° and 10° is 0°,
not 180°. The circular filter sums unit vectors instead.
"""

import logging
from collections import deque
from typing import Iterable, List

import numpy as np

from turnwind.core.calculations import normalize_angle
from turnwind.core.constants import DEFAULT_SMOOTHING_WINDOW

logger = logging.getLogger(__name__)


def average_angle(degrees: Iterable[float]) -> float:
    """
    Calculate the circular mean of a sequence of angles.

    Args:
        degrees: Angles in degrees, in any range

    Returns:
        Mean direction in degrees [0, 360), or 0 for an empty sequence
    """
    angles = np.radians(np.asarray(list(degrees), dtype=float))
    if angles.size == 0:
        return 0.0

    mean_sin = np.sin(angles).mean()
    mean_cos = np.cos(angles).mean()
    mean_angle = np.degrees(np.arctan2(mean_sin, mean_cos))

    return normalize_angle(float(mean_angle))


class MovingAverageFilter:
    """Bounded FIFO window returning the arithmetic mean of its contents."""

    def __init__(self, size: int = DEFAULT_SMOOTHING_WINDOW):
        if size < 1:
            raise ValueError(f"Filter size must be at least 1, got {size}")
        self.size = size
        self._buffer = deque(maxlen=size)

    def add(self, value: float) -> None:
        """Append a value, evicting the oldest one when the window is full."""
        self._buffer.append(float(value))

    def average(self) -> float:
        """Mean of the current window, or 0 if empty."""
        if not self._buffer:
            return 0.0
        return float(np.mean(self._buffer))

    def values(self) -> List[float]:
        return list(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)


class CircularMeanFilter(MovingAverageFilter):
    """
    Bounded FIFO window of headings returning their circular mean.

    Shares the windowing behaviour of MovingAverageFilter so that speed and
    heading smoothing stay aligned sample for sample.
    """

    def average(self) -> float:
        """Circular mean of the current window in [0, 360), or 0 if empty."""
        return average_angle(self._buffer)
