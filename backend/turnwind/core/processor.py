"""
Streaming sample processor.

This module contains the per-fix state machine that turns a stream of GPS
fixes into smoothed groundspeed/track samples, accumulates the turn, tracks
groundspeed extrema and hands a completed cycle to the wind estimator.

Processing is synchronous: each fix is handled to completion before the next
one is accepted. Anomalous fixes are absorbed (they contribute nothing) and
never raise to the caller.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Any, List, Optional, Union

from turnwind.core.calculations import haversine, meters_per_second_to_knots
from turnwind.core.constants import (
    DEFAULT_SMOOTHING_WINDOW, FIX_HISTORY_CAPACITY, SAMPLE_HISTORY_CAPACITY,
    MAX_HORIZONTAL_ACCURACY_METERS, TURN_COMPLETION_THRESHOLD_DEGREES,
    ALTITUDE_UNIT_METERS, MIN_FIXES_FOR_DELTA, MAX_REASONABLE_GROUND_SPEED_KNOTS
)
from turnwind.core.filters import MovingAverageFilter, CircularMeanFilter
from turnwind.core.models.fix import Fix, SmoothedSample
from turnwind.core.models.state import (
    ProcessorState, TurnState, Extrema, LowAccuracyFix, Waiting, Active, Status
)
from turnwind.core.validation import validate_parameter_ranges
from turnwind.core.wind.estimator import WindEstimator
from turnwind.core.wind.models import WindEstimate

logger = logging.getLogger(__name__)

ResultCallback = Callable[[WindEstimate], None]
StatusCallback = Callable[[Status], None]


@dataclass
class ProcessorParams:
    """Parameters for the sample processor."""
    smoothing_window: int = DEFAULT_SMOOTHING_WINDOW
    fix_history_capacity: int = FIX_HISTORY_CAPACITY
    sample_history_capacity: int = SAMPLE_HISTORY_CAPACITY
    max_horizontal_accuracy: float = MAX_HORIZONTAL_ACCURACY_METERS
    turn_threshold: float = TURN_COMPLETION_THRESHOLD_DEGREES
    smooth_altitude: bool = True
    altitude_unit: str = ALTITUDE_UNIT_METERS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for function calls."""
        return {
            'smoothing_window': self.smoothing_window,
            'fix_history_capacity': self.fix_history_capacity,
            'sample_history_capacity': self.sample_history_capacity,
            'max_horizontal_accuracy': self.max_horizontal_accuracy,
            'turn_threshold': self.turn_threshold,
            'smooth_altitude': self.smooth_altitude,
            'altitude_unit': self.altitude_unit,
        }

    def validate(self) -> None:
        """Raise ValidationError if any parameter is out of range."""
        values = self.to_dict()
        values.pop('smooth_altitude')
        validate_parameter_ranges(**values)


def elapsed_seconds(previous: Union[datetime, float], current: Union[datetime, float]) -> float:
    """Seconds between two timestamps given as datetimes or epoch seconds."""
    delta = current - previous
    if hasattr(delta, 'total_seconds'):
        return delta.total_seconds()
    return float(delta)


class SampleProcessor:
    """
    Per-fix state machine for circling wind estimation.

    Each instance is fully self-contained: several processors can run side by
    side without sharing any state.

    Args:
        params: Processor parameters, or None to use defaults
        on_result: Called with each WindEstimate when a cycle completes
        on_status: Called with the status after every processed fix
    """

    def __init__(
        self,
        params: Optional[ProcessorParams] = None,
        on_result: Optional[ResultCallback] = None,
        on_status: Optional[StatusCallback] = None
    ):
        if params is None:
            params = ProcessorParams()
        params.validate()

        self.params = params
        self.on_result = on_result
        self.on_status = on_status

        self._fixes = deque(maxlen=params.fix_history_capacity)
        self._samples = deque(maxlen=params.sample_history_capacity)
        self._speed_filter = MovingAverageFilter(params.smoothing_window)
        self._track_filter = CircularMeanFilter(params.smoothing_window)
        self._altitude_filter = MovingAverageFilter(params.smoothing_window)
        self._wind_estimator = WindEstimator(params.altitude_unit)

        self.turn = TurnState()
        self.extrema = Extrema()
        self.state = ProcessorState.WAITING
        self.status: Status = Waiting()
        self.enabled = True
        self.last_estimate: Optional[WindEstimate] = None

    # =========================================================================
    # CONTROL
    # =========================================================================

    def enable(self) -> None:
        """Resume processing fixes."""
        if not self.enabled:
            logger.info("Processor enabled")
        self.enabled = True

    def disable(self) -> None:
        """Stop processing fixes and discard all partial-cycle state."""
        self.reset()
        self.enabled = False
        logger.info("Processor disabled")

    def reset(self) -> None:
        """Full reset: cycle state, filters, retained samples and fix history."""
        self._reset_cycle()
        self._fixes.clear()
        self.state = ProcessorState.WAITING
        self.status = Waiting()

    def _reset_cycle(self) -> None:
        # Turn state and extrema always reset together
        self.turn.reset()
        self.extrema.reset()
        self._speed_filter.clear()
        self._track_filter.clear()
        self._altitude_filter.clear()
        self._samples.clear()

    # =========================================================================
    # INGESTION
    # =========================================================================

    def submit_fix(self, fix: Fix) -> Optional[WindEstimate]:
        """
        Process one GPS fix.

        Args:
            fix: The next position report, in delivery order

        Returns:
            The WindEstimate if this fix completed a turn, otherwise None
        """
        if not self.enabled:
            logger.debug("Processor disabled, ignoring fix")
            return None

        if not fix.horizontal_accuracy <= self.params.max_horizontal_accuracy:
            logger.debug(f"Rejecting fix with accuracy {fix.horizontal_accuracy} m")
            self._report(LowAccuracyFix(accuracy_meters=fix.horizontal_accuracy))
            return None

        if not (math.isfinite(fix.latitude) and math.isfinite(fix.longitude)):
            logger.warning(f"Ignoring fix without a finite position at {fix.timestamp}")
            return None

        self._fixes.append(fix)

        if len(self._fixes) < MIN_FIXES_FOR_DELTA:
            self.state = ProcessorState.WAITING
            self._report(Waiting())
            return None

        previous, current = self._fixes[-2], self._fixes[-1]
        delta = haversine(previous.latitude, previous.longitude, current.latitude, current.longitude)

        try:
            dt = elapsed_seconds(previous.timestamp, current.timestamp)
        except TypeError as e:
            logger.warning(f"Cannot compare fix timestamps, skipping fix: {e}")
            return None

        if dt <= 0:
            logger.debug(f"Skipping fix with non-positive interval ({dt} s)")
            return None

        sample = self._smooth(current, delta.distance_meters / dt, delta.initial_bearing_deg)
        self._samples.append(sample)
        self.state = ProcessorState.ACTIVE

        self.turn.accumulate(sample.track_deg)
        self.extrema.update(sample.ground_speed_kt, sample.track_deg)

        self._report(Active(
            turn_deg=self.turn.accumulated_turn_deg,
            ground_speed_kt=sample.ground_speed_kt,
            track_deg=sample.track_deg,
        ))

        if self.turn.accumulated_turn_deg >= self.params.turn_threshold:
            return self._complete_cycle()

        return None

    def _smooth(self, fix: Fix, speed_ms: float, bearing: float) -> SmoothedSample:
        raw_speed = meters_per_second_to_knots(speed_ms)
        if raw_speed > MAX_REASONABLE_GROUND_SPEED_KNOTS:
            logger.warning(f"Suspicious raw groundspeed {raw_speed:.0f} kt at {fix.timestamp}")

        self._speed_filter.add(raw_speed)
        self._track_filter.add(bearing)

        altitude = fix.altitude
        if altitude is not None and not math.isfinite(altitude):
            altitude = None

        if self.params.smooth_altitude:
            if altitude is not None:
                self._altitude_filter.add(altitude)
            altitude = self._altitude_filter.average() if len(self._altitude_filter) else None

        return SmoothedSample(
            ground_speed_kt=self._speed_filter.average(),
            track_deg=self._track_filter.average(),
            altitude=altitude,
        )

    def _complete_cycle(self) -> Optional[WindEstimate]:
        self.state = ProcessorState.COMPLETE
        estimate = self._wind_estimator.finalize(self.extrema, list(self._samples))
        self.last_estimate = estimate

        self._reset_cycle()
        self.state = ProcessorState.WAITING

        if estimate is not None and self.on_result is not None:
            try:
                self.on_result(estimate)
            except Exception as e:
                logger.error(f"Result callback failed: {e}")

        return estimate

    def _report(self, status: Status) -> None:
        self.status = status
        logger.debug(status.describe())
        if self.on_status is not None:
            try:
                self.on_status(status)
            except Exception as e:
                logger.error(f"Status callback failed: {e}")

    # =========================================================================
    # INSPECTION
    # =========================================================================

    @property
    def accumulated_turn_deg(self) -> float:
        return self.turn.accumulated_turn_deg

    @property
    def samples(self) -> List[SmoothedSample]:
        """Smoothed samples retained in the current cycle, oldest first."""
        return list(self._samples)

    @property
    def fix_count(self) -> int:
        return len(self._fixes)
