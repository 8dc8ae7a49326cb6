"""
Turn-cycle state and status models.

TurnState and Extrema hold everything that belongs to one circling cycle and
are always reset together. The status classes are what the processor reports
after each submitted fix.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from turnwind.core.calculations import wrap_heading_delta


class ProcessorState(Enum):
    """Lifecycle of the sample processor."""
    WAITING = "waiting"  # Fewer than two accepted fixes in history
    ACTIVE = "active"  # Accumulating turn
    COMPLETE = "complete"  # Transient, estimate emitted and state reset


@dataclass
class TurnState:
    """Cumulative absolute heading change since the last reset."""
    accumulated_turn_deg: float = 0.0
    last_track_deg: Optional[float] = None

    def accumulate(self, track_deg: float) -> float:
        """
        Add the absolute change from the previous track and remember this one.

        Returns:
            The absolute change added, 0 for the first track of a cycle
        """
        change = 0.0
        if self.last_track_deg is not None:
            change = abs(wrap_heading_delta(track_deg - self.last_track_deg))
            self.accumulated_turn_deg += change
        self.last_track_deg = track_deg
        return change

    def reset(self) -> None:
        self.accumulated_turn_deg = 0.0
        self.last_track_deg = None


@dataclass
class Extrema:
    """
    Running max/min smoothed groundspeed within a cycle.

    The track at minimum groundspeed is recorded in the same update as the
    minimum itself, so the two can never disagree.
    """
    max_ground_speed_kt: Optional[float] = None
    min_ground_speed_kt: Optional[float] = None
    track_at_min: Optional[float] = None

    def update(self, ground_speed_kt: float, track_deg: float) -> None:
        if self.max_ground_speed_kt is None or ground_speed_kt > self.max_ground_speed_kt:
            self.max_ground_speed_kt = ground_speed_kt
        if self.min_ground_speed_kt is None or ground_speed_kt < self.min_ground_speed_kt:
            self.min_ground_speed_kt = ground_speed_kt
            self.track_at_min = track_deg

    @property
    def is_set(self) -> bool:
        return self.max_ground_speed_kt is not None and self.min_ground_speed_kt is not None

    def reset(self) -> None:
        self.max_ground_speed_kt = None
        self.min_ground_speed_kt = None
        self.track_at_min = None


# =============================================================================
# STATUS VALUES
# =============================================================================

@dataclass(frozen=True)
class LowAccuracyFix:
    """The last fix was rejected because its accuracy exceeded the limit."""
    accuracy_meters: float

    def describe(self) -> str:
        return f"Discarding low accuracy fix: {self.accuracy_meters:.1f} m"


@dataclass(frozen=True)
class Waiting:
    """Not enough accepted fixes yet to compute a delta."""

    def describe(self) -> str:
        return "Waiting for more GPS data..."


@dataclass(frozen=True)
class Active:
    """A turn is being accumulated."""
    turn_deg: float
    ground_speed_kt: float
    track_deg: float

    def describe(self) -> str:
        return (f"Accumulated turn: {self.turn_deg:.1f}°, "
                f"GS: {self.ground_speed_kt:.1f} kt, track: {self.track_deg:.0f}°")


Status = Union[LowAccuracyFix, Waiting, Active]
