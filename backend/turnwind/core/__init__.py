"""
Core streaming wind estimation.

Modules:
    calculations: Haversine distance/bearing, angle arithmetic, unit conversions
    filters: Moving average and circular mean sliding windows
    processor: Per-fix state machine (SampleProcessor)
    wind: End-of-turn wind derivation and the WindEstimate model
    gpx: Loading and writing recorded tracks
    simulation: Synthetic circling flights
"""

from turnwind.core.models import Fix, SmoothedSample, LowAccuracyFix, Waiting, Active
from turnwind.core.processor import SampleProcessor, ProcessorParams
from turnwind.core.wind import WindEstimate, WindEstimator

__all__ = [
    'Fix',
    'SmoothedSample',
    'LowAccuracyFix',
    'Waiting',
    'Active',
    'SampleProcessor',
    'ProcessorParams',
    'WindEstimate',
    'WindEstimator',
]
