"""
Data models for fixes, smoothed samples and turn-cycle state.
"""

from turnwind.core.models.fix import (
    Fix,
    SmoothedSample,
    fixes_to_dataframe,
    dataframe_to_fixes,
    samples_to_dataframe,
)
from turnwind.core.models.state import (
    ProcessorState,
    TurnState,
    Extrema,
    LowAccuracyFix,
    Waiting,
    Active,
    Status,
)

__all__ = [
    'Fix',
    'SmoothedSample',
    'fixes_to_dataframe',
    'dataframe_to_fixes',
    'samples_to_dataframe',
    'ProcessorState',
    'TurnState',
    'Extrema',
    'LowAccuracyFix',
    'Waiting',
    'Active',
    'Status',
]
