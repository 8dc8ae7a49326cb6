"""
Services package for turnwind.

This package contains business logic services that sit on top of the
streaming core: batch replay of fixes and recorded track analysis.
"""

from .wind_service import WindService, ReplayResult, get_wind_service, params_from_config
from .track_analysis_service import TrackAnalysisResult, analyze_track_data, analyze_gpx_file

__all__ = [
    'WindService',
    'ReplayResult',
    'get_wind_service',
    'params_from_config',
    'TrackAnalysisResult',
    'analyze_track_data',
    'analyze_gpx_file',
]
