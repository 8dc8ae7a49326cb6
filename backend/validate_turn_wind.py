#!/usr/bin/env python3
"""
Circling wind estimation validation script.

Replays synthetic circling flights with known wind through the streaming
processor and reports, for every scenario:
- Estimated wind speed and its error
- Reported direction against the reciprocal of the simulated upwind track
- Number of completed cycles and rejected fixes
"""

import logging
import sys
from pathlib import Path
from typing import Dict, Any, List

import numpy as np

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from turnwind.config.settings import LOGGING_CONFIG
from turnwind.core.calculations import reciprocal_bearing
from turnwind.core.simulation import simulate_circling_flight
from turnwind.services.wind_service import get_wind_service

logging.basicConfig(**{**LOGGING_CONFIG, 'level': logging.WARNING})
logger = logging.getLogger(__name__)


SCENARIOS = [
    {'airspeed_kt': 40, 'wind_speed_kt': 10, 'wind_from_deg': 270, 'noise_m': 0.0,
     'description': 'Paraglider, 10 kt westerly, clean fixes'},
    {'airspeed_kt': 40, 'wind_speed_kt': 10, 'wind_from_deg': 270, 'noise_m': 2.0,
     'description': 'Paraglider, 10 kt westerly, 2 m noise'},
    {'airspeed_kt': 55, 'wind_speed_kt': 20, 'wind_from_deg': 30, 'noise_m': 0.0,
     'description': 'Glider, 20 kt north-easterly'},
    {'airspeed_kt': 90, 'wind_speed_kt': 5, 'wind_from_deg': 180, 'noise_m': 3.0,
     'description': 'Light aircraft, 5 kt southerly, 3 m noise'},
]


def print_section_header(title: str, char: str = "="):
    """Print a formatted section header."""
    print("\n" + char * 80)
    print(f"  {title}")
    print(char * 80 + "\n")


def angle_error(a: float, b: float) -> float:
    error = abs(a - b) % 360
    return 360 - error if error > 180 else error


def run_scenario(scenario: Dict[str, Any]) -> Dict[str, Any]:
    """Simulate one flight and replay it."""
    print_section_header(scenario['description'], "-")

    fixes = simulate_circling_flight(
        airspeed_kt=scenario['airspeed_kt'],
        wind_speed_kt=scenario['wind_speed_kt'],
        wind_from_deg=scenario['wind_from_deg'],
        duration_s=300,
        position_noise_m=scenario['noise_m'],
        seed=42,
    )
    replay = get_wind_service().replay(fixes)

    # The estimator reports the reciprocal of the track flown at minimum groundspeed
    expected_direction = reciprocal_bearing(scenario['wind_from_deg'])
    speed_errors = [abs(e.wind_speed_kt - scenario['wind_speed_kt']) for e in replay.estimates]
    direction_errors = [angle_error(e.wind_direction_from_deg, expected_direction) for e in replay.estimates]

    print(f"Fixes: {replay.fix_count}, rejected: {replay.rejected_count}, cycles: {len(replay.estimates)}")
    for estimate in replay.estimates:
        print(f"  {estimate.summary()}")

    if replay.estimates:
        print(f"\n  Mean speed error:     {np.mean(speed_errors):.2f} kt")
        print(f"  Mean direction error: {np.mean(direction_errors):.1f}°")

    return {
        'description': scenario['description'],
        'cycles': len(replay.estimates),
        'speed_errors': speed_errors,
        'direction_errors': direction_errors,
    }


def main():
    print_section_header("CIRCLING WIND ESTIMATION VALIDATION")

    results: List[Dict[str, Any]] = [run_scenario(scenario) for scenario in SCENARIOS]

    print_section_header("SUMMARY")
    for result in results:
        if not result['cycles']:
            print(f"  ⚠ {result['description']}: no completed cycles")
            continue
        print(f"  {result['description']}: {result['cycles']} cycles, "
              f"max speed error {max(result['speed_errors']):.2f} kt, "
              f"max direction error {max(result['direction_errors']):.1f}°")

    print("\nValidation complete!")


if __name__ == "__main__":
    main()
