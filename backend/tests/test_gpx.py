"""
Tests for loading recorded tracks and converting them to fixes.
"""

import io

import numpy as np
import pandas as pd
import pytest

from turnwind.core.gpx import load_gpx_file, load_gpx_from_path, fixes_to_gpx
from turnwind.core.models import fixes_to_dataframe, dataframe_to_fixes
from turnwind.core.simulation import simulate_circling_flight
from turnwind.core.validation import ValidationError, validate_track_dataframe

EMPTY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1" creator="test">
  <metadata><name>nothing here</name></metadata>
</gpx>
"""

GPX_1_0 = """<?xml version="1.0" encoding="UTF-8"?>
<gpx xmlns="http://www.topografix.com/GPX/1/0" version="1.0" creator="logger">
  <desc>ridge soaring</desc>
  <trk>
    <trkseg>
      <trkpt lat="46.0" lon="8.0"><ele>1200</ele><time>2024-05-01T09:00:00Z</time><hdop>2</hdop></trkpt>
      <trkpt lat="46.001" lon="8.0"><time>2024-05-01T09:00:01Z</time></trkpt>
      <trkpt lat="46.002" lon="8.0"><ele>1210</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""


@pytest.fixture
def short_flight():
    return simulate_circling_flight(duration_s=20.0, accuracy_m=7.5, altitude_m=320.0)


class TestLoadGpx:
    """Tests for GPX parsing."""

    def test_written_track_loads_back(self, short_flight):
        """Fixes written to GPX load back with position, altitude and accuracy."""
        xml = fixes_to_gpx(short_flight, name="test circle")
        df, metadata = load_gpx_file(io.StringIO(xml))

        assert metadata['name'] == "test circle"
        assert len(df) == len(short_flight)
        assert list(df.columns) == ['time', 'latitude', 'longitude', 'altitude', 'horizontal_accuracy']
        assert df['latitude'].iloc[3] == pytest.approx(short_flight[3].latitude, abs=1e-7)
        assert df['altitude'].iloc[0] == pytest.approx(320.0)
        assert df['horizontal_accuracy'].iloc[0] == pytest.approx(7.5)

    def test_invalid_xml_raises(self):
        """Garbage input is reported as a validation error."""
        with pytest.raises(ValidationError):
            load_gpx_file(io.StringIO("this is not a gpx file"))

    def test_no_tracks_raises(self):
        """A GPX document without tracks cannot be replayed."""
        with pytest.raises(ValidationError):
            load_gpx_file(io.StringIO(EMPTY_GPX))

    def test_gpx_1_0_without_optional_fields(self):
        """GPX 1.0 points load; missing elevation and dilution become NaN, untimed points are dropped."""
        df, metadata = load_gpx_file(io.BytesIO(GPX_1_0.encode('utf-8')))

        assert metadata['description'] == "ridge soaring"
        assert metadata['name'] is None
        assert len(df) == 2
        assert df['altitude'].iloc[0] == pytest.approx(1200.0)
        assert df['horizontal_accuracy'].iloc[0] == pytest.approx(10.0)
        assert np.isnan(df['altitude'].iloc[1])
        assert np.isnan(df['horizontal_accuracy'].iloc[1])

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_gpx_from_path(str(tmp_path / "missing.gpx"))

    def test_load_from_path(self, tmp_path, short_flight):
        """The file name is used when the track has no name."""
        path = tmp_path / "morning_thermal.gpx"
        path.write_text(fixes_to_gpx(short_flight, name=None))

        df, metadata = load_gpx_from_path(str(path))
        assert len(df) == len(short_flight)
        assert metadata['name'] == "morning_thermal"


class TestDataframeConversion:
    """Tests for converting between DataFrames and fixes."""

    def test_round_trip_preserves_fixes(self, short_flight):
        fixes = dataframe_to_fixes(fixes_to_dataframe(short_flight))
        assert fixes == short_flight

    def test_missing_values_defaulted(self):
        """NaN accuracy takes the default and NaN altitude becomes None."""
        df = pd.DataFrame({
            'time': pd.to_datetime(['2024-01-01T00:00:00Z', '2024-01-01T00:00:01Z']),
            'latitude': [45.0, 45.001],
            'longitude': [7.0, 7.0],
            'altitude': [np.nan, 250.0],
            'horizontal_accuracy': [np.nan, 3.0],
        })
        fixes = dataframe_to_fixes(df, default_accuracy=4.0)

        assert fixes[0].horizontal_accuracy == 4.0
        assert fixes[0].altitude is None
        assert fixes[1].horizontal_accuracy == 3.0
        assert fixes[1].altitude == 250.0

    def test_missing_optional_columns(self):
        """Tracks without altitude or accuracy columns still convert."""
        df = pd.DataFrame({
            'time': pd.to_datetime(['2024-01-01T00:00:00Z']),
            'latitude': [45.0],
            'longitude': [7.0],
        })
        fix = dataframe_to_fixes(df)[0]
        assert fix.altitude is None
        assert fix.horizontal_accuracy == 0.0

    def test_empty_fix_list(self):
        assert fixes_to_dataframe([]).empty


class TestValidateTrackDataframe:
    """Tests for validate_track_dataframe."""

    def test_empty_raises(self):
        with pytest.raises(ValidationError):
            validate_track_dataframe(pd.DataFrame())

    def test_missing_columns_raise(self):
        df = pd.DataFrame({'latitude': [45.0, 45.1], 'longitude': [7.0, 7.1]})
        with pytest.raises(ValidationError, match="time"):
            validate_track_dataframe(df)

    def test_invalid_latitude_raises(self):
        df = pd.DataFrame({
            'time': pd.to_datetime(['2024-01-01T00:00:00Z', '2024-01-01T00:00:01Z']),
            'latitude': [45.0, 95.0],
            'longitude': [7.0, 7.0],
        })
        with pytest.raises(ValidationError, match="latitude"):
            validate_track_dataframe(df)

    def test_incomplete_rows_dropped(self):
        """Rows without position or time are dropped before replay."""
        df = pd.DataFrame({
            'time': pd.to_datetime(['2024-01-01T00:00:00Z', None, '2024-01-01T00:00:02Z']),
            'latitude': [45.0, 45.1, 45.2],
            'longitude': [7.0, 7.1, 7.2],
        })
        assert len(validate_track_dataframe(df)) == 2
