"""
Tests for the streaming sample processor.
"""

import dataclasses
import logging
import math
from datetime import datetime

import pytest

from turnwind.core.calculations import haversine
from turnwind.core.models import Fix, LowAccuracyFix, Waiting, Active, ProcessorState
from turnwind.core.processor import SampleProcessor, ProcessorParams
from turnwind.core.simulation import simulate_circling_flight
from turnwind.core.validation import ValidationError

from conftest import make_fix, move


def run_until_estimate(processor, fixes):
    """Submit fixes until one completes a cycle; return (estimate, index)."""
    for index, fix in enumerate(fixes):
        estimate = processor.submit_fix(fix)
        if estimate is not None:
            return estimate, index
    return None, None


class TestAccuracyGate:
    """Tests for rejecting inaccurate fixes."""

    def test_accuracy_at_limit_accepted(self):
        """A fix with exactly 20 m accuracy is accepted."""
        processor = SampleProcessor()
        processor.submit_fix(make_fix(0, accuracy=20.0))
        assert processor.fix_count == 1
        assert processor.status == Waiting()

    def test_accuracy_above_limit_rejected(self):
        """A fix with 20.0001 m accuracy is rejected and reported."""
        processor = SampleProcessor()
        result = processor.submit_fix(make_fix(0, accuracy=20.0001))
        assert result is None
        assert processor.fix_count == 0
        assert processor.status == LowAccuracyFix(accuracy_meters=20.0001)

    def test_rejected_fix_mutates_nothing(self):
        """A rejected fix must not touch history, samples or turn state."""
        processor = SampleProcessor()
        lat, lon = move(45.0, 7.0, 0.0, 100.0)
        processor.submit_fix(make_fix(0))
        processor.submit_fix(make_fix(10, lat=lat, lon=lon))

        samples_before = processor.samples
        turn_before = processor.accumulated_turn_deg
        extrema_before = (processor.extrema.max_ground_speed_kt, processor.extrema.min_ground_speed_kt)

        far_lat, far_lon = move(lat, lon, 90.0, 5000.0)
        processor.submit_fix(make_fix(20, lat=far_lat, lon=far_lon, accuracy=50.0))

        assert processor.fix_count == 2
        assert processor.samples == samples_before
        assert processor.accumulated_turn_deg == turn_before
        assert (processor.extrema.max_ground_speed_kt, processor.extrema.min_ground_speed_kt) == extrema_before

    def test_configurable_limit(self):
        """The accuracy limit can be overridden."""
        processor = SampleProcessor(ProcessorParams(max_horizontal_accuracy=5.0))
        processor.submit_fix(make_fix(0, accuracy=6.0))
        assert isinstance(processor.status, LowAccuracyFix)


class TestSampleDerivation:
    """Tests for groundspeed, track and status derivation."""

    def test_first_fix_waits(self):
        """A single fix is not enough for a delta."""
        processor = SampleProcessor()
        assert processor.submit_fix(make_fix(0)) is None
        assert processor.status == Waiting()
        assert processor.state == ProcessorState.WAITING

    def test_second_fix_reports_active(self):
        """The second fix yields groundspeed in knots and the bearing."""
        processor = SampleProcessor()
        lat, lon = move(45.0, 7.0, 45.0, 100.0)
        processor.submit_fix(make_fix(0))
        processor.submit_fix(make_fix(10, lat=lat, lon=lon))

        expected_speed = haversine(45.0, 7.0, lat, lon).distance_meters / 10 * 1.94384
        status = processor.status
        assert isinstance(status, Active)
        assert status.turn_deg == 0
        assert status.ground_speed_kt == pytest.approx(expected_speed)
        assert status.track_deg == pytest.approx(45.0, abs=1e-6)
        assert processor.state == ProcessorState.ACTIVE

    def test_groundspeed_is_smoothed(self):
        """Groundspeed should be the mean over the smoothing window."""
        processor = SampleProcessor()
        lat, lon = 45.0, 7.0
        processor.submit_fix(make_fix(0, lat=lat, lon=lon))
        raw_speeds = []
        for step, distance in enumerate((50.0, 100.0, 150.0), start=1):
            lat, lon = move(lat, lon, 45.0, distance)
            processor.submit_fix(make_fix(step, lat=lat, lon=lon))
            raw_speeds.append(distance * 1.94384)

        assert processor.status.ground_speed_kt == pytest.approx(sum(raw_speeds) / 3, rel=1e-6)
        assert len(processor.samples) == 3

    def test_epoch_second_timestamps(self):
        """Timestamps given as epoch seconds work like datetimes."""
        processor = SampleProcessor()
        lat, lon = move(45.0, 7.0, 90.0, 100.0)
        processor.submit_fix(Fix(timestamp=1000.0, latitude=45.0, longitude=7.0, horizontal_accuracy=3.0))
        processor.submit_fix(Fix(timestamp=1010.0, latitude=lat, longitude=lon, horizontal_accuracy=3.0))
        assert processor.status.ground_speed_kt == pytest.approx(10 * 1.94384, rel=1e-6)


class TestNonPositiveInterval:
    """Tests for duplicate and out-of-order timestamps."""

    def _primed(self):
        processor = SampleProcessor()
        lat, lon = move(45.0, 7.0, 0.0, 100.0)
        processor.submit_fix(make_fix(0))
        processor.submit_fix(make_fix(10, lat=lat, lon=lon))
        return processor, lat, lon

    def test_out_of_order_fix_skipped(self):
        """A fix older than its predecessor is skipped without raising."""
        processor, lat, lon = self._primed()
        status_before = processor.status
        speeds_before = processor._speed_filter.values()
        tracks_before = processor._track_filter.values()

        new_lat, new_lon = move(lat, lon, 90.0, 100.0)
        assert processor.submit_fix(make_fix(5, lat=new_lat, lon=new_lon)) is None

        assert processor.fix_count == 3
        assert len(processor.samples) == 1
        assert processor._speed_filter.values() == speeds_before
        assert processor._track_filter.values() == tracks_before
        assert processor.status is status_before

    def test_duplicate_timestamp_skipped(self):
        """A fix with the same timestamp contributes nothing."""
        processor, lat, lon = self._primed()
        processor.submit_fix(make_fix(10, lat=lat, lon=lon))
        assert len(processor.samples) == 1
        assert processor.fix_count == 3

    def test_skipped_fix_used_for_next_delta(self):
        """The skipped fix stays in history as the base of the next delta."""
        processor, lat, lon = self._primed()
        skipped_lat, skipped_lon = move(lat, lon, 90.0, 100.0)
        processor.submit_fix(make_fix(10, lat=skipped_lat, lon=skipped_lon))

        next_lat, next_lon = move(skipped_lat, skipped_lon, 90.0, 100.0)
        processor.submit_fix(make_fix(20, lat=next_lat, lon=next_lon))
        assert len(processor.samples) == 2
        assert processor._speed_filter.values()[-1] == pytest.approx(10 * 1.94384, rel=1e-6)

    def test_mixed_timestamp_types_skipped(self):
        """Timestamps that cannot be compared are skipped, not raised."""
        processor = SampleProcessor()
        processor.submit_fix(make_fix(0))
        lat, lon = move(45.0, 7.0, 0.0, 100.0)
        naive = Fix(timestamp=datetime(2024, 6, 1, 10, 0, 10), latitude=lat, longitude=lon,
                    horizontal_accuracy=5.0)
        assert processor.submit_fix(naive) is None
        assert processor.samples == []

    def test_non_finite_position_ignored(self):
        """A fix without a usable position is dropped."""
        processor = SampleProcessor()
        processor.submit_fix(make_fix(0, lat=float('nan')))
        assert processor.fix_count == 0


class TestTurnAccumulation:
    """Tests for accumulating the turn, using an unsmoothed processor."""

    def test_square_turns(self):
        """North, east, then back west accumulates 90 + 180 degrees."""
        processor = SampleProcessor(ProcessorParams(smoothing_window=1))
        lat, lon = 0.0, 0.0
        processor.submit_fix(make_fix(0, lat=lat, lon=lon))
        for step, bearing in enumerate((0.0, 90.0, 270.0), start=1):
            lat, lon = move(lat, lon, bearing, 100.0)
            processor.submit_fix(make_fix(step * 10, lat=lat, lon=lon))

        assert processor.accumulated_turn_deg == pytest.approx(270.0, abs=0.01)

    def test_crossing_north_counts_short_way(self):
        """Turning from 350° to 10° adds 20 degrees, not 340."""
        processor = SampleProcessor(ProcessorParams(smoothing_window=1))
        lat, lon = 45.0, 7.0
        processor.submit_fix(make_fix(0, lat=lat, lon=lon))
        for step, bearing in enumerate((350.0, 10.0), start=1):
            lat, lon = move(lat, lon, bearing, 100.0)
            processor.submit_fix(make_fix(step * 10, lat=lat, lon=lon))

        assert processor.accumulated_turn_deg == pytest.approx(20.0, abs=0.01)

    def test_first_sample_sets_last_track_only(self):
        """The first sample of a cycle records the track without accumulating."""
        processor = SampleProcessor()
        lat, lon = move(45.0, 7.0, 123.0, 100.0)
        processor.submit_fix(make_fix(0))
        processor.submit_fix(make_fix(10, lat=lat, lon=lon))
        assert processor.accumulated_turn_deg == 0
        assert processor.turn.last_track_deg == pytest.approx(123.0, abs=1e-6)


class TestCycleCompletion:
    """End-to-end tests over simulated circling flights."""

    def test_estimates_wind_from_circle(self, circling_fixes):
        """A 20 kt groundspeed spread with minimum at track 270° gives 10 kt from 090°."""
        processor = SampleProcessor()
        estimate, _ = run_until_estimate(processor, circling_fixes)

        assert estimate is not None
        assert estimate.wind_speed_kt == pytest.approx(10.0, abs=0.25)
        assert estimate.wind_direction_from_deg == pytest.approx(90.0, abs=1.0)

        slowest = min(estimate.samples, key=lambda s: s.ground_speed_kt)
        assert slowest.track_deg == pytest.approx(270.0, abs=1.0)

    def test_altitude_averaged_in_feet(self, circling_fixes):
        """Mean altitude of the cycle is reported in feet."""
        estimate, _ = run_until_estimate(SampleProcessor(), circling_fixes)
        assert estimate.altitude_ft == pytest.approx(500.0 * 3.28084)

    def test_reset_after_completion(self, circling_fixes):
        """Extrema and turn state must not carry into the next cycle."""
        processor = SampleProcessor()
        estimate, _ = run_until_estimate(processor, circling_fixes)

        assert estimate is not None
        assert processor.extrema.max_ground_speed_kt is None
        assert processor.extrema.min_ground_speed_kt is None
        assert processor.extrema.track_at_min is None
        assert processor.accumulated_turn_deg == 0
        assert processor.turn.last_track_deg is None
        assert processor.samples == []
        assert len(processor._speed_filter) == 0
        assert len(processor._track_filter) == 0
        assert processor.state == ProcessorState.WAITING
        assert processor.fix_count > 0
        assert processor.last_estimate is estimate

    def test_turn_below_threshold_between_resets(self, circling_fixes):
        """Accumulated turn stays below the threshold while a cycle runs."""
        processor = SampleProcessor()
        for fix in circling_fixes:
            if processor.submit_fix(fix) is None:
                assert 0 <= processor.accumulated_turn_deg < 350

    def test_multiple_cycles(self):
        """Consecutive circles each produce their own estimate."""
        fixes = simulate_circling_flight(duration_s=240.0)
        estimates = []
        processor = SampleProcessor(on_result=estimates.append)
        for fix in fixes:
            processor.submit_fix(fix)

        assert len(estimates) >= 2
        for estimate in estimates:
            assert estimate.wind_speed_kt == pytest.approx(10.0, abs=0.5)
            assert estimate.wind_direction_from_deg == pytest.approx(90.0, abs=2.0)

    def test_lower_threshold_completes_sooner(self, circling_fixes):
        """The completion threshold can be overridden."""
        _, default_index = run_until_estimate(SampleProcessor(), circling_fixes)
        _, early_index = run_until_estimate(
            SampleProcessor(ProcessorParams(turn_threshold=180.0)), circling_fixes)
        assert early_index < default_index

    def test_missing_altitude(self):
        """Without altitude data the estimate has no altitude."""
        fixes = simulate_circling_flight(altitude_m=None)
        estimate, _ = run_until_estimate(SampleProcessor(), fixes)
        assert estimate.altitude_ft is None
        assert all(sample.altitude is None for sample in estimate.samples)

    def test_non_finite_altitude_treated_as_missing(self, circling_fixes):
        """A NaN altitude on one fix must not spoil the cycle altitude."""
        fixes = list(circling_fixes)
        fixes[5] = dataclasses.replace(fixes[5], altitude=float('nan'))
        fixes[9] = dataclasses.replace(fixes[9], altitude=float('inf'))

        estimate, _ = run_until_estimate(SampleProcessor(), fixes)

        assert math.isfinite(estimate.altitude_ft)
        assert estimate.altitude_ft == pytest.approx(500.0 * 3.28084)
        assert all(math.isfinite(sample.altitude) for sample in estimate.samples)

    def test_non_finite_altitude_unsmoothed(self):
        """Without smoothing, a NaN altitude becomes a sample without altitude."""
        processor = SampleProcessor(ProcessorParams(smooth_altitude=False))
        lat, lon = move(45.0, 7.0, 90.0, 100.0)
        processor.submit_fix(make_fix(0))
        processor.submit_fix(make_fix(1, lat=lat, lon=lon, altitude=float('nan')))
        assert processor.samples[0].altitude is None

    def test_unsmoothed_altitude(self):
        """With altitude smoothing off, samples carry the raw fix altitude."""
        processor = SampleProcessor(ProcessorParams(smooth_altitude=False))
        lat, lon = 45.0, 7.0
        processor.submit_fix(make_fix(0, altitude=100.0))
        for step, altitude in enumerate((110.0, 130.0), start=1):
            lat, lon = move(lat, lon, 0.0, 100.0)
            processor.submit_fix(make_fix(step, lat=lat, lon=lon, altitude=altitude))
        assert [s.altitude for s in processor.samples] == [110.0, 130.0]

    def test_smoothed_altitude(self):
        """With altitude smoothing on, samples carry the windowed mean."""
        processor = SampleProcessor()
        lat, lon = 45.0, 7.0
        processor.submit_fix(make_fix(0, altitude=100.0))
        for step, altitude in enumerate((110.0, 130.0), start=1):
            lat, lon = move(lat, lon, 0.0, 100.0)
            processor.submit_fix(make_fix(step, lat=lat, lon=lon, altitude=altitude))
        assert [s.altitude for s in processor.samples] == [pytest.approx(110.0), pytest.approx(120.0)]


class TestCallbacksAndControl:
    """Tests for callbacks, enable/disable and instance isolation."""

    def test_status_description_logged(self, caplog):
        processor = SampleProcessor()
        with caplog.at_level(logging.DEBUG, logger="turnwind.core.processor"):
            processor.submit_fix(make_fix(0))
            processor.submit_fix(make_fix(1, accuracy=25.0))
        assert "Waiting for more GPS data..." in caplog.text
        assert "Discarding low accuracy fix: 25.0 m" in caplog.text

    def test_status_callback_receives_every_report(self):
        statuses = []
        processor = SampleProcessor(on_status=statuses.append)
        lat, lon = move(45.0, 7.0, 0.0, 100.0)
        processor.submit_fix(make_fix(0, accuracy=99.0))
        processor.submit_fix(make_fix(1))
        processor.submit_fix(make_fix(11, lat=lat, lon=lon))

        assert isinstance(statuses[0], LowAccuracyFix)
        assert statuses[1] == Waiting()
        assert isinstance(statuses[2], Active)

    def test_failing_result_callback_does_not_raise(self, circling_fixes):
        """Errors in the result sink are logged, not propagated."""
        def broken_sink(estimate):
            raise RuntimeError("sink unavailable")

        processor = SampleProcessor(on_result=broken_sink)
        estimate, _ = run_until_estimate(processor, circling_fixes)
        assert estimate is not None

    def test_disable_resets_and_suppresses(self, circling_fixes):
        """Disabling clears all state and ignores fixes until re-enabled."""
        processor = SampleProcessor()
        for fix in circling_fixes[:20]:
            processor.submit_fix(fix)
        assert processor.accumulated_turn_deg > 0

        processor.disable()
        assert processor.fix_count == 0
        assert processor.samples == []
        assert processor.accumulated_turn_deg == 0
        assert processor.extrema.max_ground_speed_kt is None
        assert processor.status == Waiting()

        assert processor.submit_fix(circling_fixes[20]) is None
        assert processor.fix_count == 0

        processor.enable()
        processor.submit_fix(circling_fixes[21])
        assert processor.fix_count == 1
        assert processor.status == Waiting()

    def test_instances_are_independent(self, circling_fixes):
        """Two processors never share state."""
        first = SampleProcessor()
        second = SampleProcessor()
        for fix in circling_fixes[:10]:
            first.submit_fix(fix)

        assert first.fix_count == 10
        assert second.fix_count == 0
        assert second.samples == []
        assert second.extrema.max_ground_speed_kt is None

    def test_invalid_params_rejected(self):
        """Out-of-range parameters fail at construction."""
        with pytest.raises(ValidationError):
            SampleProcessor(ProcessorParams(smoothing_window=0))
        with pytest.raises(ValidationError):
            SampleProcessor(ProcessorParams(turn_threshold=400.0))
        with pytest.raises(ValidationError):
            SampleProcessor(ProcessorParams(altitude_unit="furlongs"))
