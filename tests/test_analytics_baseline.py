"""Tests for strainlab.analytics.baseline -- rolling personal baselines."""

import math

import pytest

from strainlab.analytics.baseline import (
    BaselineEngine,
    BaselinePhase,
    DEFAULT_SLEEP_NEED_MIN,
    personal_sleep_need,
)
from strainlab.config import ConfigurationError

from tests.conftest import DAY


class TestConstruction:
    def test_defaults(self):
        engine = BaselineEngine()
        assert engine.window_days == 7
        assert engine.min_days == 7

    def test_min_days_override(self):
        assert BaselineEngine(window_days=14, min_days=5).min_days == 5

    def test_zero_window_rejected(self):
        with pytest.raises(ConfigurationError):
            BaselineEngine(window_days=0)

    def test_zero_min_days_rejected(self):
        with pytest.raises(ConfigurationError):
            BaselineEngine(min_days=0)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            BaselineEngine(window_days=-3)


class TestPrimitives:
    def test_rolling_average_uses_last_days(self):
        engine = BaselineEngine()
        assert engine.calculate_rolling_average([1.0, 2.0, 3.0, 10.0, 20.0], 2) == 15.0

    def test_rolling_average_more_days_than_values(self):
        engine = BaselineEngine()
        assert engine.calculate_rolling_average([2.0, 4.0], 7) == 3.0

    def test_rolling_average_non_positive_days(self):
        with pytest.raises(ConfigurationError):
            BaselineEngine().calculate_rolling_average([1.0, 2.0], 0)

    def test_detect_outliers(self):
        values = [50.0, 52.0, 48.0, 51.0, 49.0, 200.0, 50.0, 53.0]
        assert 200.0 not in BaselineEngine().detect_outliers(values)

    def test_smooth_values(self):
        assert BaselineEngine().smooth_values([1.0, 2.0, 3.0], 3) == pytest.approx([1.5, 2.0, 2.5])


class TestCompute:
    def test_not_established_with_too_few_days(self):
        estimate = BaselineEngine().compute([50.0] * 6)
        assert estimate.value is None
        assert not estimate.established
        assert estimate.days_available == 6
        assert estimate.days_remaining == 1

    def test_empty_history(self):
        estimate = BaselineEngine().compute([])
        assert estimate.value is None
        assert estimate.days_remaining == 7

    def test_constant_history(self):
        estimate = BaselineEngine().compute([50.0] * 7)
        assert estimate.established
        assert estimate.value == pytest.approx(50.0)

    def test_single_spike_does_not_move_baseline(self):
        values = [50.0, 52.0, 48.0, 51.0, 49.0, 200.0, 50.0, 53.0]
        estimate = BaselineEngine().compute(values)
        assert estimate.value == pytest.approx(50.0, abs=2.0)

    def test_non_finite_values_ignored(self):
        estimate = BaselineEngine().compute([50.0] * 7 + [math.nan, math.inf])
        assert estimate.value == pytest.approx(50.0)
        assert estimate.days_available == 7

    def test_non_finite_values_do_not_count_towards_minimum(self):
        estimate = BaselineEngine().compute([50.0] * 6 + [math.nan])
        assert not estimate.established

    def test_never_negative(self):
        estimate = BaselineEngine().compute([-5.0] * 7)
        assert estimate.value == 0.0

    def test_uses_most_recent_window(self):
        estimate = BaselineEngine(window_days=3, min_days=3, smoothing_window=1).compute(
            [10.0, 10.0, 10.0, 40.0, 40.0, 40.0]
        )
        assert estimate.value == pytest.approx(40.0)


class TestBuildUserBaseline:
    def test_established(self):
        baseline = BaselineEngine().build_user_baseline([60.0] * 7, [52.0] * 7, DAY)
        assert baseline.hrv_baseline == pytest.approx(60.0)
        assert baseline.rhr_baseline == pytest.approx(52.0)
        assert baseline.established
        assert baseline.computed_on == DAY

    def test_partial_history(self):
        baseline = BaselineEngine().build_user_baseline([60.0] * 7, [52.0] * 3, DAY)
        assert baseline.hrv_baseline is not None
        assert baseline.rhr_baseline is None
        assert not baseline.established

    def test_carries_profile(self):
        baseline = BaselineEngine().build_user_baseline(
            [], [], DAY, sleep_need_minutes=480.0, max_heart_rate=185.0,
        )
        assert baseline.sleep_need_minutes == 480.0
        assert baseline.max_heart_rate == 185.0


class TestAdaptive:
    def test_empty(self):
        result = BaselineEngine().adaptive([])
        assert result.phase == BaselinePhase.INITIAL
        assert result.confidence == 0.0

    def test_calibrating(self):
        result = BaselineEngine().adaptive([50.0] * 8)
        assert result.phase == BaselinePhase.CALIBRATING
        assert result.value == pytest.approx(50.0)
        assert not result.is_reliable

    def test_mature(self):
        result = BaselineEngine().adaptive([50.0] * 30)
        assert result.phase == BaselinePhase.MATURE
        assert result.is_reliable

    def test_is_reliable(self):
        engine = BaselineEngine()
        assert engine.is_reliable([50.0, 51.0, 49.0, 50.0, 52.0, 48.0, 50.0])
        assert not engine.is_reliable([50.0] * 3)


class TestPersonalSleepNeed:
    def test_too_little_history(self):
        assert personal_sleep_need([480.0] * 3, [80.0] * 3) == DEFAULT_SLEEP_NEED_MIN

    def test_mean_of_good_nights(self):
        durations = [420.0, 480.0, 480.0, 400.0, 480.0, 390.0, 480.0]
        recoveries = [40.0, 70.0, 80.0, 30.0, 90.0, 20.0, 75.0]
        assert personal_sleep_need(durations, recoveries) == pytest.approx(480.0)

    def test_clamped_to_range(self):
        assert personal_sleep_need([700.0] * 7, [90.0] * 7) == 600.0
