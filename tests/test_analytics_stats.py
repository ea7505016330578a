"""Tests for strainlab.analytics.stats -- statistics toolkit."""

import pytest

from strainlab.analytics import stats


class TestMeanAndDeviation:
    def test_mean_empty(self):
        assert stats.mean([]) == 0.0

    def test_mean(self):
        assert stats.mean([1.0, 2.0, 3.0, 6.0]) == pytest.approx(3.0)

    def test_standard_deviation_single_value(self):
        assert stats.standard_deviation([5.0]) == 0.0

    def test_standard_deviation_uses_sample_divisor(self):
        # var = ((1-2.5)^2 + (2-2.5)^2 + (3-2.5)^2 + (4-2.5)^2) / 3 = 5/3
        assert stats.standard_deviation([1.0, 2.0, 3.0, 4.0]) == pytest.approx((5 / 3) ** 0.5)

    def test_median_odd(self):
        assert stats.median([3.0, 1.0, 2.0]) == 2.0

    def test_median_even(self):
        assert stats.median([4.0, 1.0, 3.0, 2.0]) == 2.5

    def test_median_empty(self):
        assert stats.median([]) == 0.0

    @pytest.mark.parametrize("xs", [
        [5.0],
        [3.0, 1.0],
        [9.0, -2.0, 4.5, 4.5, 0.1],
        [50.0, 52.0, 48.0, 51.0, 49.0, 200.0],
    ])
    def test_median_between_min_and_max(self, xs):
        assert min(xs) <= stats.median(xs) <= max(xs)

    @pytest.mark.parametrize("xs", [[7.3] * 2, [0.1] * 10, [55.0] * 30])
    def test_standard_deviation_constant_is_zero(self, xs):
        assert stats.standard_deviation(xs) == pytest.approx(0.0, abs=1e-12)


class TestQuartiles:
    def test_fewer_than_four(self):
        assert stats.quartiles([1.0, 2.0, 3.0]) == (0.0, 2.0, 0.0)

    def test_index_based(self):
        # sorted[n // 4] and sorted[3n // 4], not interpolated
        q1, q2, q3 = stats.quartiles([8.0, 1.0, 7.0, 2.0, 6.0, 3.0, 5.0, 4.0])
        assert q1 == 3.0
        assert q2 == 4.5
        assert q3 == 7.0

    def test_does_not_mutate_input(self):
        xs = [3.0, 1.0, 2.0, 4.0]
        stats.quartiles(xs)
        assert xs == [3.0, 1.0, 2.0, 4.0]

    def test_interquartile_range(self):
        assert stats.interquartile_range([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0]) == 4.0


class TestPercentile:
    def test_interpolated(self):
        # rank = 0.5 * 3 = 1.5 -> halfway between 2 and 3
        assert stats.percentile([4.0, 1.0, 3.0, 2.0], 50) == pytest.approx(2.5)

    def test_extremes(self):
        assert stats.percentile([5.0, 1.0, 9.0], 0) == 1.0
        assert stats.percentile([5.0, 1.0, 9.0], 100) == 9.0

    def test_out_of_range_is_clamped(self):
        assert stats.percentile([5.0, 1.0, 9.0], 150) == 9.0
        assert stats.percentile([5.0, 1.0, 9.0], -10) == 1.0

    def test_empty(self):
        assert stats.percentile([], 50) == 0.0


class TestMovingAverage:
    def test_same_length(self):
        assert len(stats.moving_average([1.0, 2.0, 3.0, 4.0, 5.0], 3)) == 5

    def test_window_clipped_at_ends(self):
        result = stats.moving_average([1.0, 2.0, 3.0, 4.0, 5.0], 3)
        assert result == pytest.approx([1.5, 2.0, 3.0, 4.0, 4.5])

    def test_constant_sequence_unchanged(self):
        assert stats.moving_average([7.0] * 6, 3) == pytest.approx([7.0] * 6)

    def test_non_positive_window(self):
        assert stats.moving_average([1.0, 5.0], 0) == [1.0, 5.0]

    def test_empty(self):
        assert stats.moving_average([], 3) == []


class TestRemoveOutliers:
    def test_short_input_unchanged(self):
        assert stats.remove_outliers([1.0, 100.0, 2.0]) == [1.0, 100.0, 2.0]

    def test_drops_spike_keeps_order(self):
        values = [50.0, 52.0, 48.0, 51.0, 49.0, 200.0, 50.0, 53.0]
        assert stats.remove_outliers(values) == [50.0, 52.0, 48.0, 51.0, 49.0, 50.0, 53.0]

    def test_result_within_fence(self):
        values = [50.0, 52.0, 48.0, 51.0, 49.0, 200.0, 50.0, 53.0, 5.0]
        q1, _, q3 = stats.quartiles(values)
        iqr = q3 - q1
        for v in stats.remove_outliers(values):
            assert q1 - 1.5 * iqr <= v <= q3 + 1.5 * iqr

    @pytest.mark.parametrize("xs", [
        [],
        [1.0, 100.0],
        [4.0, 4.0, 4.0, 4.0],
        [50.0, 52.0, 48.0, 51.0, 49.0, 200.0, 50.0, 53.0, 5.0],
    ])
    def test_never_longer(self, xs):
        assert len(stats.remove_outliers(xs)) <= len(xs)


class TestTrendHelpers:
    def test_linear_trend_rising(self):
        assert stats.linear_trend([1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.0)

    def test_linear_trend_short(self):
        assert stats.linear_trend([3.0]) == 0.0

    def test_coefficient_of_variation_constant(self):
        assert stats.coefficient_of_variation([10.0, 10.0, 10.0]) == 0.0

    def test_weighted_average_favours_recent(self):
        assert stats.weighted_average([0.0, 10.0]) > 5.0
