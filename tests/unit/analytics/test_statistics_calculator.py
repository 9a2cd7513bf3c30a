"""
Tests for descriptive statistics.

Verifies floor-index quartiles, population variance, the shape-statistic
guards and 4-decimal rounding.
"""

import math

import pytest

from analytics_framework.analytics import statistics_calculator
from analytics_framework.analytics.analysis_utils import (
    floor_quantile,
    quartiles,
    round_half_away,
    safe_divide,
)
from analytics_framework.analytics.dataset import Dataset
from analytics_framework.analytics.statistics_calculator import (
    DescriptiveStatisticsCalculator,
    calculate_mode,
)


@pytest.fixture
def calculator():
    return DescriptiveStatisticsCalculator()


class TestRoundHalfAway:
    """Test rounding helper."""

    def test_halves_round_away_from_zero(self):
        assert round_half_away(2.5, 0) == 3.0
        assert round_half_away(-2.5, 0) == -3.0
        assert round_half_away(0.5, 0) == 1.0
        assert round_half_away(1.25, 1) == 1.3

    def test_default_four_decimals(self):
        assert round_half_away(1 / 3) == 0.3333
        assert round_half_away(2 / 3) == 0.6667

    def test_non_finite_becomes_zero(self):
        assert round_half_away(float("nan")) == 0.0
        assert round_half_away(float("inf")) == 0.0

    def test_negative_zero_normalised(self):
        result = round_half_away(-0.00001)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0


class TestQuartiles:
    """Test floor-index quantiles."""

    def test_odd_length(self):
        assert quartiles([1, 2, 3, 4, 100]) == {"q1": 2, "median": 3, "q3": 4}

    def test_even_length_uses_upper_middle(self):
        assert quartiles([1, 2, 3, 4]) == {"q1": 2, "median": 3, "q3": 4}

    def test_single_value(self):
        assert quartiles([7]) == {"q1": 7, "median": 7, "q3": 7}

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            floor_quantile([], 0.5)

    def test_safe_divide(self):
        assert safe_divide(1, 0) == 0.0
        assert safe_divide(1, 0, default=-1.0) == -1.0
        assert safe_divide(6, 3) == 2.0


class TestCalculateMode:
    """Test mode selection."""

    def test_most_frequent(self):
        assert calculate_mode([1, 2, 2, 2, 3, 3]) == 2.0

    def test_ties_resolve_to_lowest(self):
        assert calculate_mode([1, 1, 2, 2, 3]) == 1.0

    def test_all_unique_returns_smallest(self):
        assert calculate_mode([4, 5, 9]) == 4.0


class TestDescriptiveStatisticsCalculator:
    """Test per-column profiles."""

    def test_skewed_column(self, calculator):
        profile = calculator.profile_values([1, 2, 3, 4, 100])

        assert profile.count == 5
        assert profile.mean == 22.0
        assert profile.median == 3.0
        assert profile.q1 == 2.0
        assert profile.q3 == 4.0
        assert profile.iqr == 2.0
        assert profile.min_value == 1.0
        assert profile.max_value == 100.0
        assert profile.value_range == 99.0
        assert profile.mode == 1.0
        assert profile.variance == 1522.0
        assert profile.std_dev == round_half_away(math.sqrt(1522.0))
        assert profile.skewness > 0

    def test_unsorted_input(self, calculator):
        profile = calculator.profile_values([100, 4, 1, 3, 2])
        assert (profile.mean, profile.median, profile.q1, profile.q3) == (22.0, 3.0, 2.0, 4.0)

    def test_symmetric_shape(self, calculator):
        profile = calculator.profile_values([1, 2, 3, 4, 5])

        assert profile.variance == 2.0
        assert profile.skewness == 0.0
        assert profile.kurtosis == pytest.approx(2.625)

    def test_constant_column(self, calculator):
        profile = calculator.profile_values([5, 5, 5, 5])

        assert profile.variance == 0.0
        assert profile.std_dev == 0.0
        assert profile.skewness == 0.0
        assert profile.kurtosis == 0.0
        assert profile.iqr == 0.0

    def test_skewness_guard_for_two_values(self, calculator):
        profile = calculator.profile_values([1, 10])
        assert profile.skewness == 0.0
        assert profile.kurtosis == 0.0

    def test_kurtosis_guard_for_three_values(self, calculator):
        profile = calculator.profile_values([1, 2, 10])
        assert profile.skewness != 0.0
        assert profile.kurtosis == 0.0

    def test_single_value(self, calculator):
        profile = calculator.profile_values([7])

        assert profile.count == 1
        assert profile.mean == profile.median == profile.mode == 7.0
        assert profile.variance == 0.0

    def test_empty_and_non_finite(self, calculator):
        assert calculator.profile_values([]) is None
        assert calculator.profile_values([float("nan"), float("inf")]) is None

    def test_overflowing_mean_reported_as_zero(self, calculator, monkeypatch):
        messages = []
        monkeypatch.setattr(statistics_calculator.logger, "debug", messages.append)

        profile = calculator.profile_values([1e308, 1.5e308])

        assert profile.count == 2
        assert profile.mean == 0.0
        assert profile.variance == 0.0
        assert profile.min_value == 1e308
        assert profile.max_value == 1.5e308
        assert len(messages) == 1
        assert "overflowed" in messages[0]

    def test_results_rounded(self, calculator):
        profile = calculator.profile_values([1, 2, 2])
        assert profile.mean == 1.6667

    def test_ordering_invariant(self, calculator):
        profile = calculator.profile_values([9, 1, 5, 3, 3, 8, 2, 7])
        assert profile.min_value <= profile.q1 <= profile.median <= profile.q3 <= profile.max_value
        assert profile.std_dev >= 0

    def test_calculate_skips_bad_cells(self, calculator):
        dataset = Dataset.from_rows([
            {"x": 1, "y": "a"},
            {"x": "bad", "y": "b"},
            {"x": "3", "y": "c"},
            {"x": None, "y": "d"},
        ])

        stats = calculator.calculate(dataset, ["x"])

        assert list(stats) == ["x"]
        assert stats["x"].count == 2
        assert stats["x"].mean == 2.0

    def test_calculate_omits_column_without_values(self, calculator):
        dataset = Dataset.from_rows([{"x": None}, {"x": "n/a"}])
        assert calculator.calculate(dataset, ["x"]) == {}

    def test_to_dict_keys(self, calculator):
        result = calculator.profile_values([1, 2, 3]).to_dict()

        assert list(result) == [
            "count", "mean", "median", "mode", "min", "max", "range",
            "q1", "q3", "iqr", "variance", "std_dev", "skewness", "kurtosis",
        ]
