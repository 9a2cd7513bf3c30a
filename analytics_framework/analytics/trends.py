"""
Linear trend estimation over row order.

Each numeric column is regressed on the original row index of its valid
cells (gaps from unparseable cells keep their index). The prediction is the
fitted value at x = number of valid points.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from analytics_framework.analytics.analysis_utils import round_half_away, safe_divide
from analytics_framework.analytics.buckets import (
    PREDICTION_CONFIDENCE,
    TREND_SIGNIFICANCE,
    trend_direction,
)
from analytics_framework.analytics.dataset import Dataset
from analytics_framework.analytics.profile_result import TrendPrediction, TrendReport
from analytics_framework.core.constants import MIN_TREND_POINTS, SLOPE_DECIMALS, STAT_DECIMALS

logger = logging.getLogger(__name__)


def linear_fit(points: Sequence[Tuple[int, float]]) -> Tuple[float, float, float]:
    """
    Ordinary least squares of value on index.

    Returns:
        (slope, intercept, r_squared); r_squared is 0 for a constant series
    """
    n = len(points)
    x = np.asarray([index for index, _ in points], dtype=np.float64)
    y = np.asarray([value for _, value in points], dtype=np.float64)

    if np.all(y == y[0]):
        # Constant series: flat line, no variance to explain
        return 0.0, float(y[0]), 0.0

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))

    slope = safe_divide(n * sum_xy - sum_x * sum_y, n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    total_sum_squares = float(np.sum((y - mean_y) ** 2))
    residual_sum_squares = float(np.sum((y - (slope * x + intercept)) ** 2))

    if total_sum_squares == 0:
        r_squared = 0.0
    else:
        r_squared = 1 - safe_divide(residual_sum_squares, total_sum_squares)

    return slope, intercept, r_squared


class TrendAnalyzer:
    """Per-column linear trend, direction and one-step-ahead prediction."""

    def analyze(self, dataset: Dataset, numeric_columns: Iterable[str]) -> Dict[str, TrendReport]:
        trends: Dict[str, TrendReport] = {}
        for column in numeric_columns:
            report = self.analyze_points(dataset.indexed_numeric_values(column))
            if report is None:
                logger.debug(f"'{column}' has too few valid points for trend analysis")
                continue
            trends[column] = report
        return trends

    def analyze_points(self, points: Sequence[Tuple[int, float]]) -> Optional[TrendReport]:
        """
        Trend report for (row index, value) points.

        Returns None when there are MIN_TREND_POINTS or fewer points.
        """
        if len(points) <= MIN_TREND_POINTS:
            return None

        slope, intercept, r_squared = linear_fit(points)
        next_value = slope * len(points) + intercept

        return TrendReport(
            slope=round_half_away(slope, SLOPE_DECIMALS),
            intercept=round_half_away(intercept, STAT_DECIMALS),
            r_squared=round_half_away(r_squared, STAT_DECIMALS),
            direction=trend_direction(slope),
            significance=TREND_SIGNIFICANCE.classify(r_squared),
            prediction=TrendPrediction(
                next_value=round_half_away(next_value, STAT_DECIMALS),
                confidence=PREDICTION_CONFIDENCE.classify(r_squared),
            ),
        )
