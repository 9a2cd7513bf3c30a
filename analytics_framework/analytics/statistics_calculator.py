"""
Statistics Calculator - descriptive statistics for numeric columns.

Architecture:
    DescriptiveStatisticsCalculator is responsible for:
    1. Central tendency (mean, floor-index median, mode)
    2. Dispersion (min, max, range, quartiles, IQR, population variance)
    3. Shape (adjusted Fisher-Pearson skewness, bias-corrected excess kurtosis)

Design Decisions:
    - Unparseable and non-finite cells are dropped, never fatal; a column
      with a single valid value still gets a profile
    - Variance divides by n, not n - 1
    - Quartiles use sorted index floor(n * p) with no interpolation
    - Skewness is 0 when n <= 2 and kurtosis is 0 when n <= 3, or when the
      column is constant, so NaN/inf never reach the output
    - Every reported float is rounded half away from zero to 4 decimals

Usage:
    calculator = DescriptiveStatisticsCalculator()
    stats = calculator.calculate(dataset, numeric_columns)
    print(stats["revenue"].mean)
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from analytics_framework.analytics.analysis_utils import quartiles, round_half_away
from analytics_framework.analytics.dataset import Dataset
from analytics_framework.analytics.profile_result import ColumnProfile
from analytics_framework.core.constants import STAT_DECIMALS

logger = logging.getLogger(__name__)


def sorted_numeric_values(dataset: Dataset, column: str) -> np.ndarray:
    """Valid numbers of a column as an ascending float64 array."""
    return np.sort(np.asarray(dataset.numeric_values(column), dtype=np.float64))


def calculate_mode(sorted_values: Sequence[float]) -> float:
    """
    Most frequent value of an ascending sequence.

    Ties resolve to the first value reached while scanning upwards, i.e. the
    lowest of the tied values.
    """
    mode = sorted_values[0]
    max_run = 0
    run_value = sorted_values[0]
    run_length = 0

    for value in sorted_values:
        if value == run_value:
            run_length += 1
        else:
            run_value = value
            run_length = 1
        if run_length > max_run:
            max_run = run_length
            mode = run_value

    return float(mode)


def calculate_skewness(values: np.ndarray, mean: float, std_dev: float) -> float:
    """Adjusted Fisher-Pearson coefficient; 0 when std_dev is 0 or n <= 2."""
    n = values.size
    if std_dev == 0 or n <= 2:
        return 0.0
    cubed = float(np.sum(((values - mean) / std_dev) ** 3))
    return (n / ((n - 1) * (n - 2))) * cubed


def calculate_kurtosis(values: np.ndarray, mean: float, std_dev: float) -> float:
    """Bias-corrected excess kurtosis; 0 when std_dev is 0 or n <= 3."""
    n = values.size
    if std_dev == 0 or n <= 3:
        return 0.0
    fourth = float(np.sum(((values - mean) / std_dev) ** 4))
    leading = (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3))
    correction = (3 * (n - 1) ** 2) / ((n - 2) * (n - 3))
    return leading * fourth - correction


class DescriptiveStatisticsCalculator:
    """
    Per-column descriptive statistics.

    Example:
        >>> calculator = DescriptiveStatisticsCalculator()
        >>> profile = calculator.profile_values([1, 2, 3, 4, 100])
        >>> profile.mean, profile.median, profile.q1, profile.q3
        (22.0, 3.0, 2.0, 4.0)
    """

    def __init__(self, decimals: int = STAT_DECIMALS):
        self.decimals = decimals

    def calculate(self, dataset: Dataset, numeric_columns: Iterable[str]) -> Dict[str, ColumnProfile]:
        """
        Profile every numeric column that has at least one valid value.

        Args:
            dataset: Dataset to analyze
            numeric_columns: Columns chosen by the numeric classifier

        Returns:
            Mapping of column name to ColumnProfile
        """
        stats: Dict[str, ColumnProfile] = {}
        for column in numeric_columns:
            profile = self.profile_values(sorted_numeric_values(dataset, column), presorted=True)
            if profile is None:
                logger.debug(f"No valid numeric values in '{column}', skipping descriptive stats")
                continue
            stats[column] = profile
        return stats

    def profile_values(self, values: Sequence[float], presorted: bool = False) -> Optional[ColumnProfile]:
        """
        Build a ColumnProfile from raw numbers.

        Non-finite values are dropped. Returns None when nothing is left.
        """
        arr = np.asarray(values, dtype=np.float64)
        arr = arr[np.isfinite(arr)]
        if arr.size == 0:
            return None
        if not presorted:
            arr = np.sort(arr)

        n = int(arr.size)
        minimum = float(arr[0])
        maximum = float(arr[-1])
        mean = float(np.mean(arr))

        if minimum == maximum:
            # Constant column; avoid floating noise in the squared deviations
            variance = 0.0
        else:
            variance = float(np.mean((arr - mean) ** 2))
        std_dev = math.sqrt(variance)
        if not (math.isfinite(mean) and math.isfinite(variance)):
            logger.debug(f"Mean or variance overflowed float64 (mean={mean}, variance={variance}); reported as 0")

        sorted_list: List[float] = arr.tolist()
        quarts = quartiles(sorted_list)

        r = self._round
        return ColumnProfile(
            count=n,
            mean=r(mean),
            median=r(quarts["median"]),
            mode=r(calculate_mode(sorted_list)),
            min_value=r(minimum),
            max_value=r(maximum),
            value_range=r(maximum - minimum),
            q1=r(quarts["q1"]),
            q3=r(quarts["q3"]),
            iqr=r(quarts["q3"] - quarts["q1"]),
            variance=r(variance),
            std_dev=r(std_dev),
            skewness=r(calculate_skewness(arr, mean, std_dev)),
            kurtosis=r(calculate_kurtosis(arr, mean, std_dev)),
        )

    def _round(self, value: float) -> float:
        return round_half_away(value, self.decimals)
