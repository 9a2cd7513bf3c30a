"""
Numeric helpers shared by the statistical components.

Quartiles are read off the sorted array at index floor(n * p) with no
interpolation, so the "median" of an even-length column is the upper of the
two middle values. Outlier fences reuse the same routine as the descriptive
statistics.
"""

import math
from typing import Dict, Sequence

from analytics_framework.core.constants import STAT_DECIMALS


def round_half_away(value: float, places: int = STAT_DECIMALS) -> float:
    """
    Round to a fixed number of decimals, halves away from zero.

    Unlike the builtin round() (banker's rounding), 2.5 -> 3 and -2.5 -> -3.

    Example:
        >>> round_half_away(2.5, 0)
        3.0
        >>> round_half_away(-2.5, 0)
        -3.0
        >>> round_half_away(1 / 3)
        0.3333
    """
    value = float(value)
    if not math.isfinite(value):
        return 0.0

    factor = 10 ** places
    scaled = value * factor
    if not math.isfinite(scaled):
        # Magnitude too large for the scaled representation to matter
        return value

    rounded = math.copysign(math.floor(abs(scaled) + 0.5), scaled) / factor
    # Normalise -0.0
    return rounded + 0.0


def floor_quantile(sorted_values: Sequence[float], p: float) -> float:
    """Value at index floor(n * p) of an ascending sequence."""
    if not sorted_values:
        raise ValueError("floor_quantile requires at least one value")
    return sorted_values[int(math.floor(len(sorted_values) * p))]


def quartiles(sorted_values: Sequence[float]) -> Dict[str, float]:
    """
    Floor-index quartiles of an ascending sequence.

    Returns:
        Dictionary with q1, median and q3
    """
    return {
        "q1": floor_quantile(sorted_values, 0.25),
        "median": floor_quantile(sorted_values, 0.5),
        "q3": floor_quantile(sorted_values, 0.75),
    }


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default when the result would not be finite."""
    if denominator == 0:
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default
