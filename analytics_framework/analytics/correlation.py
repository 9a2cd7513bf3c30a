"""
Pearson correlation between numeric columns.

Every ordered pair of numeric columns is computed from the rows where both
cells parse; self-pairs are fixed at 1. Pairs with fewer than two complete
observations, or with a zero-variance side, get a coefficient of 0.
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

import numpy as np

from analytics_framework.analytics.analysis_utils import round_half_away
from analytics_framework.analytics.buckets import CORRELATION_STRENGTH
from analytics_framework.analytics.dataset import Dataset, parse_number
from analytics_framework.analytics.profile_result import CorrelationMatrix, CorrelationPair
from analytics_framework.core.constants import (
    MIN_CORRELATION_PAIRS,
    STAT_DECIMALS,
    STRONG_CORRELATION_THRESHOLD,
)

logger = logging.getLogger(__name__)


def pearson_coefficient(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Pearson r from raw sums.

    numerator = n·Σxy − Σx·Σy
    denominator = √((n·Σx² − (Σx)²)(n·Σy² − (Σy)²))

    Returns:
        Coefficient clamped to [-1, 1], or 0 when undefined
    """
    n = len(xs)
    if n < MIN_CORRELATION_PAIRS:
        return 0.0

    x = np.asarray(xs, dtype=np.float64)
    y = np.asarray(ys, dtype=np.float64)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))
    sum_y2 = float(np.sum(y * y))

    numerator = n * sum_xy - sum_x * sum_y
    radicand = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if not radicand > 0 or not math.isfinite(radicand):
        return 0.0

    coefficient = numerator / math.sqrt(radicand)
    if not math.isfinite(coefficient):
        return 0.0
    return max(-1.0, min(1.0, coefficient))


class CorrelationEngine:
    """
    Builds the correlation matrix and ranks strong pairs.

    Attributes:
        strong_threshold: |r| must exceed this to be listed as a strong pair
    """

    def __init__(self, strong_threshold: float = STRONG_CORRELATION_THRESHOLD):
        self.strong_threshold = strong_threshold

    def paired_values(self, dataset: Dataset, column1: str, column2: str) -> Tuple[List[float], List[float]]:
        """Values of two columns from the rows where both cells parse."""
        xs: List[float] = []
        ys: List[float] = []
        for row in dataset.rows:
            x = parse_number(row.get(column1))
            if x is None:
                continue
            y = parse_number(row.get(column2))
            if y is None:
                continue
            xs.append(x)
            ys.append(y)
        return xs, ys

    def calculate(self, dataset: Dataset, numeric_columns: Sequence[str]) -> CorrelationMatrix:
        matrix: Dict[str, Dict[str, float]] = {column: {} for column in numeric_columns}

        for i, column1 in enumerate(numeric_columns):
            matrix[column1][column1] = 1.0
            for column2 in numeric_columns[i + 1:]:
                xs, ys = self.paired_values(dataset, column1, column2)
                coefficient = round_half_away(pearson_coefficient(xs, ys), STAT_DECIMALS)
                matrix[column1][column2] = coefficient
                matrix[column2][column1] = coefficient

        strong_pairs = self.strong_pairs(matrix)
        logger.debug(
            f"Correlation matrix for {len(numeric_columns)} columns, "
            f"{len(strong_pairs)} strong pairs"
        )
        return CorrelationMatrix(matrix=matrix, strong_pairs=strong_pairs)

    def strong_pairs(self, matrix: Dict[str, Dict[str, float]]) -> List[CorrelationPair]:
        """
        Unordered pairs with |r| above the threshold, strongest first.

        column1 is always the lexically smaller name; ties in |r| keep
        matrix order.
        """
        pairs = []
        for column1, row in matrix.items():
            for column2, coefficient in row.items():
                if column1 < column2 and abs(coefficient) > self.strong_threshold:
                    pairs.append(CorrelationPair(
                        column1=column1,
                        column2=column2,
                        correlation=coefficient,
                        strength=CORRELATION_STRENGTH.classify(coefficient),
                    ))
        pairs.sort(key=lambda pair: abs(pair.correlation), reverse=True)
        return pairs
