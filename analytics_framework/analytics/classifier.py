"""
Numeric column classification.

A column is numeric when, among the non-missing cells of the first
NUMERIC_SAMPLE_SIZE rows, strictly more than NUMERIC_RATIO_THRESHOLD of them
parse as finite numbers. The heuristic is lossy: a column of
mostly numbers with a few "N/A" strings is numeric, a column of "A01"-style
IDs is not.
"""

import logging
from typing import List

from analytics_framework.analytics.dataset import Dataset, is_missing, parse_number
from analytics_framework.core.constants import NUMERIC_SAMPLE_SIZE, NUMERIC_RATIO_THRESHOLD

logger = logging.getLogger(__name__)


class NumericColumnClassifier:
    """
    Decides which columns feed the numeric components.

    Attributes:
        sample_size: Number of leading rows inspected per column
        threshold: Required fraction of parseable non-missing cells (strict)
    """

    def __init__(
        self,
        sample_size: int = NUMERIC_SAMPLE_SIZE,
        threshold: float = NUMERIC_RATIO_THRESHOLD
    ):
        self.sample_size = sample_size
        self.threshold = threshold

    def numeric_ratio(self, dataset: Dataset, column: str) -> float:
        """
        Fraction of non-missing sampled cells that parse as numbers.

        Returns:
            Ratio in [0, 1]; 0.0 when no sampled cell is present
        """
        eligible = [
            value for value in dataset.column_values(column, limit=self.sample_size)
            if not is_missing(value)
        ]
        if not eligible:
            return 0.0

        numeric_count = sum(1 for value in eligible if parse_number(value) is not None)
        return numeric_count / len(eligible)

    def is_numeric(self, dataset: Dataset, column: str) -> bool:
        return self.numeric_ratio(dataset, column) > self.threshold

    def classify(self, dataset: Dataset) -> List[str]:
        """
        Numeric columns of the dataset, in first-row key order.
        """
        numeric_columns = [column for column in dataset.columns if self.is_numeric(dataset, column)]
        logger.debug(
            f"Classified {len(numeric_columns)} of {dataset.column_count} columns as numeric: "
            f"{numeric_columns}"
        )
        return numeric_columns
