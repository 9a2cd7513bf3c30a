"""
IQR-fence outlier detection.

Fences come from the same floor-index quartiles as the descriptive
statistics. All rows are scanned in original order; the reported sample is
the first MAX_OUTLIER_SAMPLES outliers by row index, not a ranking.
"""

import logging
from typing import Dict, Iterable, Optional

from analytics_framework.analytics.analysis_utils import quartiles, round_half_away
from analytics_framework.analytics.buckets import outlier_severity
from analytics_framework.analytics.dataset import Dataset, parse_number
from analytics_framework.analytics.profile_result import OutlierReport, OutlierSample
from analytics_framework.analytics.statistics_calculator import sorted_numeric_values
from analytics_framework.core.constants import (
    IQR_MULTIPLIER,
    MAX_OUTLIER_SAMPLES,
    MIN_OUTLIER_VALUES,
    STAT_DECIMALS,
)

logger = logging.getLogger(__name__)


class OutlierDetector:
    """
    Flags values strictly outside [q1 - k·iqr, q3 + k·iqr].

    Attributes:
        multiplier: Fence multiplier k
        max_samples: Maximum samples kept per column
    """

    def __init__(self, multiplier: float = IQR_MULTIPLIER, max_samples: int = MAX_OUTLIER_SAMPLES):
        self.multiplier = multiplier
        self.max_samples = max_samples

    def detect(self, dataset: Dataset, numeric_columns: Iterable[str]) -> Dict[str, OutlierReport]:
        """
        Outlier reports for columns with at least one outlier.

        Columns with MIN_OUTLIER_VALUES or fewer valid values are skipped.
        """
        outliers: Dict[str, OutlierReport] = {}
        for column in numeric_columns:
            report = self.detect_column(dataset, column)
            if report is not None:
                outliers[column] = report
        return outliers

    def detect_column(self, dataset: Dataset, column: str) -> Optional[OutlierReport]:
        sorted_values = sorted_numeric_values(dataset, column).tolist()
        if len(sorted_values) <= MIN_OUTLIER_VALUES:
            logger.debug(f"'{column}' has {len(sorted_values)} valid values, skipping outlier detection")
            return None

        quarts = quartiles(sorted_values)
        iqr = quarts["q3"] - quarts["q1"]
        lower = quarts["q1"] - self.multiplier * iqr
        upper = quarts["q3"] + self.multiplier * iqr

        count = 0
        samples = []
        for index, row in enumerate(dataset.rows):
            value = parse_number(row.get(column))
            if value is None or lower <= value <= upper:
                continue
            count += 1
            if len(samples) < self.max_samples:
                samples.append(OutlierSample(
                    row_index=index,
                    value=round_half_away(value, STAT_DECIMALS),
                    severity=outlier_severity(value, lower),
                ))

        if count == 0:
            return None

        return OutlierReport(
            lower=round_half_away(lower, STAT_DECIMALS),
            upper=round_half_away(upper, STAT_DECIMALS),
            count=count,
            percentage=round_half_away(100.0 * count / dataset.row_count, STAT_DECIMALS),
            samples=samples,
        )
