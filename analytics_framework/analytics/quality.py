"""
Dataset-level data quality assessment.

Scores every column regardless of numeric classification:

- completeness: share of non-missing cells over rows × first-row columns
- uniqueness: share of rows not identical to an earlier row
- consistency: share of columns showing at most two cell kinds
- validity: 100 minus 10 per first-row column showing more than two kinds

Consistency and validity share a trigger but are computed separately: the
former over every column seen in any row (present keys only), the latter
over the first row's columns with absent keys read as null and a floor at
zero. Both are reported.
"""

import logging
from typing import Dict, List, Set

from analytics_framework.analytics.analysis_utils import round_half_away
from analytics_framework.analytics.dataset import CellKind, Dataset, cell_kind, is_missing
from analytics_framework.analytics.json_utils import row_signature
from analytics_framework.analytics.profile_result import QualityReport
from analytics_framework.core.constants import (
    COMPLETENESS_RECOMMENDATION_THRESHOLD,
    CONSISTENCY_RECOMMENDATION_THRESHOLD,
    MAX_CONSISTENT_KINDS,
    SCORE_DECIMALS,
    UNIQUENESS_RECOMMENDATION_THRESHOLD,
    VALIDITY_PENALTY_PER_COLUMN,
    VALIDITY_RECOMMENDATION_THRESHOLD,
)

logger = logging.getLogger(__name__)

RECOMMENDATION_MISSING = "Improve missing values handling"
RECOMMENDATION_DUPLICATES = "Remove duplicate records"
RECOMMENDATION_TYPES = "Standardize data types and formats"
RECOMMENDATION_VALIDATION = "Apply data validation rules"


def _clamp_percentage(value: float) -> float:
    return max(0.0, min(100.0, value))


class DataQualityAssessor:
    """Computes the QualityReport for a dataset."""

    def assess(self, dataset: Dataset) -> QualityReport:
        row_count = dataset.row_count

        missing_values = 0
        duplicate_rows = 0
        seen_rows: Set[str] = set()
        column_kinds: Dict[str, Set[CellKind]] = {column: set() for column in dataset.all_columns()}

        for row in dataset.rows:
            signature = row_signature(row)
            if signature in seen_rows:
                duplicate_rows += 1
            else:
                seen_rows.add(signature)

            for column, value in row.items():
                if is_missing(value):
                    missing_values += 1
                column_kinds[column].add(cell_kind(value))

        inconsistent_types = sum(
            1 for kinds in column_kinds.values() if len(kinds) > MAX_CONSISTENT_KINDS
        )

        total_cells = row_count * dataset.column_count
        if total_cells == 0:
            completeness = 100.0
        else:
            completeness = _clamp_percentage((total_cells - missing_values) / total_cells * 100)

        uniqueness = (row_count - duplicate_rows) / row_count * 100

        if column_kinds:
            consistency = (len(column_kinds) - inconsistent_types) / len(column_kinds) * 100
        else:
            consistency = 100.0

        validity = self.validity_score(dataset)

        completeness = round_half_away(completeness, SCORE_DECIMALS)
        uniqueness = round_half_away(uniqueness, SCORE_DECIMALS)
        consistency = round_half_away(consistency, SCORE_DECIMALS)
        validity = round_half_away(validity, SCORE_DECIMALS)
        overall_score = round_half_away(
            (completeness + uniqueness + consistency + validity) / 4, SCORE_DECIMALS
        )

        logger.debug(
            f"Quality: overall={overall_score} completeness={completeness} uniqueness={uniqueness} "
            f"consistency={consistency} validity={validity}"
        )

        return QualityReport(
            completeness=completeness,
            uniqueness=uniqueness,
            consistency=consistency,
            validity=validity,
            overall_score=overall_score,
            missing_values=missing_values,
            duplicate_rows=duplicate_rows,
            inconsistent_types=inconsistent_types,
            recommendations=self.recommendations(completeness, uniqueness, consistency, validity),
        )

    def validity_score(self, dataset: Dataset) -> float:
        """100 minus a penalty for every first-row column with more than two kinds."""
        score = 100.0
        for column in dataset.columns:
            kinds = {cell_kind(value) for value in dataset.column_values(column)}
            if len(kinds) > MAX_CONSISTENT_KINDS:
                score -= VALIDITY_PENALTY_PER_COLUMN
        return max(0.0, score)

    @staticmethod
    def recommendations(
        completeness: float,
        uniqueness: float,
        consistency: float,
        validity: float
    ) -> List[str]:
        """Threshold-triggered recommendations in fixed order."""
        recommendations = []
        if completeness < COMPLETENESS_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMENDATION_MISSING)
        if uniqueness < UNIQUENESS_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMENDATION_DUPLICATES)
        if consistency < CONSISTENCY_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMENDATION_TYPES)
        if validity < VALIDITY_RECOMMENDATION_THRESHOLD:
            recommendations.append(RECOMMENDATION_VALIDATION)
        return recommendations
