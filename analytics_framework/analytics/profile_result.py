"""
Data structures for storing analysis results.

Every record is a frozen dataclass; mapping fields are wrapped in read-only
proxies so an AnalysisProfile cannot be mutated after the engine returns it.
to_dict() always produces a detached, JSON-ready copy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from analytics_framework.analytics.json_utils import safe_json_dumps


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ColumnProfile:
    """
    Descriptive statistics for one numeric column.

    Attributes:
        count: Number of valid numeric values (always > 0)
        mean: Arithmetic mean
        median: Value at sorted index floor(n / 2)
        mode: Most frequent value, lowest value on ties
        min_value: Smallest value
        max_value: Largest value
        value_range: max_value - min_value
        q1: Value at sorted index floor(n / 4)
        q3: Value at sorted index floor(3n / 4)
        iqr: q3 - q1
        variance: Population variance
        std_dev: Population standard deviation
        skewness: Adjusted Fisher-Pearson skewness (0 when undefined)
        kurtosis: Bias-corrected excess kurtosis (0 when undefined)
    """
    count: int
    mean: float
    median: float
    mode: float
    min_value: float
    max_value: float
    value_range: float
    q1: float
    q3: float
    iqr: float
    variance: float
    std_dev: float
    skewness: float
    kurtosis: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "mode": self.mode,
            "min": self.min_value,
            "max": self.max_value,
            "range": self.value_range,
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "variance": self.variance,
            "std_dev": self.std_dev,
            "skewness": self.skewness,
            "kurtosis": self.kurtosis,
        }


@dataclass(frozen=True)
class CorrelationPair:
    """A strongly correlated pair of distinct numeric columns."""
    column1: str
    column2: str
    correlation: float
    strength: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column1": self.column1,
            "column2": self.column2,
            "correlation": self.correlation,
            "strength": self.strength,
        }


@dataclass(frozen=True)
class CorrelationMatrix:
    """
    Pairwise Pearson coefficients between numeric columns.

    Attributes:
        matrix: column -> column -> coefficient, symmetric with unit diagonal
        strong_pairs: Pairs with |r| above the strong threshold, strongest first
    """
    matrix: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    strong_pairs: Tuple[CorrelationPair, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "matrix",
            MappingProxyType({column: _freeze(row) for column, row in self.matrix.items()})
        )
        object.__setattr__(self, "strong_pairs", tuple(self.strong_pairs))

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(self.matrix.keys())

    def coefficient(self, column1: str, column2: str) -> float:
        """Coefficient between two columns; raises KeyError for unknown columns."""
        return self.matrix[column1][column2]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matrix": {column: dict(row) for column, row in self.matrix.items()},
            "strong_correlations": [pair.to_dict() for pair in self.strong_pairs],
        }


@dataclass(frozen=True)
class QualityReport:
    """
    Dataset-level data quality scores.

    Attributes:
        completeness: Percentage of non-missing cells (0-100)
        uniqueness: Percentage of non-duplicate rows (0-100)
        consistency: Percentage of columns with at most two cell kinds (0-100)
        validity: 100 minus 10 per mixed-kind column, floored at 0
        overall_score: Mean of the four rounded sub-scores
        missing_values: Count of None / empty-string cells
        duplicate_rows: Count of rows identical to an earlier row
        inconsistent_types: Count of columns with more than two cell kinds
        recommendations: Remediation hints in fixed order
    """
    completeness: float
    uniqueness: float
    consistency: float
    validity: float
    overall_score: float
    missing_values: int
    duplicate_rows: int
    inconsistent_types: int
    recommendations: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "completeness": self.completeness,
            "uniqueness": self.uniqueness,
            "consistency": self.consistency,
            "validity": self.validity,
            "issues": {
                "missing_values": self.missing_values,
                "duplicate_rows": self.duplicate_rows,
                "inconsistent_types": self.inconsistent_types,
            },
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class OutlierSample:
    """One flagged cell: its original row index, value and side of the fence."""
    row_index: int
    value: float
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return {"row_index": self.row_index, "value": self.value, "severity": self.severity}


@dataclass(frozen=True)
class OutlierReport:
    """
    IQR-fence outliers for one numeric column.

    Attributes:
        lower: Lower fence (q1 - 1.5 * iqr)
        upper: Upper fence (q3 + 1.5 * iqr)
        count: Total number of outlying cells
        percentage: count as a percentage of all rows
        samples: First outliers in row order (capped)
    """
    lower: float
    upper: float
    count: int
    percentage: float
    samples: Tuple[OutlierSample, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "samples", tuple(self.samples))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "percentage": self.percentage,
            "bounds": {"lower": self.lower, "upper": self.upper},
            "outliers": [sample.to_dict() for sample in self.samples],
        }


@dataclass(frozen=True)
class TrendPrediction:
    """Regression value one step past the last valid point."""
    next_value: float
    confidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {"next_predicted_value": self.next_value, "confidence": self.confidence}


@dataclass(frozen=True)
class TrendReport:
    """Least-squares trend of a column over row index."""
    slope: float
    intercept: float
    r_squared: float
    direction: str
    significance: str
    prediction: TrendPrediction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction,
            "slope": self.slope,
            "intercept": self.intercept,
            "r_squared": self.r_squared,
            "significance": self.significance,
            "prediction": self.prediction.to_dict(),
        }


@dataclass(frozen=True)
class AnalysisMetadata:
    """
    Run metadata.

    Attributes:
        row_count: Number of rows analyzed
        column_count: Number of keys in the first row
        processing_time_ms: Wall-clock duration of the analysis
        analyzed_at: UTC timestamp when the analysis finished
        extra: Caller-supplied metadata, echoed back unmodified
    """
    row_count: int
    column_count: int
    processing_time_ms: float
    analyzed_at: datetime
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "extra", _freeze(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.extra)
        result.update({
            "row_count": self.row_count,
            "column_count": self.column_count,
            "processing_time_ms": self.processing_time_ms,
            "analyzed_at": self.analyzed_at.isoformat(),
        })
        return result


@dataclass(frozen=True)
class AnalysisProfile:
    """
    Complete output of one engine invocation.

    Attributes:
        descriptive_stats: column -> ColumnProfile, numeric columns only
        correlation_matrix: Pearson coefficients and strong pairs
        data_quality: Dataset-level quality scores
        outliers: column -> OutlierReport, only columns with outliers
        trends: column -> TrendReport
        metadata: Row/column counts, timing and echoed caller metadata
    """
    descriptive_stats: Mapping[str, ColumnProfile]
    correlation_matrix: CorrelationMatrix
    data_quality: QualityReport
    outliers: Mapping[str, OutlierReport]
    trends: Mapping[str, TrendReport]
    metadata: AnalysisMetadata

    def __post_init__(self):
        object.__setattr__(self, "descriptive_stats", _freeze(self.descriptive_stats))
        object.__setattr__(self, "outliers", _freeze(self.outliers))
        object.__setattr__(self, "trends", _freeze(self.trends))

    @property
    def numeric_columns(self) -> Tuple[str, ...]:
        return tuple(self.descriptive_stats.keys())

    def to_dict(self, include_metadata: bool = True) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "descriptive_stats": {
                column: stats.to_dict() for column, stats in self.descriptive_stats.items()
            },
            "correlation_matrix": self.correlation_matrix.to_dict(),
            "data_quality": self.data_quality.to_dict(),
            "outliers": {column: report.to_dict() for column, report in self.outliers.items()},
            "trends": {column: report.to_dict() for column, report in self.trends.items()},
        }
        if include_metadata:
            result["metadata"] = self.metadata.to_dict()
        return result

    def to_json(self, indent: Optional[int] = 2) -> str:
        return safe_json_dumps(self.to_dict(), indent=indent)
