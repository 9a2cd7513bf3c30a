"""
Analytics engine - composes the statistical components into one profile.

AnalyticsEngine is a stateless value: its only fields are configuration and
the injected insight generator, neither of which changes during a call. The
same engine can serve any number of analyses, including concurrent ones.

Usage:
    engine = AnalyticsEngine()
    profile = engine.analyze(rows, metadata={"file_name": "sales.csv"})
    insights = engine.generate_insights(profile)

The engine performs no I/O and never blocks on anything but CPU; callers
that need deadlines or want to keep a request thread free should run
analyze() in their own executor.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from analytics_framework.analytics.classifier import NumericColumnClassifier
from analytics_framework.analytics.correlation import CorrelationEngine
from analytics_framework.analytics.dataset import Dataset
from analytics_framework.analytics.insights import (
    BusinessReport,
    InsightGenerator,
    InsightRecord,
    LocalLLMTextGenerator,
    fallback_insights,
)
from analytics_framework.analytics.outliers import OutlierDetector
from analytics_framework.analytics.profile_result import AnalysisMetadata, AnalysisProfile
from analytics_framework.analytics.quality import DataQualityAssessor
from analytics_framework.analytics.statistics_calculator import DescriptiveStatisticsCalculator
from analytics_framework.analytics.trends import TrendAnalyzer
from analytics_framework.core.config import AnalyticsConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsEngine:
    """
    Turns a dataset into an AnalysisProfile.

    Attributes:
        config: Thresholds and collaborator settings
        insight_generator: Narrative collaborator; built from config when omitted

    Example:
        >>> engine = AnalyticsEngine()
        >>> profile = engine.analyze([{"x": 1}, {"x": 2}, {"x": 3}, {"x": 4}, {"x": 100}])
        >>> profile.descriptive_stats["x"].mean
        22.0
        >>> profile.outliers["x"].samples[0].severity
        'high'
    """
    config: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    insight_generator: Optional[InsightGenerator] = None

    def __post_init__(self):
        if self.insight_generator is None:
            generator = InsightGenerator(LocalLLMTextGenerator(
                model_path=self.config.llm_model_path,
                temperature=self.config.llm_temperature,
                max_tokens=self.config.llm_max_tokens,
            ))
            object.__setattr__(self, "insight_generator", generator)

    def analyze(self, rows: Any, metadata: Optional[Mapping[str, Any]] = None) -> AnalysisProfile:
        """
        Run every component over the dataset.

        Args:
            rows: Sequence of mappings (column name -> value)
            metadata: Free-form caller metadata, echoed into the profile

        Returns:
            AnalysisProfile

        Raises:
            InvalidInputError: If rows is missing, not a sequence of mappings, or empty
        """
        start = time.perf_counter()
        dataset = Dataset.from_rows(rows)
        logger.info(f"Starting analysis: {dataset.row_count} rows, {dataset.column_count} columns")

        classifier = NumericColumnClassifier(
            sample_size=self.config.numeric_sample_size,
            threshold=self.config.numeric_ratio_threshold,
        )
        numeric_columns = classifier.classify(dataset)

        descriptive_stats = DescriptiveStatisticsCalculator().calculate(dataset, numeric_columns)
        correlation_matrix = CorrelationEngine(
            strong_threshold=self.config.strong_correlation_threshold
        ).calculate(dataset, numeric_columns)
        data_quality = DataQualityAssessor().assess(dataset)
        outliers = OutlierDetector(
            multiplier=self.config.iqr_multiplier,
            max_samples=self.config.max_outlier_samples,
        ).detect(dataset, numeric_columns)
        trends = TrendAnalyzer().analyze(dataset, numeric_columns)

        processing_time_ms = round((time.perf_counter() - start) * 1000, 3)
        profile = AnalysisProfile(
            descriptive_stats=descriptive_stats,
            correlation_matrix=correlation_matrix,
            data_quality=data_quality,
            outliers=outliers,
            trends=trends,
            metadata=AnalysisMetadata(
                row_count=dataset.row_count,
                column_count=dataset.column_count,
                processing_time_ms=processing_time_ms,
                analyzed_at=datetime.now(timezone.utc),
                extra=metadata or {},
            ),
        )

        logger.info(
            f"Completed analysis in {processing_time_ms:.1f} ms: {len(numeric_columns)} numeric columns, "
            f"quality score {data_quality.overall_score}, {len(outliers)} columns with outliers"
        )
        return profile

    def generate_insights(self, profile: AnalysisProfile) -> InsightRecord:
        """
        Narrative insights for a profile, or the fallback record.

        Never raises for generator failures; the profile itself is unaffected.
        """
        try:
            return self.insight_generator.generate_insights(profile)
        except Exception as e:
            logger.warning(f"AI insights unavailable, using fallback: {e}")
            return fallback_insights()

    def generate_report(self, profile: AnalysisProfile, template: Optional[str] = None) -> BusinessReport:
        """
        Business report for a profile.

        Raises:
            ValueError: If the template is unknown
            InsightGenerationError: If the text generator is unavailable or fails
        """
        return self.insight_generator.generate_report(profile, template or self.config.report_template)
