"""
Statistical analysis components.

Each component consumes the same immutable Dataset and can be computed
independently; AnalyticsEngine composes them into an AnalysisProfile.
"""

from analytics_framework.analytics.dataset import Dataset, Cell, CellKind
from analytics_framework.analytics.engine import AnalyticsEngine
from analytics_framework.analytics.profile_result import AnalysisProfile

__all__ = ["AnalyticsEngine", "AnalysisProfile", "Dataset", "Cell", "CellKind"]
