"""
Analytics Framework - statistical profiling for tabular data.

Turns a list of rows (mappings of column name to loosely typed cell) into an
AnalysisProfile: descriptive statistics, correlations, data quality, outliers
and linear trends.
"""

__version__ = "0.1.0"
