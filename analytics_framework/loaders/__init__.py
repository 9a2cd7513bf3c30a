"""Loaders that turn data files into rows for the analytics engine."""

from analytics_framework.loaders.file_loader import load_rows, dataframe_to_rows

__all__ = ["load_rows", "dataframe_to_rows"]
