"""
File loader: turns CSV, JSON and Excel files into rows for the engine.

Only empty fields become None; strings such as "N/A" or "null" are kept as
written so the engine's own parsing rules decide what is numeric.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from analytics_framework.core.exceptions import DataLoadError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ["csv", "json", "excel"]

EXTENSION_FORMATS = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".json": "json",
    ".xlsx": "excel",
    ".xls": "excel",
}


def detect_format(file_path: str) -> str:
    """
    Infer the file format from the extension.

    Raises:
        UnsupportedFormatError: For unknown extensions
    """
    suffix = Path(file_path).suffix.lower()
    if suffix not in EXTENSION_FORMATS:
        raise UnsupportedFormatError(file_path, suffix.lstrip(".") or "unknown", SUPPORTED_FORMATS)
    return EXTENSION_FORMATS[suffix]


def detect_delimiter(file_path: str, sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a CSV file.

    Returns:
        Detected delimiter character, defaults to ',' if detection fails
    """
    encodings = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)

            dialect = csv.Sniffer().sniff(sample, delimiters=',\t|;:')
            return dialect.delimiter
        except UnicodeDecodeError:
            continue
        except csv.Error:
            break

    return ','


def detect_encoding(file_path: str) -> str:
    """Detect the encoding of a file by trying common encodings."""
    encodings = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


def _to_python(value: Any) -> Any:
    """Convert a pandas/numpy cell into a plain Python value."""
    if value is None:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if value is pd.NaT or value is pd.NA:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, float) and np.isnan(value):
            return None
    return value


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a DataFrame into engine rows.

    Column names become strings; NaN/NaT become None; numpy scalars become
    Python scalars.
    """
    columns = [str(column) for column in df.columns]
    return [
        {column: _to_python(value) for column, value in zip(columns, record)}
        for record in df.itertuples(index=False, name=None)
    ]


def load_rows(
    file_path: str,
    format: Optional[str] = None,
    delimiter: Optional[str] = None,
    sheet_name: Any = 0,
) -> List[Dict[str, Any]]:
    """
    Load a data file into a list of rows.

    Args:
        file_path: Path to the data file
        format: csv, json or excel (default: from extension)
        delimiter: CSV delimiter (default: auto-detect)
        sheet_name: Excel sheet name or index

    Returns:
        List of row dictionaries

    Raises:
        DataLoadError: If the file is missing or cannot be parsed
        UnsupportedFormatError: If the format is not supported
    """
    path = Path(file_path)
    if not path.exists():
        raise DataLoadError(f"Data file not found: {file_path}", file_path=str(file_path))

    format = (format or detect_format(file_path)).lower()
    if format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(str(file_path), format, SUPPORTED_FORMATS)

    logger.info(f"Loading {format} file: {file_path}")

    if format == "json":
        rows = _load_json(path)
    elif format == "excel":
        rows = _load_excel(path, sheet_name)
    else:
        rows = _load_csv(path, delimiter)

    logger.info(f"Loaded {len(rows)} rows from {file_path}")
    return rows


def _load_csv(path: Path, delimiter: Optional[str]) -> List[Dict[str, Any]]:
    delimiter = delimiter or detect_delimiter(str(path))
    encoding = detect_encoding(str(path))
    if delimiter != ',':
        logger.info(f"Using delimiter: {repr(delimiter)}")

    try:
        df = pd.read_csv(
            path,
            delimiter=delimiter,
            encoding=encoding,
            keep_default_na=False,
            na_values=[""],
            low_memory=False,
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty CSV file: {path}")
        return []
    except pd.errors.ParserError as e:
        raise DataLoadError(
            f"CSV parsing error in {path}: {e}. Check the delimiter (current: {repr(delimiter)})",
            file_path=str(path),
            original_exception=e
        )
    except UnicodeDecodeError as e:
        raise DataLoadError(
            f"Encoding error in {path}: cannot decode with {encoding}",
            file_path=str(path),
            original_exception=e
        )

    return dataframe_to_rows(df)


def _load_excel(path: Path, sheet_name: Any) -> List[Dict[str, Any]]:
    try:
        df = pd.read_excel(path, sheet_name=sheet_name, keep_default_na=False, na_values=[""])
    except (ValueError, OSError) as e:
        raise DataLoadError(f"Error loading Excel file {path}: {e}", file_path=str(path), original_exception=e)
    return dataframe_to_rows(df)


def _load_json(path: Path) -> List[Dict[str, Any]]:
    """Load a JSON array of objects, or an object with a "data"/"rows" array."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Invalid JSON in {path}: {e}", file_path=str(path), original_exception=e)

    if isinstance(payload, dict):
        for key in ("data", "rows", "records"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break

    if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
        raise DataLoadError(
            f"JSON file {path} must contain an array of objects",
            file_path=str(path)
        )
    return payload
