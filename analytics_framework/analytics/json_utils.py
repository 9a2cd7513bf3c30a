"""
JSON serialization utilities for analysis results.

Handles numpy types and other non-standard JSON types so profiles, rows and
insight records can be written as strict JSON.
"""

import json
import math
from datetime import datetime, date
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pandas as pd


class AnalyticsJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles numpy types and other non-standard types.

    Converts:
    - numpy int types → Python int
    - numpy float types → Python float (NaN/inf → null)
    - numpy bool → Python bool
    - numpy arrays → Python lists
    - pandas Timestamp, datetime, date → ISO format string
    - Decimal → float
    - sets → lists
    - read-only mappings → dicts
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.integer):
            return int(obj)

        if isinstance(obj, np.floating):
            if np.isnan(obj) or np.isinf(obj):
                return None
            return float(obj)

        if isinstance(obj, np.bool_):
            return bool(obj)

        if isinstance(obj, np.ndarray):
            return obj.tolist()

        if isinstance(obj, pd.Timestamp):
            return obj.isoformat()

        if isinstance(obj, (datetime, date)):
            return obj.isoformat()

        if isinstance(obj, Decimal):
            return float(obj)

        if isinstance(obj, (set, frozenset)):
            return list(obj)

        if isinstance(obj, MappingProxyType):
            return dict(obj)

        return super().default(obj)


class RowSignatureEncoder(AnalyticsJSONEncoder):
    """Encoder for duplicate detection: anything unknown is encoded by repr()."""

    def default(self, obj: Any) -> Any:
        try:
            return super().default(obj)
        except TypeError:
            return repr(obj)


def convert_to_json_serializable(obj: Any) -> Any:
    """
    Recursively convert object to JSON-serializable types.

    Unlike AnalyticsJSONEncoder this also replaces plain Python NaN/inf
    floats with None, which json.dumps would otherwise emit as bare NaN.
    """
    if obj is None:
        return None

    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None

    if isinstance(obj, np.integer):
        return int(obj)

    if isinstance(obj, np.floating):
        value = float(obj)
        return value if math.isfinite(value) else None

    if isinstance(obj, np.bool_):
        return bool(obj)

    if isinstance(obj, np.ndarray):
        return [convert_to_json_serializable(item) for item in obj.tolist()]

    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, Mapping):
        return {key: convert_to_json_serializable(value) for key, value in obj.items()}

    if isinstance(obj, (list, tuple, set, frozenset)):
        return [convert_to_json_serializable(item) for item in obj]

    return obj


def row_signature(row: Mapping[str, Any]) -> str:
    """
    Order-sensitive serialization of a row.

    Two rows with the same values under a different key order produce
    different signatures.
    """
    return json.dumps(dict(row), cls=RowSignatureEncoder, ensure_ascii=False, separators=(",", ":"))


def safe_json_dumps(obj: Any, **kwargs) -> str:
    """Serialize to a JSON string after converting non-standard types."""
    kwargs.setdefault('cls', AnalyticsJSONEncoder)
    kwargs.setdefault('indent', 2)
    return json.dumps(convert_to_json_serializable(obj), **kwargs)


def safe_json_dump(obj: Any, fp, **kwargs) -> None:
    """Serialize to a file after converting non-standard types."""
    kwargs.setdefault('cls', AnalyticsJSONEncoder)
    kwargs.setdefault('indent', 2)
    json.dump(convert_to_json_serializable(obj), fp, **kwargs)
