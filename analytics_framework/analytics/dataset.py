"""
Cell model and immutable Dataset wrapper.

Rows arrive as mappings of column name to loosely typed values. Every value
is read through Cell, which tags it with a CellKind and applies the single
parse-to-number policy shared by all components:

- ints and floats (including numpy scalars) are numbers when finite
- strings parse when the whole stripped text is a finite float literal
  ("12", " 3.5 ", "1e3"); "12abc", "1,000", "1_000", "nan" and "inf" do not
- booleans are their own kind and never parse
- None and absent keys are null; the empty string counts as missing but
  keeps the string kind
- anything else (dates, lists, dicts) is kind OTHER and never parses
"""

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from analytics_framework.core.exceptions import InvalidInputError


class CellKind(Enum):
    """Primitive kind of a cell value."""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    OTHER = "other"


def cell_kind(value: Any) -> CellKind:
    """Classify a raw value into its CellKind."""
    if value is None:
        return CellKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return CellKind.BOOLEAN
    if isinstance(value, numbers.Real):
        return CellKind.NUMBER
    if isinstance(value, str):
        return CellKind.STRING
    return CellKind.OTHER


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw value into a finite float.

    Returns:
        The parsed float, or None when the value is not a finite number
    """
    kind = cell_kind(value)

    if kind is CellKind.NUMBER:
        try:
            number = float(value)
        except (OverflowError, ValueError, TypeError):
            # ints beyond float range
            return None
    elif kind is CellKind.STRING:
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def is_missing(value: Any) -> bool:
    """True for None and the empty string."""
    return value is None or (isinstance(value, str) and value == "")


@dataclass(frozen=True)
class Cell:
    """
    A tagged cell value.

    Attributes:
        value: The raw value as supplied
        kind: Primitive kind of the value
        number: Parsed finite number, or None
    """
    value: Any
    kind: CellKind
    number: Optional[float] = None

    @classmethod
    def of(cls, value: Any) -> "Cell":
        return cls(value=value, kind=cell_kind(value), number=parse_number(value))

    @property
    def is_missing(self) -> bool:
        return is_missing(self.value)

    @property
    def is_numeric(self) -> bool:
        return self.number is not None


class Dataset:
    """
    Read-only, ordered collection of rows.

    The column set is taken from the first row's keys; later rows are not
    required to share it. Rows are stored as a tuple and never modified.

    Example:
        >>> dataset = Dataset.from_rows([{"x": 1, "y": "a"}, {"x": "2", "y": None}])
        >>> dataset.columns
        ('x', 'y')
        >>> dataset.numeric_values("x")
        [1.0, 2.0]
    """

    __slots__ = ("_rows", "_columns")

    def __init__(self, rows: Tuple[Mapping, ...]):
        self._rows = rows
        self._columns = tuple(rows[0].keys()) if rows else ()

    @classmethod
    def from_rows(cls, rows: Any) -> "Dataset":
        """
        Validate raw input and wrap it.

        Raises:
            InvalidInputError: If rows is None, not a sequence of mappings, or empty
        """
        if isinstance(rows, Dataset):
            return rows

        if rows is None:
            raise InvalidInputError("No data provided for analysis", reason="missing")

        if isinstance(rows, (str, bytes, bytearray, Mapping)) or not isinstance(rows, Sequence):
            raise InvalidInputError(
                f"Data must be a sequence of rows, got {type(rows).__name__}",
                reason="not_a_sequence"
            )

        if len(rows) == 0:
            raise InvalidInputError("Invalid or empty data provided for analysis", reason="empty")

        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise InvalidInputError(
                    f"Row {index} must be a mapping of column name to value, got {type(row).__name__}",
                    reason="invalid_row"
                )

        return cls(tuple(rows))

    @property
    def rows(self) -> Tuple[Mapping, ...]:
        return self._rows

    @property
    def columns(self) -> Tuple[str, ...]:
        """Column names from the first row, in order."""
        return self._columns

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def __len__(self) -> int:
        return len(self._rows)

    def column_values(self, column: str, limit: Optional[int] = None) -> List[Any]:
        """Raw values of a column in row order; absent keys read as None."""
        rows = self._rows if limit is None else self._rows[:limit]
        return [row.get(column) for row in rows]

    def numeric_values(self, column: str) -> List[float]:
        """Parsed finite numbers of a column in row order, unparseable cells dropped."""
        return [number for _, number in self.indexed_numeric_values(column)]

    def indexed_numeric_values(self, column: str) -> List[Tuple[int, float]]:
        """(original row index, number) pairs for every parseable cell."""
        values = []
        for index, row in enumerate(self._rows):
            number = parse_number(row.get(column))
            if number is not None:
                values.append((index, number))
        return values

    def all_columns(self) -> List[str]:
        """Every column name seen in any row, in first-seen order."""
        seen: Dict[str, None] = {}
        for row in self._rows:
            for column in row.keys():
                seen.setdefault(column, None)
        return list(seen)
