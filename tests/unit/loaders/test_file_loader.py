"""
Tests for loading data files into engine rows.

Files are written to tmp_path so each test controls the exact bytes read.
"""

import json

import numpy as np
import pandas as pd
import pytest

from analytics_framework.core.exceptions import DataLoadError, UnsupportedFormatError
from analytics_framework.loaders.file_loader import (
    dataframe_to_rows,
    detect_delimiter,
    detect_format,
    load_rows,
)


class TestDetectFormat:

    @pytest.mark.parametrize("name,expected", [
        ("sales.csv", "csv"),
        ("sales.TSV", "csv"),
        ("sales.json", "json"),
        ("sales.xlsx", "excel"),
    ])
    def test_known_extensions(self, name, expected):
        assert detect_format(name) == expected

    def test_unknown_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            detect_format("sales.xml")
        assert exc_info.value.details["format"] == "xml"


class TestDataframeToRows:

    def test_nan_and_numpy_values(self):
        df = pd.DataFrame({"a": [1.0, np.nan], "b": ["x", None], "c": [1, 2]})
        rows = dataframe_to_rows(df)

        assert rows == [{"a": 1.0, "b": "x", "c": 1}, {"a": None, "b": None, "c": 2}]
        assert type(rows[0]["c"]) is int
        assert type(rows[0]["a"]) is float

    def test_column_names_become_strings(self):
        df = pd.DataFrame({0: [1], 1: [2]})
        assert dataframe_to_rows(df) == [{"0": 1, "1": 2}]

    def test_booleans_stay_booleans(self):
        rows = dataframe_to_rows(pd.DataFrame({"flag": [True, False]}))
        assert rows[0]["flag"] is True


class TestLoadCsv:

    def test_basic(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n1,x\n2,\n", encoding="utf-8")

        assert load_rows(str(path)) == [{"a": 1, "b": "x"}, {"a": 2, "b": None}]

    def test_placeholder_strings_kept(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a\n1\nN/A\nnull\n", encoding="utf-8")

        assert [row["a"] for row in load_rows(str(path))] == ["1", "N/A", "null"]

    def test_explicit_delimiter(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a|b\n1|2\n3|4\n", encoding="utf-8")

        assert load_rows(str(path), delimiter="|") == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_detects_semicolons(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a;b\n1;2\n3;4\n5;6\n", encoding="utf-8")

        assert detect_delimiter(str(path)) == ";"
        assert load_rows(str(path))[0] == {"a": 1, "b": 2}

    def test_header_only(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a,b\n", encoding="utf-8")
        assert load_rows(str(path)) == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("", encoding="utf-8")
        assert load_rows(str(path)) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="not found"):
            load_rows(str(tmp_path / "missing.csv"))

    def test_format_override(self, tmp_path):
        path = tmp_path / "data.dat"
        path.write_text("a\n1\n2\n", encoding="utf-8")
        assert load_rows(str(path), format="csv") == [{"a": 1}, {"a": 2}]

    def test_unsupported_format_override(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("a\n1\n", encoding="utf-8")
        with pytest.raises(UnsupportedFormatError):
            load_rows(str(path), format="parquet")


class TestLoadJson:

    def test_array_of_objects(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps([{"a": 1, "b": None}, {"a": "2", "b": True}]), encoding="utf-8")

        assert load_rows(str(path)) == [{"a": 1, "b": None}, {"a": "2", "b": True}]

    def test_wrapped_records(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"data": [{"a": 1}]}), encoding="utf-8")
        assert load_rows(str(path)) == [{"a": 1}]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataLoadError, match="Invalid JSON"):
            load_rows(str(path))

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        with pytest.raises(DataLoadError, match="array of objects"):
            load_rows(str(path))


class TestLoadExcel:

    def test_round_trip_through_openpyxl(self, tmp_path):
        pytest.importorskip("openpyxl")
        path = tmp_path / "data.xlsx"
        pd.DataFrame({"a": [1, 2], "b": ["x", None]}).to_excel(path, index=False)

        assert load_rows(str(path)) == [{"a": 1, "b": "x"}, {"a": 2, "b": None}]
