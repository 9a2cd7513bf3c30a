"""
Integration tests for the command-line interface.

Invokes the click commands through CliRunner against files written to
tmp_path.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from analytics_framework import __version__
from analytics_framework.analytics.insights import LocalLLMTextGenerator
from analytics_framework.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sales_csv(tmp_path):
    path = tmp_path / "sales.csv"
    lines = ["month,units,revenue,region"]
    for i in range(1, 11):
        lines.append(f"{i},{i * 10},{i * 25},{'north' if i % 2 else 'south'}")
    lines.append("11,500,275,north")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def no_local_model(monkeypatch):
    monkeypatch.setattr(LocalLLMTextGenerator, "is_available", lambda self: False)


class TestAnalyzeCommand:
    """Test the analyze command."""

    def test_summary(self, runner, sales_csv):
        result = runner.invoke(cli, ["analyze", str(sales_csv)])

        assert result.exit_code == 0, result.output
        assert "Rows: 11" in result.output
        assert "Numeric columns (3):" in result.output
        assert "Data quality: 100.0" in result.output
        assert "Strong correlations:" in result.output
        assert "units:" in result.output

    def test_json_output_with_metadata(self, runner, sales_csv, tmp_path):
        output = tmp_path / "profile.json"
        result = runner.invoke(cli, [
            "analyze", str(sales_csv),
            "--json-output", str(output),
            "--meta", "source=crm",
            "--meta", "owner=finance",
        ])

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert set(payload["descriptive_stats"]) == {"month", "units", "revenue"}
        assert payload["metadata"]["source"] == "crm"
        assert payload["metadata"]["owner"] == "finance"
        assert payload["metadata"]["file_name"] == "sales.csv"
        assert payload["metadata"]["row_count"] == 11
        assert payload["outliers"]["units"]["outliers"][0]["row_index"] == 10

    def test_bad_meta(self, runner, sales_csv):
        result = runner.invoke(cli, ["analyze", str(sales_csv), "--meta", "no-equals"])

        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_header_only_file(self, runner, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("a,b\n", encoding="utf-8")

        result = runner.invoke(cli, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Invalid or empty data" in result.output

    def test_unsupported_extension(self, runner, tmp_path):
        path = tmp_path / "data.xml"
        path.write_text("<rows/>", encoding="utf-8")

        result = runner.invoke(cli, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Unsupported file format" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["analyze", str(tmp_path / "nope.csv")])
        assert result.exit_code == 2

    def test_tab_delimiter(self, runner, tmp_path):
        path = tmp_path / "data.tsv"
        path.write_text("a\tb\n1\t2\n3\t4\n5\t7\n", encoding="utf-8")

        result = runner.invoke(cli, ["analyze", str(path), "-d", "\\t"])

        assert result.exit_code == 0, result.output
        assert "Numeric columns (2):" in result.output

    def test_config_file(self, runner, sales_csv, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.safe_dump({"analytics": {"numeric_ratio_threshold": 0.99}}), encoding="utf-8")
        output = tmp_path / "profile.json"

        result = runner.invoke(cli, [
            "analyze", str(sales_csv), "--config", str(config), "--json-output", str(output)
        ])

        assert result.exit_code == 0, result.output
        assert len(json.loads(output.read_text(encoding="utf-8"))["descriptive_stats"]) == 3

    @pytest.mark.parametrize("settings", [
        {"analytics": {"unknown_key": 1}},
        {"analytics": {"iqr_multiplier": None}},
        {"analytics": {"numeric_ratio_threshold": "high"}},
        {"insights": {"llm_max_tokens": -5}},
    ])
    def test_invalid_config(self, runner, sales_csv, tmp_path, settings):
        config = tmp_path / "config.yaml"
        config.write_text(yaml.safe_dump(settings), encoding="utf-8")

        result = runner.invoke(cli, ["analyze", str(sales_csv), "--config", str(config)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_log_file(self, runner, sales_csv, tmp_path):
        log_file = tmp_path / "run.log"

        result = runner.invoke(cli, [
            "analyze", str(sales_csv), "--log-level", "INFO", "--log-file", str(log_file)
        ])

        assert result.exit_code == 0, result.output
        assert "Completed analysis" in log_file.read_text(encoding="utf-8")

    def test_insights_fallback(self, runner, sales_csv, tmp_path, no_local_model):
        output = tmp_path / "profile.json"

        result = runner.invoke(cli, ["analyze", str(sales_csv), "--insights", "-j", str(output)])

        assert result.exit_code == 0, result.output
        assert "Insights (fallback):" in result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["insights"]["model"] == "fallback"

    def test_report_without_model(self, runner, sales_csv, no_local_model):
        result = runner.invoke(cli, ["analyze", str(sales_csv), "--report", "executive"])

        assert result.exit_code == 1
        assert "Report generation failed" in result.output


class TestVersion:

    def test_version_command(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_option(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
