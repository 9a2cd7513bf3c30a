"""
Command-line interface for the analytics framework.

Commands:
    analyze  - Profile a CSV, JSON or Excel file
    version  - Show version information
"""

import sys
from typing import Dict, Tuple

import click

from analytics_framework import __version__
from analytics_framework.analytics.engine import AnalyticsEngine
from analytics_framework.analytics.json_utils import safe_json_dump
from analytics_framework.analytics.profile_result import AnalysisProfile
from analytics_framework.core.config import AnalyticsConfig
from analytics_framework.core.constants import REPORT_TEMPLATES
from analytics_framework.core.exceptions import (
    AnalyticsException,
    ConfigError,
    DataLoadError,
    InsightGenerationError,
    InvalidInputError,
)
from analytics_framework.core.logging_config import get_logger, setup_logging
from analytics_framework.loaders.file_loader import SUPPORTED_FORMATS, load_rows

logger = get_logger(__name__)


def _parse_meta(pairs: Tuple[str, ...]) -> Dict[str, str]:
    """Turn repeated KEY=VALUE options into a dictionary."""
    metadata = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got '{pair}'", param_hint="--meta")
        metadata[key.strip()] = value
    return metadata


def _print_summary(profile: AnalysisProfile) -> None:
    meta = profile.metadata
    quality = profile.data_quality

    click.echo(f"Rows: {meta.row_count}    Columns: {meta.column_count}    "
               f"Time: {meta.processing_time_ms:.1f} ms")
    click.echo("")

    click.echo(f"Numeric columns ({len(profile.numeric_columns)}):")
    for column, stats in profile.descriptive_stats.items():
        click.echo(f"  {column}: mean={stats.mean} median={stats.median} "
                   f"std_dev={stats.std_dev} min={stats.min_value} max={stats.max_value}")
    click.echo("")

    click.echo(f"Data quality: {quality.overall_score}")
    click.echo(f"  completeness={quality.completeness} uniqueness={quality.uniqueness} "
               f"consistency={quality.consistency} validity={quality.validity}")
    for recommendation in quality.recommendations:
        click.echo(f"  - {recommendation}")

    strong = profile.correlation_matrix.strong_pairs
    if strong:
        click.echo("")
        click.echo("Strong correlations:")
        for pair in strong:
            click.echo(f"  {pair.column1} ~ {pair.column2}: {pair.correlation} ({pair.strength})")

    if profile.outliers:
        click.echo("")
        click.echo("Outliers:")
        for column, report in profile.outliers.items():
            click.echo(f"  {column}: {report.count} ({report.percentage}%) "
                       f"outside [{report.lower}, {report.upper}]")

    if profile.trends:
        click.echo("")
        click.echo("Trends:")
        for column, trend in profile.trends.items():
            click.echo(f"  {column}: {trend.direction} (r2={trend.r_squared}, {trend.significance}), "
                       f"next={trend.prediction.next_value} ({trend.prediction.confidence} confidence)")


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    Tabular data analytics.

    Profile CSV, JSON and Excel files: descriptive statistics, correlations,
    outliers, trends and data quality scores.
    """
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'file_format', type=click.Choice(SUPPORTED_FORMATS, case_sensitive=False),
              help='File format (auto-detected if not specified)')
@click.option('--delimiter', '-d', default=None,
              help='Column delimiter for CSV files (auto-detected if not specified). Use "\\t" for tabs.')
@click.option('--json-output', '-j', type=click.Path(dir_okay=False),
              help='Write the full analysis profile to this JSON file')
@click.option('--meta', '-m', multiple=True, metavar='KEY=VALUE',
              help='Metadata echoed into the profile (repeatable)')
@click.option('--insights', is_flag=True, default=False,
              help='Generate narrative insights (falls back when no local model is available)')
@click.option('--report', type=click.Choice(REPORT_TEMPLATES, case_sensitive=False),
              help='Generate a business report with the given template')
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False),
              help='YAML configuration file')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Logging level (default: from config, or WARNING)')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also write logs to this file')
def analyze(file_path, file_format, delimiter, json_output, meta, insights, report,
            config_path, log_level, log_file):
    """
    Analyze a data file.

    FILE_PATH: Path to a CSV, JSON or Excel file

    Examples:

        \b
        # Print a summary
        data-analyze analyze sales.csv

        \b
        # Save the full profile with caller metadata
        data-analyze analyze sales.csv -j profile.json -m source=crm -m owner=finance
    """
    try:
        config = AnalyticsConfig.from_yaml(config_path) if config_path else AnalyticsConfig.from_dict(None)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(level=log_level or config.log_level, log_file=log_file)

    metadata = _parse_meta(meta)
    metadata.setdefault("file_name", click.format_filename(file_path, shorten=True))

    if delimiter == "\\t":
        delimiter = "\t"

    try:
        rows = load_rows(file_path, format=file_format, delimiter=delimiter)
        engine = AnalyticsEngine(config=config)
        profile = engine.analyze(rows, metadata=metadata)
    except (DataLoadError, InvalidInputError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except AnalyticsException as e:
        logger.error(f"Analysis failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _print_summary(profile)

    output = profile.to_dict()

    if insights:
        record = engine.generate_insights(profile)
        output["insights"] = record.to_dict()
        click.echo("")
        click.echo(f"Insights ({record.model}):")
        for item in record.insights:
            click.echo(f"  {item.finding}")

    if report:
        try:
            business_report = engine.generate_report(profile, report.lower())
        except InsightGenerationError as e:
            click.echo(f"Report generation failed: {e}", err=True)
            sys.exit(1)
        output["report"] = business_report.to_dict()
        click.echo("")
        click.echo(business_report.title)
        click.echo(business_report.full_content)

    if json_output:
        with open(json_output, 'w', encoding='utf-8') as f:
            safe_json_dump(output, f)
        click.echo("")
        click.echo(f"JSON profile written: {json_output}")


@cli.command()
def version():
    """Display version information."""
    click.echo(f"Analytics Framework v{__version__}")
    click.echo("Statistical profiling and data quality scoring for tabular data")


if __name__ == '__main__':
    cli()
