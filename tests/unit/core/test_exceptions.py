"""
Unit tests for exception hierarchy.

Tests the analytics exception classes and their serialized context.
"""

import pytest

from analytics_framework.core.exceptions import (
    AnalyticsException,
    ConfigError,
    ConfigValidationError,
    DataLoadError,
    ErrorSeverity,
    InsightGenerationError,
    InvalidInputError,
    UnsupportedFormatError,
    YAMLSizeError,
)


class TestErrorSeverity:
    """Test error severity enum."""

    def test_severity_values(self):
        """Test that all severity levels exist."""
        assert ErrorSeverity.FATAL.value == "fatal"
        assert ErrorSeverity.CRITICAL.value == "critical"
        assert ErrorSeverity.RECOVERABLE.value == "recoverable"
        assert ErrorSeverity.WARNING.value == "warning"


class TestAnalyticsException:
    """Test base exception class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = AnalyticsException("Test error")

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {}
        assert exc.original_exception is None

    def test_exception_serialization(self):
        """Test to_dict() serialization."""
        exc = AnalyticsException(
            "Test error",
            severity=ErrorSeverity.CRITICAL,
            details={'column': 'revenue'},
            original_exception=ValueError("Original")
        )

        assert exc.to_dict() == {
            'type': 'AnalyticsException',
            'message': 'Test error',
            'severity': 'critical',
            'details': {'column': 'revenue'},
            'original_error': 'Original'
        }


class TestConfigErrors:
    """Test configuration error classes."""

    def test_config_error_is_fatal(self):
        exc = ConfigError("Bad config", field="analytics.iqr_multiplier")

        assert exc.severity == ErrorSeverity.FATAL
        assert exc.field == "analytics.iqr_multiplier"
        assert exc.details == {'field': 'analytics.iqr_multiplier'}

    def test_yaml_size_error(self):
        exc = YAMLSizeError("Too large", file_size=2000000, max_size=1048576)

        assert isinstance(exc, ConfigError)
        assert exc.details['file_size'] == 2000000
        assert exc.details['max_size'] == 1048576

    def test_config_validation_error(self):
        exc = ConfigValidationError(
            "Out of range",
            field="numeric_ratio_threshold",
            expected="0 < value <= 1",
            actual="1.5"
        )

        assert isinstance(exc, ConfigError)
        assert exc.details['expected'] == "0 < value <= 1"
        assert exc.details['actual'] == "1.5"


class TestInputAndLoadErrors:
    """Test input, loading and insight errors."""

    def test_invalid_input(self):
        exc = InvalidInputError("Invalid or empty data provided for analysis", reason="empty")

        assert exc.severity == ErrorSeverity.CRITICAL
        assert exc.reason == "empty"
        assert exc.to_dict()['details'] == {'reason': 'empty'}

    def test_data_load_error(self):
        original = OSError("disk")
        exc = DataLoadError("Cannot read", file_path="/data/a.csv", original_exception=original)

        assert exc.file_path == "/data/a.csv"
        assert exc.original_exception is original
        assert exc.severity == ErrorSeverity.CRITICAL

    def test_unsupported_format(self):
        exc = UnsupportedFormatError("data.xml", "xml", ["csv", "json", "excel"])

        assert isinstance(exc, DataLoadError)
        assert "Unsupported file format 'xml'" in str(exc)
        assert "csv, json, excel" in str(exc)
        assert exc.details['format'] == "xml"

    def test_insight_generation_error_is_warning(self):
        exc = InsightGenerationError("No model", model="local-llm")

        assert exc.severity == ErrorSeverity.WARNING
        assert exc.model == "local-llm"

    def test_catch_by_base_class(self):
        with pytest.raises(AnalyticsException):
            raise InvalidInputError("bad")
