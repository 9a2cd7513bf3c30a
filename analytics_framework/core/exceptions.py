"""
Analytics Framework Exception Hierarchy.

This module defines the exceptions raised by the analytics engine and its
collaborators, providing clear categorization of errors and standardized
error handling across all components.

Exception Severity Levels:
    - FATAL: Stop all processing immediately
    - CRITICAL: Stop the current analysis
    - RECOVERABLE: Log error, substitute a fallback, continue
    - WARNING: Log warning, processing continues
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, stop all processing
        CRITICAL: Analysis-level error, stop this analysis
        RECOVERABLE: Component-level error, fall back and continue
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class AnalyticsException(Exception):
    """
    Base exception for all analytics errors with enhanced context.

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (column, file path, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     rows = load_rows("sales.csv")
        ... except OSError as e:
        ...     raise AnalyticsException(
        ...         "Could not read sales data",
        ...         severity=ErrorSeverity.CRITICAL,
        ...         details={'file': 'sales.csv'},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize analytics exception.

        Args:
            message: Human-readable error description
            severity: Error severity level (default: RECOVERABLE)
            details: Additional context dictionary
            original_exception: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(AnalyticsException):
    """
    Configuration file errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Unknown or ill-typed configuration fields

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """
    YAML file too large or too deeply nested.

    Example:
        >>> raise YAMLSizeError(
        ...     "Config file exceeds 1MB limit",
        ...     file_size=1500000,
        ...     max_size=1048576
        ... )
    """

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration values failed validation.

    Example:
        >>> raise ConfigValidationError(
        ...     "numeric_ratio_threshold must be between 0 and 1",
        ...     field="numeric_ratio_threshold",
        ...     expected="0 < value <= 1",
        ...     actual="1.5"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Input Errors (Critical)
# ============================================================================

class InvalidInputError(AnalyticsException):
    """
    The dataset handed to the engine cannot be analyzed.

    Raised before any statistical component runs when the dataset is
    missing, is not a sequence of rows, is empty, or contains a row that
    is not a mapping.

    Attributes:
        reason (str): Short machine-readable reason code

    Example:
        >>> raise InvalidInputError(
        ...     "Invalid or empty data provided for analysis",
        ...     reason="empty"
        ... )
    """

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'reason': reason} if reason else {}
        )
        self.reason = reason


# ============================================================================
# Data Loading Errors (Critical)
# ============================================================================

class DataLoadError(AnalyticsException):
    """
    Data file loading errors (critical - the analysis cannot start).

    Raised when:
    - Data file not found
    - File format invalid or corrupted
    - Parsing errors (malformed CSV, invalid JSON, etc.)

    Attributes:
        file_path (str): Path to file that failed to load
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path},
            original_exception=original_exception
        )
        self.file_path = file_path


class UnsupportedFormatError(DataLoadError):
    """
    File format not supported by the loader.

    Example:
        >>> raise UnsupportedFormatError(
        ...     file_path="data.xml",
        ...     format="xml",
        ...     supported_formats=["csv", "json", "excel"]
        ... )
    """

    def __init__(self, file_path: str, format: str, supported_formats: list):
        message = (
            f"Unsupported file format '{format}' for file: {file_path}. "
            f"Supported formats: {', '.join(supported_formats)}"
        )
        super().__init__(message, file_path)
        self.details.update({
            'format': format,
            'supported_formats': supported_formats
        })


# ============================================================================
# Insight Generation Errors (Warning)
# ============================================================================

class InsightGenerationError(AnalyticsException):
    """
    The text-generation collaborator is unavailable or failed.

    Callers producing insights substitute a fallback record; report
    generation surfaces this error to its caller.

    Example:
        >>> raise InsightGenerationError(
        ...     "No GGUF model found",
        ...     model="local-llm"
        ... )
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.WARNING,
            details={'model': model} if model else {},
            original_exception=original_exception
        )
        self.model = model
