"""Configuration parsing and validation."""

import os
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from analytics_framework.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError
)
from analytics_framework.core.constants import (
    NUMERIC_SAMPLE_SIZE,
    NUMERIC_RATIO_THRESHOLD,
    IQR_MULTIPLIER,
    MAX_OUTLIER_SAMPLES,
    STRONG_CORRELATION_THRESHOLD,
    MAX_YAML_FILE_SIZE,
    MAX_YAML_NESTING_DEPTH,
    MAX_YAML_KEY_COUNT,
    LLM_MODEL_ENV,
    LOG_LEVEL_ENV,
    DEFAULT_LLM_TEMPERATURE,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_REPORT_TEMPLATE,
    REPORT_TEMPLATES,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Tunable settings for the analytics engine and its collaborators.

    The defaults reproduce the standard engine behaviour; a YAML file or
    environment variables may override them.

    YAML layout::

        analytics:
          numeric_sample_size: 100
          numeric_ratio_threshold: 0.8
          iqr_multiplier: 1.5
          max_outlier_samples: 10
          strong_correlation_threshold: 0.5
        insights:
          llm_model_path: /models/qwen2.5-1.5b-instruct.gguf
          llm_temperature: 0.3
          llm_max_tokens: 1024
          report_template: detailed
        logging:
          log_level: INFO
    """
    numeric_sample_size: int = NUMERIC_SAMPLE_SIZE
    numeric_ratio_threshold: float = NUMERIC_RATIO_THRESHOLD
    iqr_multiplier: float = IQR_MULTIPLIER
    max_outlier_samples: int = MAX_OUTLIER_SAMPLES
    strong_correlation_threshold: float = STRONG_CORRELATION_THRESHOLD
    llm_model_path: Optional[str] = None
    llm_temperature: float = DEFAULT_LLM_TEMPERATURE
    llm_max_tokens: int = DEFAULT_LLM_MAX_TOKENS
    report_template: str = DEFAULT_REPORT_TEMPLATE
    log_level: str = "WARNING"

    # Sections accepted in YAML files; keys are flattened into the dataclass
    SECTIONS = ("analytics", "insights", "logging")

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "AnalyticsConfig":
        """
        Build a config from a (possibly sectioned) dictionary.

        Raises:
            ConfigError: If an unknown section or key is present
            ConfigValidationError: If a value is out of range
        """
        if not config_dict:
            return cls().with_environment()

        if not isinstance(config_dict, dict):
            raise ConfigError("Configuration root must be a mapping")

        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}

        for section, section_values in config_dict.items():
            if section not in cls.SECTIONS:
                raise ConfigError(f"Unknown configuration section '{section}'", field=section)
            if section_values is None:
                continue
            if not isinstance(section_values, dict):
                raise ConfigError(f"Section '{section}' must be a mapping", field=section)
            for key, value in section_values.items():
                if key not in known:
                    raise ConfigError(f"Unknown configuration key '{section}.{key}'", field=f"{section}.{key}")
                values[key] = value

        config = cls(**values).with_environment()
        issues = config.validate()
        if issues:
            raise ConfigValidationError("; ".join(issues))
        return config

    @classmethod
    def from_yaml(cls, config_path: str) -> "AnalyticsConfig":
        """
        Load configuration from a YAML file with size and structure limits.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            AnalyticsConfig instance

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If the file exceeds size or nesting limits
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {MAX_YAML_FILE_SIZE:,} bytes",
                file_size=file_size,
                max_size=MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

        if config_dict is not None:
            cls._validate_yaml_structure(config_dict)

        return cls.from_dict(config_dict)

    @classmethod
    def _validate_yaml_structure(cls, obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
        """Reject YAML documents that are too deep or have too many keys."""
        if total_keys is None:
            total_keys = [0]

        if current_depth > MAX_YAML_NESTING_DEPTH:
            raise YAMLSizeError(
                f"YAML nesting depth exceeds maximum of {MAX_YAML_NESTING_DEPTH} levels"
            )

        if isinstance(obj, dict):
            total_keys[0] += len(obj)
            if total_keys[0] > MAX_YAML_KEY_COUNT:
                raise YAMLSizeError(f"YAML structure contains more than {MAX_YAML_KEY_COUNT:,} keys")
            for value in obj.values():
                cls._validate_yaml_structure(value, current_depth + 1, total_keys)
        elif isinstance(obj, list):
            total_keys[0] += len(obj)
            if total_keys[0] > MAX_YAML_KEY_COUNT:
                raise YAMLSizeError(f"YAML structure contains more than {MAX_YAML_KEY_COUNT:,} keys")
            for item in obj:
                cls._validate_yaml_structure(item, current_depth + 1, total_keys)

    def with_environment(self) -> "AnalyticsConfig":
        """Return a copy with environment variable overrides applied."""
        overrides: Dict[str, Any] = {}

        if os.getenv(LLM_MODEL_ENV):
            overrides["llm_model_path"] = os.getenv(LLM_MODEL_ENV)

        if os.getenv(LOG_LEVEL_ENV):
            overrides["log_level"] = os.getenv(LOG_LEVEL_ENV).upper()

        if not overrides:
            return self
        values = asdict(self)
        values.update(overrides)
        return AnalyticsConfig(**values)

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not _is_int(self.numeric_sample_size) or self.numeric_sample_size < 1:
            issues.append(f"numeric_sample_size must be a positive integer: {self.numeric_sample_size}")

        if not _is_number(self.numeric_ratio_threshold) or not 0 < self.numeric_ratio_threshold <= 1:
            issues.append(f"numeric_ratio_threshold must be in (0, 1]: {self.numeric_ratio_threshold}")

        if not _is_number(self.iqr_multiplier) or self.iqr_multiplier <= 0:
            issues.append(f"iqr_multiplier must be positive: {self.iqr_multiplier}")

        if not _is_int(self.max_outlier_samples) or self.max_outlier_samples < 0:
            issues.append(f"max_outlier_samples must be a non-negative integer: {self.max_outlier_samples}")

        if (not _is_number(self.strong_correlation_threshold)
                or not 0 <= self.strong_correlation_threshold < 1):
            issues.append(
                f"strong_correlation_threshold must be in [0, 1): {self.strong_correlation_threshold}"
            )

        if not _is_number(self.llm_temperature) or not 0 <= self.llm_temperature <= 2:
            issues.append(f"llm_temperature must be in [0, 2]: {self.llm_temperature}")

        if not _is_int(self.llm_max_tokens) or self.llm_max_tokens < 1:
            issues.append(f"llm_max_tokens must be a positive integer: {self.llm_max_tokens}")

        if not isinstance(self.report_template, str) or self.report_template not in REPORT_TEMPLATES:
            issues.append(
                f"report_template must be one of {', '.join(REPORT_TEMPLATES)}: {self.report_template}"
            )

        if str(self.log_level).upper() not in LOG_LEVELS:
            issues.append(f"log_level must be one of {', '.join(LOG_LEVELS)}: {self.log_level}")

        return issues

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the sectioned dictionary layout used by YAML files."""
        values = asdict(self)
        return {
            "analytics": {
                key: values[key] for key in (
                    "numeric_sample_size",
                    "numeric_ratio_threshold",
                    "iqr_multiplier",
                    "max_outlier_samples",
                    "strong_correlation_threshold",
                )
            },
            "insights": {
                key: values[key] for key in (
                    "llm_model_path",
                    "llm_temperature",
                    "llm_max_tokens",
                    "report_template",
                )
            },
            "logging": {"log_level": values["log_level"]},
        }
