"""
Analytics Framework Constants.

This module defines the thresholds, limits and defaults used throughout the
analytics engine. Centralizing these values keeps the statistical rules
auditable in one place.
"""

# ============================================================================
# Numeric Classification
# ============================================================================

# Number of leading rows sampled when deciding whether a column is numeric
NUMERIC_SAMPLE_SIZE: int = 100

# Fraction of non-null sampled cells that must parse as numbers.
# The comparison is strict: exactly 80% numeric is NOT numeric.
NUMERIC_RATIO_THRESHOLD: float = 0.8


# ============================================================================
# Minimum Observation Counts
# ============================================================================

# Outlier fences need more than this many valid values
MIN_OUTLIER_VALUES: int = 4

# Trend regression needs more than this many valid points
MIN_TREND_POINTS: int = 2

# Pearson correlation needs at least this many paired observations
MIN_CORRELATION_PAIRS: int = 2


# ============================================================================
# Outlier Detection
# ============================================================================

# Tukey fence multiplier applied to the interquartile range
IQR_MULTIPLIER: float = 1.5

# Maximum outlier samples kept per column (first N in row order)
MAX_OUTLIER_SAMPLES: int = 10


# ============================================================================
# Correlation
# ============================================================================

# Pairs with |r| strictly above this value are reported as strong pairs
STRONG_CORRELATION_THRESHOLD: float = 0.5


# ============================================================================
# Rounding
# ============================================================================

# Decimal places for statistics, coefficients and predictions
STAT_DECIMALS: int = 4

# Decimal places for trend slopes
SLOPE_DECIMALS: int = 6

# Decimal places for quality scores
SCORE_DECIMALS: int = 2


# ============================================================================
# Data Quality Thresholds
# ============================================================================

# A column is inconsistent when it shows more than this many cell kinds
MAX_CONSISTENT_KINDS: int = 2

# Points deducted from validity for every column with mixed kinds
VALIDITY_PENALTY_PER_COLUMN: float = 10.0

# Recommendation triggers (score strictly below threshold)
COMPLETENESS_RECOMMENDATION_THRESHOLD: float = 90.0
UNIQUENESS_RECOMMENDATION_THRESHOLD: float = 95.0
CONSISTENCY_RECOMMENDATION_THRESHOLD: float = 85.0
VALIDITY_RECOMMENDATION_THRESHOLD: float = 90.0


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (1MB)
MAX_YAML_FILE_SIZE: int = 1024 * 1024

# Maximum YAML nesting depth
MAX_YAML_NESTING_DEPTH: int = 10

# Maximum number of keys in a YAML document
MAX_YAML_KEY_COUNT: int = 1_000


# ============================================================================
# Insight Generation
# ============================================================================

# Environment variable pointing at a GGUF model file
LLM_MODEL_ENV: str = "ANALYTICS_LLM_MODEL"

# Environment variable overriding the log level
LOG_LEVEL_ENV: str = "ANALYTICS_LOG_LEVEL"

DEFAULT_LLM_TEMPERATURE: float = 0.3
DEFAULT_LLM_MAX_TOKENS: int = 1024
DEFAULT_LLM_CONTEXT: int = 4096

# Supported report templates
REPORT_TEMPLATES = ("executive", "detailed", "technical")
DEFAULT_REPORT_TEMPLATE: str = "detailed"
