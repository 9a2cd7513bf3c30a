"""
Qualitative threshold ladders.

Each ladder is an ordered table of (threshold, label) steps checked from the
highest threshold down; the first step the value reaches wins, otherwise the
default label applies. Keeping the thresholds as data lets them be audited
and tested separately from the statistics that feed them.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ThresholdLadder:
    """
    Ordered threshold lookup table.

    Attributes:
        steps: (threshold, label) pairs in descending threshold order
        default: Label when no threshold is reached
        inclusive: Compare with >= when True, > when False
        absolute: Compare the absolute value of the input
    """
    steps: Tuple[Tuple[float, str], ...]
    default: str
    inclusive: bool = True
    absolute: bool = False

    def __post_init__(self):
        thresholds = [threshold for threshold, _ in self.steps]
        if thresholds != sorted(thresholds, reverse=True):
            raise ValueError("ThresholdLadder steps must be in descending threshold order")

    def classify(self, value: float) -> str:
        if self.absolute:
            value = abs(value)
        for threshold, label in self.steps:
            if value >= threshold if self.inclusive else value > threshold:
                return label
        return self.default

    def labels(self) -> Tuple[str, ...]:
        return tuple(label for _, label in self.steps) + (self.default,)


# Strength of a Pearson coefficient, by |r|
CORRELATION_STRENGTH = ThresholdLadder(
    steps=(
        (0.9, "very strong"),
        (0.7, "strong"),
        (0.5, "moderate"),
        (0.3, "weak"),
    ),
    default="very weak",
    absolute=True,
)

# Significance of a linear trend, by R²
TREND_SIGNIFICANCE = ThresholdLadder(
    steps=(
        (0.8, "very strong"),
        (0.6, "strong"),
        (0.4, "moderate"),
        (0.2, "weak"),
    ),
    default="very weak",
)

# Confidence of a one-step-ahead prediction, by R² (strict comparisons)
PREDICTION_CONFIDENCE = ThresholdLadder(
    steps=(
        (0.7, "high"),
        (0.4, "medium"),
    ),
    default="low",
    inclusive=False,
)


def outlier_severity(value: float, lower: float) -> str:
    """'low' for values below the lower fence, 'high' otherwise."""
    return "low" if value < lower else "high"


def trend_direction(slope: float) -> str:
    if slope > 0:
        return "increasing"
    if slope < 0:
        return "decreasing"
    return "stable"
