"""
Narrative insights and business reports for analysis profiles.

The statistical profile is turned into a prompt and handed to a text
generator. The default generator runs a local GGUF model through
llama-cpp-python; no server is required.

Requirements:
- pip install llama-cpp-python   (optional, "llm" extra)
- A GGUF model file (e.g., from HuggingFace)

Environment Variables:
- ANALYTICS_LLM_MODEL: Path to GGUF model file

Usage:
    generator = InsightGenerator(LocalLLMTextGenerator("/path/to/model.gguf"))
    record = generator.generate_insights(profile)

Text generation is best effort. InsightGenerator raises
InsightGenerationError when the model is missing or fails; callers that must
always return something (AnalyticsEngine.generate_insights) substitute
fallback_insights().
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from analytics_framework.analytics.profile_result import AnalysisProfile
from analytics_framework.core.constants import (
    DEFAULT_LLM_CONTEXT,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_TEMPERATURE,
    DEFAULT_REPORT_TEMPLATE,
    LLM_MODEL_ENV,
    REPORT_TEMPLATES,
)
from analytics_framework.core.exceptions import InsightGenerationError

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "fallback"
FALLBACK_FINDING = "Analysis completed. AI insights unavailable."
FALLBACK_RESPONSE = "Fallback response."

# Search paths for GGUF models
GGUF_SEARCH_PATHS = [
    Path.home() / ".cache" / "huggingface" / "hub",
    Path.home() / ".local" / "share" / "models",
    Path.home() / "models",
    Path("/usr/share/models"),
    Path.cwd() / "models",
]

# Preferred model patterns (best balance of quality/speed first)
PREFERRED_PATTERNS = [
    "*qwen*1.5b*.gguf",
    "*qwen*0.5b*.gguf",
    "*phi*3*mini*.gguf",
    "*llama*3.2*1b*.gguf",
    "*.gguf",
]

SYSTEM_PROMPT = "You are a senior data scientist. Analyze this dataset and provide actionable insights."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Result records
# ============================================================================

@dataclass(frozen=True)
class InsightItem:
    """One narrative finding."""
    category: str
    finding: str
    confidence: float
    priority: str
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "finding": self.finding,
            "confidence": self.confidence,
            "priority": self.priority,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class InsightRecord:
    """
    Narrative insights for an analysis profile.

    Attributes:
        insights: Individual findings
        full_response: Raw generator output
        generated_at: UTC timestamp
        model: Model name, or "fallback" for the substitute record
    """
    insights: Tuple[InsightItem, ...]
    full_response: str
    generated_at: datetime
    model: str

    @property
    def is_fallback(self) -> bool:
        return self.model == FALLBACK_MODEL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insights": [item.to_dict() for item in self.insights],
            "full_response": self.full_response,
            "generated_at": self.generated_at.isoformat(),
            "model": self.model,
        }


@dataclass(frozen=True)
class ReportSection:
    title: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "content": self.content}


@dataclass(frozen=True)
class BusinessReport:
    """Generated report for business stakeholders."""
    title: str
    template: str
    sections: Tuple[ReportSection, ...]
    full_content: str
    word_count: int
    generated_at: datetime
    model: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "template": self.template,
            "sections": [section.to_dict() for section in self.sections],
            "full_content": self.full_content,
            "metadata": {
                "word_count": self.word_count,
                "generated_at": self.generated_at.isoformat(),
                "model": self.model,
            },
        }


def fallback_insights() -> InsightRecord:
    """The fixed record used when no narrative can be generated."""
    return InsightRecord(
        insights=(InsightItem(
            category="general",
            finding=FALLBACK_FINDING,
            confidence=0.8,
            priority="medium",
            impact="moderate",
        ),),
        full_response=FALLBACK_RESPONSE,
        generated_at=_utcnow(),
        model=FALLBACK_MODEL,
    )


# ============================================================================
# Prompt building
# ============================================================================

def _format_stats(profile: AnalysisProfile) -> str:
    if not profile.descriptive_stats:
        return "No stats available"
    return "\n".join(
        f"- {column}: mean={stats.mean}, median={stats.median}, std_dev={stats.std_dev}"
        for column, stats in profile.descriptive_stats.items()
    )


def _format_correlations(profile: AnalysisProfile) -> str:
    pairs = profile.correlation_matrix.strong_pairs
    if not pairs:
        return "No strong correlations found"
    return "\n".join(
        f"- {pair.column1} <-> {pair.column2}: {pair.correlation * 100:.1f}% ({pair.strength})"
        for pair in pairs
    )


def _format_outliers(profile: AnalysisProfile) -> str:
    if not profile.outliers:
        return "No outliers detected"
    return "\n".join(
        f"- {column}: {report.count} outliers ({report.percentage:.2f}%)"
        for column, report in profile.outliers.items()
    )


def _format_trends(profile: AnalysisProfile) -> str:
    if not profile.trends:
        return "No trends found"
    return "\n".join(
        f"- {column}: {report.direction} trend (R²={report.r_squared}, {report.significance})"
        for column, report in profile.trends.items()
    )


def build_insights_prompt(profile: AnalysisProfile) -> str:
    """Prompt asking for insights on every part of the profile."""
    quality = profile.data_quality
    metadata = profile.metadata

    return f"""DATASET OVERVIEW:
- Rows: {metadata.row_count}
- Columns: {metadata.column_count}
- Data Quality Score: {quality.overall_score}%

STATS:
{_format_stats(profile)}

CORRELATIONS:
{_format_correlations(profile)}

DATA QUALITY:
- Completeness: {quality.completeness}%
- Uniqueness: {quality.uniqueness}%
- Validity: {quality.validity}%
- Consistency: {quality.consistency}%

OUTLIERS:
{_format_outliers(profile)}

TRENDS:
{_format_trends(profile)}

Please provide:
1. Key Business Insights
2. Data Quality Assessment
3. Patterns & Correlations
4. Risks
5. Opportunities
6. Actionable Recommendations"""


def build_report_prompt(profile: AnalysisProfile, template: str = DEFAULT_REPORT_TEMPLATE) -> str:
    if template not in REPORT_TEMPLATES:
        raise ValueError(f"Unknown report template '{template}'. Choose from: {', '.join(REPORT_TEMPLATES)}")
    return f"{build_insights_prompt(profile)}\n\nGenerate a {template} report for business stakeholders."


# ============================================================================
# Text generators
# ============================================================================

class LocalLLMTextGenerator:
    """
    Text generation with a local GGUF model via llama-cpp-python.

    The model is located and loaded lazily on first use.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        temperature: float = DEFAULT_LLM_TEMPERATURE,
        max_tokens: int = DEFAULT_LLM_MAX_TOKENS,
        context_size: int = DEFAULT_LLM_CONTEXT
    ):
        """
        Args:
            model_path: Path to GGUF model file (or set ANALYTICS_LLM_MODEL env var)
            temperature: Sampling temperature
            max_tokens: Maximum generated tokens
            context_size: Model context window
        """
        self.model_path = model_path or os.environ.get(LLM_MODEL_ENV)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.context_size = context_size
        self._llm = None
        self._available = None
        self._model_name = None

    @property
    def name(self) -> str:
        return self._model_name or "local-llm"

    def _find_model(self) -> Optional[str]:
        """Find a suitable GGUF model file."""
        if self.model_path and Path(self.model_path).exists():
            return self.model_path

        for search_path in GGUF_SEARCH_PATHS:
            if not search_path.exists():
                continue
            for pattern in PREFERRED_PATTERNS:
                matches = list(search_path.rglob(pattern))
                if matches:
                    # Prefer smaller models
                    matches.sort(key=lambda p: p.stat().st_size)
                    logger.info(f"Found GGUF model: {matches[0]}")
                    return str(matches[0])

        return None

    def is_available(self) -> bool:
        """Check if llama-cpp-python is installed and a model can be found."""
        if self._available is not None:
            return self._available

        try:
            import llama_cpp  # noqa: F401
        except ImportError:
            logger.warning("llama-cpp-python not installed. Install the 'llm' extra for AI insights.")
            self._available = False
            return False

        self._available = self._find_model() is not None
        if not self._available:
            logger.warning(f"No GGUF model found. Set {LLM_MODEL_ENV} to a model file.")
        return self._available

    def _load_model(self):
        """Load the model lazily (only when first needed)."""
        if self._llm is not None:
            return self._llm

        model_path = self._find_model()
        if not model_path:
            raise InsightGenerationError("No GGUF model found", model=self.name)

        try:
            from llama_cpp import Llama

            logger.info(f"Loading GGUF model: {model_path}")
            self._llm = Llama(
                model_path=model_path,
                n_ctx=self.context_size,
                n_threads=4,
                n_gpu_layers=0,
                verbose=False,
            )
            self._model_name = Path(model_path).stem
            return self._llm
        except Exception as e:
            raise InsightGenerationError(
                f"Failed to load model: {e}", model=Path(model_path).stem, original_exception=e
            )

    def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            InsightGenerationError: If no model is available or generation fails
        """
        if not self.is_available():
            raise InsightGenerationError("Local LLM not available", model=self.name)

        llm = self._load_model()
        try:
            output = llm.create_chat_completion(
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                top_p=0.95,
            )
            text = output["choices"][0]["message"]["content"] or ""
        except Exception as e:
            raise InsightGenerationError(f"LLM generation failed: {e}", model=self.name, original_exception=e)

        text = text.strip()
        if not text:
            raise InsightGenerationError("LLM returned an empty response", model=self.name)
        return text


class InsightGenerator:
    """
    Builds prompts from a profile and parses generator output into records.

    Attributes:
        text_generator: Object with generate(prompt) -> str and a name
    """

    def __init__(self, text_generator: Optional[Any] = None):
        self.text_generator = text_generator or LocalLLMTextGenerator()

    @property
    def model_name(self) -> str:
        return getattr(self.text_generator, "name", type(self.text_generator).__name__)

    def generate_insights(self, profile: AnalysisProfile) -> InsightRecord:
        """
        Raises:
            InsightGenerationError: If the text generator fails
        """
        text = self._generate(build_insights_prompt(profile))
        return InsightRecord(
            insights=(InsightItem(
                category="general",
                finding=text,
                confidence=0.8,
                priority="medium",
                impact="moderate",
            ),),
            full_response=text,
            generated_at=_utcnow(),
            model=self.model_name,
        )

    def generate_report(self, profile: AnalysisProfile, template: str = DEFAULT_REPORT_TEMPLATE) -> BusinessReport:
        """
        Raises:
            ValueError: If the template is unknown
            InsightGenerationError: If the text generator fails
        """
        text = self._generate(build_report_prompt(profile, template))
        return BusinessReport(
            title=f"{template} Data Analysis Report",
            template=template,
            sections=(ReportSection(title="Report", content=text),),
            full_content=text,
            word_count=len(text.split()),
            generated_at=_utcnow(),
            model=self.model_name,
        )

    def _generate(self, prompt: str) -> str:
        try:
            text = self.text_generator.generate(prompt)
        except InsightGenerationError:
            raise
        except Exception as e:
            raise InsightGenerationError(
                f"Text generation failed: {e}", model=self.model_name, original_exception=e
            )
        if not isinstance(text, str) or not text.strip():
            raise InsightGenerationError("Text generator returned no content", model=self.model_name)
        return text.strip()
