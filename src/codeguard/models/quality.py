"""Quality assessment entities.

QualityMetrics are recomputed fresh on every validation call and never cached
across reports.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

# Maximum points per rubric dimension; sums to 100
DIMENSION_MAXIMA: dict[str, float] = {
    "completeness": 20.0,
    "specificity": 20.0,
    "quantification": 25.0,
    "actionability": 20.0,
    "consistency": 15.0,
}


class IssueSeverity(Enum):
    """Severity of a quality issue."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class QualityIssue:
    """A single deficiency detected in a report.

    Attributes:
        severity: critical, warning, or info
        category: Rubric dimension that raised the issue
        message: Human-readable description
        field: Report field the issue refers to (if any)
    """

    severity: IssueSeverity
    category: str
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "severity": self.severity.value,
            "category": self.category,
            "message": self.message,
            "field": self.field,
        }


@dataclass(frozen=True)
class QualityBreakdown:
    """Per-dimension scores, each clamped to [0, DIMENSION_MAXIMA[name]]."""

    completeness: float = 0.0
    specificity: float = 0.0
    quantification: float = 0.0
    actionability: float = 0.0
    consistency: float = 0.0

    @property
    def total(self) -> float:
        """Sum of the five dimensions."""
        return (
            self.completeness
            + self.specificity
            + self.quantification
            + self.actionability
            + self.consistency
        )

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary keyed by dimension name."""
        return asdict(self)


@dataclass(frozen=True)
class QualityMetrics:
    """Result of scoring a report against the quality rubric.

    Attributes:
        overall_score: Sum of the breakdown, 0 to 100
        breakdown: Per-dimension scores
        issues: Detected deficiencies, in rule order
        recommendations: Actionable hints, critical items first
        passes_threshold: Whether overall_score meets the pass threshold
    """

    overall_score: float
    breakdown: QualityBreakdown
    issues: tuple[QualityIssue, ...] = ()
    recommendations: tuple[str, ...] = ()
    passes_threshold: bool = False

    @property
    def critical_issues(self) -> list[QualityIssue]:
        """Issues with critical severity."""
        return [i for i in self.issues if i.severity is IssueSeverity.CRITICAL]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "overallScore": self.overall_score,
            "breakdown": self.breakdown.to_dict(),
            "issues": [i.to_dict() for i in self.issues],
            "recommendations": list(self.recommendations),
            "passesThreshold": self.passes_threshold,
        }
