"""Quality standards for report scoring.

Thresholds, limits and textual patterns used by the quality rubric. The
numeric standards live in a dataclass so callers can override them per run;
the regular expressions are module constants shared by every rule.
"""

import re
from dataclasses import dataclass, field

from codeguard.models.quality import DIMENSION_MAXIMA

# Findings whose location or quantity is expressed one of these ways are
# considered specific / quantified.

# "src/db.ts:45", "function getUser", "def load", "UserService.find()"
LOCATION_PATTERN = re.compile(
    r"[\w./\\-]+\.[A-Za-z0-9]{1,6}:\d+"
    r"|\b(?:function|def|func|fn|method|class)\s+[A-Za-z_$][\w$]*"
    r"|\b[A-Za-z_$][\w$.]*\(\)",
)

# Durations, percentages, currency, multipliers, sizes, counts, big-O
QUANTITY_PATTERN = re.compile(
    r"[$€£]\s?\d[\d,]*(?:\.\d+)?"
    r"|\b\d[\d,]*(?:\.\d+)?\s?"
    r"(?:%|x\b|×|ms\b|µs\b|s\b|secs?\b|seconds?\b|mins?\b|minutes?\b|h\b|hrs?\b|hours?\b"
    r"|days?\b|weeks?\b|months?\b|years?\b|kb\b|mb\b|gb\b|tb\b|usd\b|eur\b"
    r"|queries\b|query\b|requests?\b|req/s\b|rps\b|re-?renders?\b|renders?\b|calls?\b"
    r"|rows?\b|records?\b|items?\b|files?\b|lines?\b|connections?\b|threads?\b|users?\b"
    r"|times\b|round[- ]trips?\b)"
    r"|\bO\([^)]*\)",
    re.IGNORECASE,
)

# Code markers in an optimized code example
CODE_FRAGMENT_PATTERN = re.compile(
    r"```|//|=>|\b(?:const|let|var|function|def|class|return|import|async|await|SELECT|UPDATE)\b",
)

# Locations that name the whole project rather than a place in it
LOCATION_SENTINELS = frozenset(
    {"project level", "project-level", "global", "cross-cutting", "repository-wide"}
)

# Filler phrases that signal a generic finding
GENERIC_PHRASES = (
    "bad code",
    "poor quality",
    "needs improvement",
    "could be better",
    "not optimal",
    "inefficient",
    "problems exist",
    "various issues",
    "best practices",
)

# Hedging words that weaken a suggestion
HEDGING_PHRASES = ("consider", "maybe", "could", "might want to", "try to", "perhaps", "possibly")


@dataclass(frozen=True)
class FindingMinimums:
    """Minimum finding counts expected for a complexity tier."""

    hotspots: int
    bottlenecks: int
    anti_patterns: int


@dataclass(frozen=True)
class LengthLimit:
    """Inclusive character range for a text field."""

    min: int
    max: int


def _default_minimums() -> dict[str, FindingMinimums]:
    return {
        "simple": FindingMinimums(hotspots=0, bottlenecks=1, anti_patterns=1),
        "medium": FindingMinimums(hotspots=1, bottlenecks=2, anti_patterns=2),
        "complex": FindingMinimums(hotspots=2, bottlenecks=3, anti_patterns=3),
        "enterprise": FindingMinimums(hotspots=3, bottlenecks=4, anti_patterns=4),
    }


def _default_recommendation_thresholds() -> dict[str, float]:
    # Insertion order is the order hints are emitted in
    return {
        "quantification": 20.0,
        "specificity": 15.0,
        "actionability": 15.0,
        "completeness": 15.0,
        "consistency": 12.0,
    }


@dataclass(frozen=True)
class QualityStandards:
    """Numeric standards of the quality rubric.

    Attributes:
        min_findings: Minimum finding counts keyed by complexity tier value
        summary: Summary length limits
        issue: Hotspot issue text length limits
        optimized_code: Optimized code example length limits
        anti_pattern_max: Longest acceptable anti-pattern label
        observation_min: Shortest acceptable architectural observation
        pass_threshold: Minimum overall score that passes
        recommendation_thresholds: Score below which a dimension gets a hint,
            keyed by dimension name in hint order
    """

    min_findings: dict[str, FindingMinimums] = field(default_factory=_default_minimums)
    summary: LengthLimit = LengthLimit(min=50, max=500)
    issue: LengthLimit = LengthLimit(min=20, max=200)
    optimized_code: LengthLimit = LengthLimit(min=100, max=5000)
    anti_pattern_max: int = 100
    observation_min: int = 30
    pass_threshold: float = 60.0
    recommendation_thresholds: dict[str, float] = field(
        default_factory=_default_recommendation_thresholds
    )

    def __post_init__(self) -> None:
        """Validate standards."""
        missing = {"simple", "medium", "complex", "enterprise"} - set(self.min_findings)
        if missing:
            raise ValueError(f"min_findings missing tiers: {sorted(missing)}")
        if not 0.0 <= self.pass_threshold <= 100.0:
            raise ValueError(
                f"pass_threshold must be between 0 and 100. Got: {self.pass_threshold}"
            )
        unknown = set(self.recommendation_thresholds) - set(DIMENSION_MAXIMA)
        if unknown:
            raise ValueError(f"recommendation_thresholds has unknown dimensions: {sorted(unknown)}")
        for name, threshold in self.recommendation_thresholds.items():
            if not 0.0 <= threshold <= DIMENSION_MAXIMA[name]:
                raise ValueError(
                    f"recommendation_thresholds[{name!r}] must be between 0 and "
                    f"{DIMENSION_MAXIMA[name]:g}. Got: {threshold}"
                )

    def minimums_for(self, tier: str) -> FindingMinimums:
        """Return the minimum finding counts for a tier value."""
        return self.min_findings[tier]
