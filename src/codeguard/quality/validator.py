"""Quality validator for audit reports.

Scores a report against five rubric dimensions:
- Completeness (20): minimum findings, summary, code example, observations
- Specificity (20): exact locations, no generic filler
- Quantification (25): measurable impact on every finding
- Actionability (20): imperative fixes, BEFORE/AFTER code
- Consistency (15): lengths, duplicates, label style

Validation is a pure function of (report, complexity): no I/O, no clock, no
randomness, and no state kept between calls.
"""

import logging

from codeguard.models.profile import Complexity
from codeguard.models.quality import (
    DIMENSION_MAXIMA,
    IssueSeverity,
    QualityBreakdown,
    QualityIssue,
    QualityMetrics,
)
from codeguard.models.report import AnalysisReport
from codeguard.quality.rules import RULE_TABLES, Rule, RuleContext
from codeguard.quality.standards import QualityStandards

logger = logging.getLogger(__name__)

# Hints for dimensions scoring below their recommendation threshold
DIMENSION_HINTS: dict[str, str] = {
    "completeness": (
        "Add more findings - expected {bottlenecks}+ bottlenecks for {tier} projects"
    ),
    "specificity": 'Include specific locations: "routes/users.ts:45" not "user routes"',
    "quantification": (
        'Add quantified metrics: "2.5s -> 45ms (55x faster)", "$2,040/year savings"'
    ),
    "actionability": "Provide concrete fixes with before/after code examples",
    "consistency": "Ensure consistent formatting: concise anti-patterns, detailed observations",
}


class QualityValidator:
    """Scores audit reports against the quality rubric."""

    def __init__(
        self,
        standards: QualityStandards | None = None,
        rule_tables: dict[str, tuple[Rule, ...]] | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            standards: Rubric thresholds (defaults if None)
            rule_tables: Rules per dimension (built-in tables if None)
        """
        self.standards = standards or QualityStandards()
        self.rule_tables = rule_tables or RULE_TABLES

    def validate(self, report: AnalysisReport, complexity: Complexity) -> QualityMetrics:
        """Score a report.

        Args:
            report: Audit report as returned by the model
            complexity: Complexity tier of the analyzed project

        Returns:
            QualityMetrics for the report
        """
        ctx = RuleContext(complexity=complexity, standards=self.standards)
        issues: list[QualityIssue] = []
        scores: dict[str, float] = {}

        for dimension, maximum in DIMENSION_MAXIMA.items():
            penalty = 0.0
            for rule in self.rule_tables.get(dimension, ()):
                rule_penalty, issue = rule(report, ctx)
                penalty += rule_penalty
                if issue is not None:
                    issues.append(issue)
            scores[dimension] = min(maximum, max(0.0, maximum - penalty))

        breakdown = QualityBreakdown(**scores)
        overall = breakdown.total

        metrics = QualityMetrics(
            overall_score=overall,
            breakdown=breakdown,
            issues=tuple(issues),
            recommendations=tuple(self._recommendations(scores, issues, complexity)),
            passes_threshold=overall >= self.standards.pass_threshold,
        )

        logger.debug(
            "Quality score %.1f/100 (%d issues, %s)",
            overall,
            len(issues),
            "pass" if metrics.passes_threshold else "fail",
        )
        return metrics

    def _recommendations(
        self,
        scores: dict[str, float],
        issues: list[QualityIssue],
        complexity: Complexity,
    ) -> list[str]:
        """Critical issues first, then hints for weak dimensions."""
        recommendations: list[str] = []

        critical = [i for i in issues if i.severity is IssueSeverity.CRITICAL]
        if critical:
            recommendations.append("CRITICAL: Fix these issues before submission:")
            recommendations.extend(f"  - {issue.message}" for issue in critical)

        minimums = self.standards.minimums_for(complexity.value)
        for dimension, threshold in self.standards.recommendation_thresholds.items():
            if scores[dimension] < threshold:
                recommendations.append(
                    DIMENSION_HINTS[dimension].format(
                        bottlenecks=minimums.bottlenecks, tier=complexity.value
                    )
                )

        return recommendations


def validate_report(
    report: AnalysisReport,
    complexity: Complexity,
    standards: QualityStandards | None = None,
) -> QualityMetrics:
    """Score a report with the built-in rubric.

    Convenience function for one-off validation.

    Args:
        report: Audit report
        complexity: Complexity tier
        standards: Rubric thresholds (defaults if None)

    Returns:
        QualityMetrics
    """
    return QualityValidator(standards).validate(report, complexity)
