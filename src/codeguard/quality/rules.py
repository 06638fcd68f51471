"""Quality rubric rules.

Every rule is a pure function ``(report, context) -> (penalty, issue | None)``
and caps its own penalty. Rules are grouped into one table per rubric
dimension; adding a rule means appending a function to a table.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from codeguard.models.profile import Complexity
from codeguard.models.quality import IssueSeverity, QualityIssue
from codeguard.models.report import AnalysisReport
from codeguard.quality.standards import (
    CODE_FRAGMENT_PATTERN,
    GENERIC_PHRASES,
    HEDGING_PHRASES,
    LOCATION_PATTERN,
    LOCATION_SENTINELS,
    QUANTITY_PATTERN,
    FindingMinimums,
    QualityStandards,
)


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by every rule of one validation call."""

    complexity: Complexity
    standards: QualityStandards

    @property
    def minimums(self) -> FindingMinimums:
        return self.standards.minimums_for(self.complexity.value)


RuleResult = tuple[float, QualityIssue | None]
Rule = Callable[[AnalysisReport, RuleContext], RuleResult]

PASS: RuleResult = (0.0, None)


def _issue(
    severity: IssueSeverity,
    category: str,
    message: str,
    field: str | None = None,
) -> QualityIssue:
    return QualityIssue(severity=severity, category=category, message=message, field=field)


def is_located(location: str) -> bool:
    """Check whether a location names a file:line or function."""
    text = location.strip()
    if text.lower() in LOCATION_SENTINELS:
        return True
    return LOCATION_PATTERN.search(text) is not None


def is_quantified(text: str) -> bool:
    """Check whether text carries a measurable quantity."""
    return QUANTITY_PATTERN.search(text) is not None


def _contains_any(text: str, phrases: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in phrases)


def _has_before_after(code: str) -> bool:
    lowered = code.lower()
    return "before" in lowered and "after" in lowered


# =============================================================================
# Completeness (20)
# =============================================================================


def min_hotspots(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    expected = ctx.minimums.hotspots
    found = len(report.high_risk_hotspots)
    if found >= expected:
        return PASS
    return 5.0, _issue(
        IssueSeverity.WARNING,
        "completeness",
        f"Expected at least {expected} hotspots for {ctx.complexity.value} project, got {found}",
        "highRiskHotspots",
    )


def min_bottlenecks(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    expected = ctx.minimums.bottlenecks
    found = len(report.bottlenecks)
    if found >= expected:
        return PASS
    return 5.0, _issue(
        IssueSeverity.WARNING,
        "completeness",
        f"Expected at least {expected} bottlenecks, got {found}",
        "bottlenecks",
    )


def min_anti_patterns(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    expected = ctx.minimums.anti_patterns
    found = len(report.anti_patterns)
    if found >= expected:
        return PASS
    return 3.0, _issue(
        IssueSeverity.WARNING,
        "completeness",
        f"Expected at least {expected} anti-patterns, got {found}",
        "antiPatterns",
    )


def summary_present(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if len(report.summary.strip()) >= ctx.standards.summary.min:
        return PASS
    return 5.0, _issue(
        IssueSeverity.CRITICAL,
        "completeness",
        "Summary is missing or too short",
        "summary",
    )


def code_example_present(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if len(report.optimized_code_example.strip()) >= ctx.standards.optimized_code.min:
        return PASS
    return 5.0, _issue(
        IssueSeverity.CRITICAL,
        "completeness",
        "Optimized code example is missing or too short",
        "optimizedCodeExample",
    )


def observations_present(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if report.architectural_observations:
        return PASS
    return 2.0, _issue(
        IssueSeverity.WARNING,
        "completeness",
        "No architectural observations provided",
        "architecturalObservations",
    )


# =============================================================================
# Specificity (20)
# =============================================================================


def located_hotspots(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    missing = sum(1 for h in report.high_risk_hotspots if not is_located(h.file))
    if not missing:
        return PASS
    return min(10.0, missing * 2.0), _issue(
        IssueSeverity.WARNING,
        "specificity",
        f"{missing} hotspots lack specific file:line locations",
        "highRiskHotspots",
    )


def located_bottlenecks(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    missing = sum(1 for b in report.bottlenecks if not is_located(b.location))
    if not missing:
        return PASS
    return min(10.0, missing * 2.0), _issue(
        IssueSeverity.WARNING,
        "specificity",
        f"{missing} bottlenecks lack specific locations",
        "bottlenecks",
    )


def has_located_findings(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if report.findings_count:
        return PASS
    return 10.0, _issue(
        IssueSeverity.WARNING,
        "specificity",
        "Report contains no located findings",
    )


def no_generic_phrases(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    titles = [h.issue for h in report.high_risk_hotspots] + [b.pattern for b in report.bottlenecks]
    if not any(_contains_any(title, GENERIC_PHRASES) for title in titles):
        return PASS
    return 5.0, _issue(
        IssueSeverity.WARNING,
        "specificity",
        "Some findings use generic/vague descriptions instead of specific patterns",
    )


# =============================================================================
# Quantification (25)
# =============================================================================


def quantified_hotspots(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    missing = sum(1 for h in report.high_risk_hotspots if not is_quantified(h.impact))
    if not missing:
        return PASS
    return min(10.0, missing * 3.0), _issue(
        IssueSeverity.CRITICAL,
        "quantification",
        f"{missing} hotspots lack quantified impact (needs numbers: ms, $, %, etc)",
        "highRiskHotspots",
    )


def quantified_bottlenecks(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    missing = sum(
        1
        for b in report.bottlenecks
        if not is_quantified(b.reason) and not is_quantified(b.suggestion)
    )
    if not missing:
        return PASS
    return min(10.0, missing * 3.0), _issue(
        IssueSeverity.CRITICAL,
        "quantification",
        f"{missing} bottlenecks lack quantified metrics",
        "bottlenecks",
    )


def has_quantified_findings(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if report.findings_count:
        return PASS
    return 10.0, _issue(
        IssueSeverity.WARNING,
        "quantification",
        "Report contains no measurable findings",
    )


def quantified_code_example(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    code = report.optimized_code_example
    if not code.strip() or is_quantified(code):
        return PASS
    return 0.0, _issue(
        IssueSeverity.INFO,
        "quantification",
        "Optimized code example should state the expected improvement",
        "optimizedCodeExample",
    )


# =============================================================================
# Actionability (20)
# =============================================================================


def imperative_suggestions(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    vague = sum(1 for b in report.bottlenecks if _contains_any(b.suggestion, HEDGING_PHRASES))
    if not vague:
        return PASS
    return min(8.0, vague * 2.0), _issue(
        IssueSeverity.WARNING,
        "actionability",
        f'{vague} bottlenecks have vague suggestions (use imperative: "Use X", '
        '"Replace Y with Z")',
        "bottlenecks",
    )


def before_after_framing(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if _has_before_after(report.optimized_code_example):
        return PASS
    return 5.0, _issue(
        IssueSeverity.WARNING,
        "actionability",
        "Optimized code should show BEFORE and AFTER for clarity",
        "optimizedCodeExample",
    )


def contains_code(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if CODE_FRAGMENT_PATTERN.search(report.optimized_code_example):
        return PASS
    return 7.0, _issue(
        IssueSeverity.WARNING,
        "actionability",
        "Optimized code example should contain actual code, not just descriptions",
        "optimizedCodeExample",
    )


# =============================================================================
# Consistency (15)
# =============================================================================


def summary_length(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    if len(report.summary) <= ctx.standards.summary.max:
        return PASS
    return 2.0, _issue(
        IssueSeverity.INFO,
        "consistency",
        "Summary exceeds recommended length (should be 2-3 sentences)",
        "summary",
    )


def unique_findings(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    titles = [h.issue.strip().lower() for h in report.high_risk_hotspots] + [
        b.pattern.strip().lower() for b in report.bottlenecks
    ]
    duplicates = len(titles) - len(set(titles))
    if not duplicates:
        return PASS
    return min(5.0, duplicates * 2.0), _issue(
        IssueSeverity.WARNING,
        "consistency",
        f"{duplicates} duplicate findings detected - each issue should be unique",
    )


def concise_anti_patterns(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    limit = ctx.standards.anti_pattern_max
    if not any(len(a) > limit for a in report.anti_patterns):
        return PASS
    return 3.0, _issue(
        IssueSeverity.INFO,
        "consistency",
        "Anti-patterns should be concise labels, not full descriptions",
        "antiPatterns",
    )


def substantial_observations(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    limit = ctx.standards.observation_min
    brief = sum(1 for o in report.architectural_observations if len(o) < limit)
    if not brief:
        return PASS
    return 2.0, _issue(
        IssueSeverity.INFO,
        "consistency",
        f"{brief} architectural observations are too brief",
        "architecturalObservations",
    )


def issue_text_length(report: AnalysisReport, ctx: RuleContext) -> RuleResult:
    limit = ctx.standards.issue
    outside = sum(
        1 for h in report.high_risk_hotspots if not limit.min <= len(h.issue) <= limit.max
    )
    if not outside:
        return PASS
    return min(3.0, float(outside)), _issue(
        IssueSeverity.INFO,
        "consistency",
        f"{outside} hotspot descriptions are outside {limit.min}-{limit.max} characters",
        "highRiskHotspots",
    )


# =============================================================================
# Rule tables
# =============================================================================

RULE_TABLES: dict[str, tuple[Rule, ...]] = {
    "completeness": (
        min_hotspots,
        min_bottlenecks,
        min_anti_patterns,
        summary_present,
        code_example_present,
        observations_present,
    ),
    "specificity": (
        located_hotspots,
        located_bottlenecks,
        has_located_findings,
        no_generic_phrases,
    ),
    "quantification": (
        quantified_hotspots,
        quantified_bottlenecks,
        has_quantified_findings,
        quantified_code_example,
    ),
    "actionability": (
        imperative_suggestions,
        before_after_framing,
        contains_code,
    ),
    "consistency": (
        summary_length,
        unique_findings,
        concise_anti_patterns,
        substantial_observations,
        issue_text_length,
    ),
}
