"""Quality report rendering.

Renders QualityMetrics to Markdown using the Jinja2 template shipped in the
package. Output is deterministic: the same metrics always render the same
text.
"""

import logging

from jinja2 import Environment, PackageLoader, select_autoescape

from codeguard.models.quality import DIMENSION_MAXIMA, IssueSeverity, QualityMetrics

logger = logging.getLogger(__name__)

SEVERITY_ICONS = {
    IssueSeverity.CRITICAL: "🚨",
    IssueSeverity.WARNING: "⚠️",
    IssueSeverity.INFO: "ℹ️",
}


def format_score(value: float) -> str:
    """Format a score with at most one decimal place."""
    return f"{value:.1f}".removesuffix(".0")


def score_icon(score: float) -> str:
    """Icon for an overall score band."""
    if score >= 90:
        return "🏆"
    if score >= 75:
        return "✅"
    if score >= 60:
        return "⚠️"
    return "❌"


class QualityReportRenderer:
    """Renders quality metrics to Markdown."""

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("codeguard", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["score"] = format_score

    def render(
        self,
        metrics: QualityMetrics,
        pass_threshold: float = 60.0,
        template_name: str = "quality_report.md.j2",
    ) -> str:
        """Render metrics to Markdown.

        Args:
            metrics: Quality metrics to render
            pass_threshold: Threshold shown in the verdict line
            template_name: Template file to use

        Returns:
            Rendered Markdown string
        """
        template = self._env.get_template(template_name)

        breakdown = metrics.breakdown.to_dict()
        dimensions = [
            {
                "name": name.capitalize(),
                "score": breakdown[name],
                "maximum": maximum,
            }
            for name, maximum in DIMENSION_MAXIMA.items()
        ]
        issues = [
            {"icon": SEVERITY_ICONS[i.severity], "severity": i.severity.value, "message": i.message}
            for i in metrics.issues
        ]

        return template.render(
            metrics=metrics,
            icon=score_icon(metrics.overall_score),
            dimensions=dimensions,
            issues=issues,
            pass_threshold=pass_threshold,
        )


def render_quality_report(metrics: QualityMetrics, pass_threshold: float = 60.0) -> str:
    """Render a quality report.

    Args:
        metrics: Quality metrics to render
        pass_threshold: Threshold shown in the verdict line

    Returns:
        Markdown text
    """
    return QualityReportRenderer().render(metrics, pass_threshold)
