"""CodeGuard quality assurance.

Scores audit reports against the quality rubric, repairs their surface form,
and renders a human-readable quality report.
"""

from codeguard.quality.enhancer import OutputEnhancer
from codeguard.quality.reporter import QualityReportRenderer, render_quality_report
from codeguard.quality.standards import FindingMinimums, LengthLimit, QualityStandards
from codeguard.quality.validator import QualityValidator, validate_report

__all__ = [
    "FindingMinimums",
    "LengthLimit",
    "OutputEnhancer",
    "QualityReportRenderer",
    "QualityStandards",
    "QualityValidator",
    "render_quality_report",
    "validate_report",
]
