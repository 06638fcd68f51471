"""CodeGuard data models.

This module exports all core entities used throughout the application:
- FileRecord: Decoded source file supplied by ingestion
- ModuleDescriptor / ProjectProfile: Project profiling results
- AnalysisReport / ModuleReport: Reports returned by the model
- QualityMetrics / QualityIssue: Rubric scoring results
"""

from codeguard.models.files import FileRecord
from codeguard.models.llm_config import VALID_PROVIDERS, LLMConfig
from codeguard.models.profile import (
    AnalysisDepth,
    Complexity,
    ModuleDescriptor,
    ProjectProfile,
)
from codeguard.models.quality import (
    DIMENSION_MAXIMA,
    IssueSeverity,
    QualityBreakdown,
    QualityIssue,
    QualityMetrics,
)
from codeguard.models.report import (
    FINDING_CATEGORIES,
    AnalysisReport,
    Bottleneck,
    Hotspot,
    ModuleReport,
    ReportKind,
)

__all__ = [
    "AnalysisDepth",
    "AnalysisReport",
    "Bottleneck",
    "Complexity",
    "DIMENSION_MAXIMA",
    "FINDING_CATEGORIES",
    "FileRecord",
    "Hotspot",
    "IssueSeverity",
    "LLMConfig",
    "ModuleDescriptor",
    "ModuleReport",
    "ProjectProfile",
    "QualityBreakdown",
    "QualityIssue",
    "QualityMetrics",
    "ReportKind",
    "VALID_PROVIDERS",
]
