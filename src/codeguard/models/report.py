"""Report entities returned by the model.

This module contains the report-level entities:
- ReportKind: Which report variant was requested
- Hotspot / Bottleneck: Individual findings of an audit report
- AnalysisReport: The audit report scored by the quality rubric
- ModuleReport: A focused report variant (architecture, impact, cost, security)

Wire payloads use camelCase keys; the dataclasses use snake_case.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# Architectural layers a finding may be categorised under
FINDING_CATEGORIES = ("Frontend", "Backend", "Mixed", "Infrastructure", "General")
DEFAULT_CATEGORY = "General"


def _list(value: Any) -> list[Any]:
    """Return value if it is a JSON array, otherwise an empty list."""
    return value if isinstance(value, list) else []


class ReportKind(Enum):
    """Report variant requested from the model."""

    AUDIT = "audit"
    ARCHITECTURE = "architecture"
    IMPACT = "impact"
    COST = "cost"
    SECURITY = "security"


@dataclass(frozen=True)
class Hotspot:
    """High-risk location in the codebase.

    Attributes:
        file: Location, ideally "path:line" or a function name
        issue: Short description of the problem
        impact: Quantified downstream impact
        category: Architectural layer (one of FINDING_CATEGORIES)
    """

    file: str
    issue: str
    impact: str
    category: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hotspot":
        """Create a Hotspot from a wire dictionary."""
        return cls(
            file=str(data.get("file", "")),
            issue=str(data.get("issue", "")),
            impact=str(data.get("impact", "")),
            category=data.get("category") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            "file": self.file,
            "issue": self.issue,
            "impact": self.impact,
            "category": self.category,
        }


@dataclass(frozen=True)
class Bottleneck:
    """Performance bottleneck finding.

    Attributes:
        location: Location, ideally "path:line" or a function name
        pattern: Technical name of the pattern (e.g., "N+1 Query Problem")
        reason: Why it is slow, with a quantity
        suggestion: Imperative fix
        category: Architectural layer (one of FINDING_CATEGORIES)
    """

    location: str
    pattern: str
    reason: str
    suggestion: str
    category: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bottleneck":
        """Create a Bottleneck from a wire dictionary."""
        return cls(
            location=str(data.get("location", "")),
            pattern=str(data.get("pattern", "")),
            reason=str(data.get("reason", "")),
            suggestion=str(data.get("suggestion", "")),
            category=data.get("category") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            "location": self.location,
            "pattern": self.pattern,
            "reason": self.reason,
            "suggestion": self.suggestion,
            "category": self.category,
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Audit report: hotspots, bottlenecks, anti-patterns and a code fix.

    Attributes:
        project_name: Name of the analyzed project
        total_files_scanned: Number of files supplied to the analysis
        timestamp: Report creation time (UTC)
        high_risk_hotspots: High-risk findings
        bottlenecks: Performance findings
        anti_patterns: Concise anti-pattern labels
        architectural_observations: System design observations
        optimized_code_example: Fix for the most critical issue
        summary: Executive summary (2-3 sentences)
    """

    project_name: str = ""
    total_files_scanned: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    high_risk_hotspots: tuple[Hotspot, ...] = ()
    bottlenecks: tuple[Bottleneck, ...] = ()
    anti_patterns: tuple[str, ...] = ()
    architectural_observations: tuple[str, ...] = ()
    optimized_code_example: str = ""
    summary: str = ""

    @property
    def findings_count(self) -> int:
        """Total number of hotspots and bottlenecks."""
        return len(self.high_risk_hotspots) + len(self.bottlenecks)

    def with_default_categories(self) -> "AnalysisReport":
        """Return a copy where uncategorised findings are marked General."""
        return replace(
            self,
            high_risk_hotspots=tuple(
                h if h.category else replace(h, category=DEFAULT_CATEGORY)
                for h in self.high_risk_hotspots
            ),
            bottlenecks=tuple(
                b if b.category else replace(b, category=DEFAULT_CATEGORY)
                for b in self.bottlenecks
            ),
        )

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        project_name: str = "",
        total_files_scanned: int = 0,
        timestamp: datetime | None = None,
    ) -> "AnalysisReport":
        """Create an AnalysisReport from the model's JSON payload.

        Args:
            data: Parsed model payload (camelCase keys)
            project_name: Name of the analyzed project
            total_files_scanned: Number of files in the request
            timestamp: Report time (defaults to now, UTC)

        Returns:
            AnalysisReport instance
        """
        reported_total = data.get("totalFilesScanned")
        if isinstance(reported_total, int) and not isinstance(reported_total, bool):
            total_files_scanned = reported_total
        return cls(
            project_name=str(data.get("projectName", project_name)),
            total_files_scanned=total_files_scanned,
            timestamp=timestamp or datetime.now(UTC),
            high_risk_hotspots=tuple(
                Hotspot.from_dict(item)
                for item in _list(data.get("highRiskHotspots"))
                if isinstance(item, dict)
            ),
            bottlenecks=tuple(
                Bottleneck.from_dict(item)
                for item in _list(data.get("bottlenecks"))
                if isinstance(item, dict)
            ),
            anti_patterns=tuple(str(a) for a in _list(data.get("antiPatterns"))),
            architectural_observations=tuple(
                str(o) for o in _list(data.get("architecturalObservations"))
            ),
            optimized_code_example=str(data.get("optimizedCodeExample") or ""),
            summary=str(data.get("summary") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            "module": ReportKind.AUDIT.value,
            "projectName": self.project_name,
            "totalFilesScanned": self.total_files_scanned,
            "timestamp": self.timestamp.isoformat(),
            "highRiskHotspots": [h.to_dict() for h in self.high_risk_hotspots],
            "bottlenecks": [b.to_dict() for b in self.bottlenecks],
            "antiPatterns": list(self.anti_patterns),
            "architecturalObservations": list(self.architectural_observations),
            "optimizedCodeExample": self.optimized_code_example,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ModuleReport:
    """Focused report variant kept as validated wire data.

    Attributes:
        kind: Report variant
        project_name: Name of the analyzed project
        total_files_scanned: Number of files supplied to the analysis
        timestamp: Report creation time (UTC)
        data: Parsed model payload (schema-required fields present)
    """

    kind: ReportKind
    project_name: str
    total_files_scanned: int
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        """Summary text of the report."""
        return str(self.data.get("summary", ""))

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire dictionary."""
        return {
            **self.data,
            "module": self.kind.value,
            "projectName": self.project_name,
            "totalFilesScanned": self.total_files_scanned,
            "timestamp": self.timestamp.isoformat(),
        }
