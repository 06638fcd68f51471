"""Analysis pipeline orchestrator.

Coordinates one analysis request end to end:
1. Profile the project (deterministic, before any model invocation)
2. Compose instruction, context and prompt
3. Request the report through the retrying requester
4. Score the report against the quality rubric (audit reports)
5. Apply local surface repair once

Each run owns its profile, composed input and metrics; only the module
registry is shared.
"""

import logging
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from codeguard.analyzers import ModuleRegistry, ProjectProfiler
from codeguard.config import CodeGuardConfig
from codeguard.llm import LLMClient, PromptComposer, ReportRequester, create_client
from codeguard.llm.requester import QualityGate
from codeguard.models import (
    AnalysisReport,
    FileRecord,
    ModuleReport,
    ProjectProfile,
    QualityMetrics,
    ReportKind,
)
from codeguard.quality import OutputEnhancer, QualityValidator

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOutcome:
    """Result of a pipeline run.

    Attributes:
        report: Accepted report (AnalysisReport for audits)
        metrics: Quality metrics of the model's report (audits only)
        profile: Project profile that steered the request
        truncated: True if files were left out of the context
        omitted_files: Number of files left out of the context
        attempts: Number of model calls made
    """

    report: AnalysisReport | ModuleReport
    metrics: QualityMetrics | None
    profile: ProjectProfile
    truncated: bool = False
    omitted_files: int = 0
    attempts: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "report": self.report.to_dict(),
            "quality": self.metrics.to_dict() if self.metrics else None,
            "profile": self.profile.to_dict(),
            "truncated": self.truncated,
            "omittedFiles": self.omitted_files,
            "attempts": self.attempts,
        }


class AnalysisPipeline:
    """Runs profiling, composition, the model request and validation in order."""

    def __init__(
        self,
        config: CodeGuardConfig | None = None,
        client: LLMClient | None = None,
        registry: ModuleRegistry | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the analysis pipeline.

        Args:
            config: CodeGuard configuration (uses defaults if None)
            client: Model client (created from config.llm on first use if None)
            registry: Module catalog (shared default if None)
            sleep: Backoff wait used by the requester
        """
        self.config = config or CodeGuardConfig()
        settings = self.config.analysis

        self._client = client
        self._sleep = sleep
        self.profiler = ProjectProfiler(settings, registry)
        self.composer = PromptComposer(settings)
        self.validator = QualityValidator(settings.quality)
        self.enhancer = OutputEnhancer(settings.quality)

    @property
    def client(self) -> LLMClient:
        """Model client, created from configuration on first use."""
        if self._client is None:
            self._client = create_client(self.config.llm)
        return self._client

    def run(
        self,
        files: Sequence[FileRecord],
        project_name: str,
        instructions: str | None = None,
        kind: ReportKind = ReportKind.AUDIT,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisOutcome:
        """Analyze a project.

        Args:
            files: All files of the project
            project_name: Name shown in the report
            instructions: Free-form instructions from the caller
            kind: Report kind
            cancel_event: Set by the caller to abort the request

        Returns:
            AnalysisOutcome

        Raises:
            AnalysisFailedError: If every model attempt failed
            AnalysisCancelledError: If cancel_event was set
        """
        logger.info("Starting %s analysis of %s (%d files)", kind.value, project_name, len(files))

        profile = self.profiler.profile(files)

        requester = ReportRequester(
            self.client,
            self.composer,
            self.config.analysis,
            base_temperature=self.config.llm.temperature,
            sleep=self._sleep,
        )

        gate = (
            self._quality_gate(profile, project_name, len(files))
            if kind is ReportKind.AUDIT
            else None
        )

        result = requester.request(
            profile,
            files,
            kind=kind,
            user_instructions=instructions,
            cancel_event=cancel_event,
            quality_gate=gate,
        )

        timestamp = datetime.now(UTC)
        metrics: QualityMetrics | None = None
        report: AnalysisReport | ModuleReport

        if kind is ReportKind.AUDIT:
            audit = AnalysisReport.from_dict(
                result.data, project_name, len(files), timestamp
            ).with_default_categories()
            metrics = self.validator.validate(audit, profile.complexity)
            report = self.enhancer.enhance(audit)
            logger.info(
                "Quality score %.1f/100 (%s)",
                metrics.overall_score,
                "passed" if metrics.passes_threshold else "below threshold",
            )
        else:
            report = ModuleReport(
                kind=kind,
                project_name=project_name,
                total_files_scanned=len(files),
                timestamp=timestamp,
                data=result.data,
            )

        return AnalysisOutcome(
            report=report,
            metrics=metrics,
            profile=profile,
            truncated=result.composed.truncated,
            omitted_files=result.composed.omitted_files,
            attempts=result.attempts,
        )

    def _quality_gate(
        self,
        profile: ProjectProfile,
        project_name: str,
        total_files: int,
    ) -> QualityGate:
        """Build a gate that scores a parsed audit payload."""

        def gate(data: dict[str, Any]) -> bool:
            draft = AnalysisReport.from_dict(data, project_name, total_files)
            return self.validator.validate(draft, profile.complexity).passes_threshold

        return gate
