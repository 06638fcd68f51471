"""Project profiling.

Classifies a file set into a complexity tier and the set of analysis modules
that apply to it. Profiling is total and deterministic: any file list,
including the empty one, yields a profile, and the same list always yields
the same profile.
"""

import logging
import re
from collections import Counter
from collections.abc import Callable, Sequence

from codeguard.analyzers.registry import (
    BACKEND_FRAMEWORK_PATTERN,
    UI_EXTENSIONS,
    ModuleRegistry,
    default_registry,
)
from codeguard.config import AnalysisSettings
from codeguard.models.files import FileRecord
from codeguard.models.profile import (
    AnalysisDepth,
    Complexity,
    ModuleDescriptor,
    ProjectProfile,
)

logger = logging.getLogger(__name__)

# Extension buckets in tie-break preference order
LANGUAGE_BUCKETS: tuple[tuple[str, frozenset[str]], ...] = (
    ("TypeScript", frozenset({".ts", ".tsx"})),
    ("JavaScript", frozenset({".js", ".jsx", ".mjs", ".cjs"})),
    ("Python", frozenset({".py"})),
    ("Go", frozenset({".go"})),
    ("Java", frozenset({".java"})),
    ("Kotlin", frozenset({".kt", ".kts"})),
    ("Rust", frozenset({".rs"})),
    ("C#", frozenset({".cs"})),
    ("Ruby", frozenset({".rb"})),
    ("PHP", frozenset({".php"})),
    ("Swift", frozenset({".swift"})),
    ("C/C++", frozenset({".c", ".cpp", ".h", ".hpp"})),
)

UNKNOWN_LANGUAGE = "Unknown"

_BACKEND_FRAMEWORK_RE = re.compile(BACKEND_FRAMEWORK_PATTERN, re.MULTILINE)

ArchitectureRule = tuple[str, Callable[[Sequence[FileRecord]], bool]]


def _has_microservices_path(files: Sequence[FileRecord]) -> bool:
    return any("microservices" in f.path.lower() for f in files)


def _has_backend_framework(files: Sequence[FileRecord]) -> bool:
    return any(_BACKEND_FRAMEWORK_RE.search(f.content) for f in files)


def _has_ui_files(files: Sequence[FileRecord]) -> bool:
    return any(f.extension in UI_EXTENSIONS for f in files)


# First matching rule wins
ARCHITECTURE_RULES: tuple[ArchitectureRule, ...] = (
    ("Microservices", _has_microservices_path),
    ("Backend API", _has_backend_framework),
    ("Frontend SPA", _has_ui_files),
)
DEFAULT_ARCHITECTURE = "Monolithic"


class ProjectProfiler:
    """Derives a ProjectProfile from a file list.

    The profiler is stateless apart from its registry and settings, both of
    which are read-only, so a single instance can serve many requests.
    """

    def __init__(
        self,
        settings: AnalysisSettings | None = None,
        registry: ModuleRegistry | None = None,
    ) -> None:
        """Initialize the profiler.

        Args:
            settings: Analysis thresholds (defaults if None)
            registry: Module catalog (shared default if None)
        """
        self.settings = settings or AnalysisSettings()
        self.registry = registry or default_registry()

    def profile(self, files: Sequence[FileRecord]) -> ProjectProfile:
        """Profile a project.

        Args:
            files: All files of the project

        Returns:
            ProjectProfile for the file list
        """
        matched = self.detect_modules(files)
        total_files = len(files)
        complexity = self.classify_complexity(total_files, len(matched))

        detected: tuple[ModuleDescriptor, ...] = tuple(matched) or (self.registry.fallback,)
        if not matched:
            logger.debug("No module predicate matched; using %s", self.registry.fallback.id)

        profile = ProjectProfile(
            complexity=complexity,
            detected_modules=detected,
            total_files=total_files,
            primary_language=self.detect_primary_language(files),
            architecture=self.detect_architecture(files),
            analysis_depth=self.select_depth(complexity, len(matched)),
            matched_module_count=len(matched),
        )

        logger.info(
            "Profiled %d files: complexity=%s, depth=%s, language=%s, architecture=%s",
            total_files,
            profile.complexity.value,
            profile.analysis_depth.value,
            profile.primary_language,
            profile.architecture,
        )
        logger.debug("Detected modules: %s", ", ".join(profile.module_ids))

        return profile

    def detect_modules(self, files: Sequence[FileRecord]) -> list[ModuleDescriptor]:
        """Evaluate every predicate and sort matches by priority.

        Args:
            files: All files of the project

        Returns:
            Matching modules, priority descending, registry order on ties
        """
        matched = [module for module in self.registry if module.detect(files)]
        # sorted() is stable, so registry order survives equal priorities
        return sorted(matched, key=lambda m: -m.priority)

    def classify_complexity(self, total_files: int, module_count: int) -> Complexity:
        """Map file and module counts to a complexity tier.

        Args:
            total_files: Number of files
            module_count: Number of matched modules

        Returns:
            Highest tier whose file or module threshold is exceeded
        """
        t = self.settings.complexity
        if total_files > t.enterprise_files or module_count > t.enterprise_modules:
            return Complexity.ENTERPRISE
        if total_files > t.complex_files or module_count > t.complex_modules:
            return Complexity.COMPLEX
        if total_files > t.medium_files or module_count > t.medium_modules:
            return Complexity.MEDIUM
        return Complexity.SIMPLE

    def select_depth(self, complexity: Complexity, module_count: int) -> AnalysisDepth:
        """Choose the analysis depth for a tier and module count.

        Args:
            complexity: Complexity tier
            module_count: Number of matched modules

        Returns:
            AnalysisDepth
        """
        d = self.settings.depth
        if complexity is Complexity.ENTERPRISE or module_count > d.deep_modules:
            return AnalysisDepth.DEEP
        if complexity is Complexity.COMPLEX or module_count > d.standard_modules:
            return AnalysisDepth.STANDARD
        return AnalysisDepth.QUICK

    def detect_primary_language(self, files: Sequence[FileRecord]) -> str:
        """Plurality vote over extension buckets.

        Args:
            files: All files of the project

        Returns:
            Language name, or "Unknown" when no file is recognised
        """
        counts: Counter[str] = Counter()
        for f in files:
            for language, extensions in LANGUAGE_BUCKETS:
                if f.extension in extensions:
                    counts[language] += 1
                    break

        if not counts:
            return UNKNOWN_LANGUAGE

        best = max(counts.values())
        # Bucket order is the tie-break
        for language, _ in LANGUAGE_BUCKETS:
            if counts[language] == best:
                return language
        return UNKNOWN_LANGUAGE

    def detect_architecture(self, files: Sequence[FileRecord]) -> str:
        """Label the architecture with the first matching heuristic.

        Args:
            files: All files of the project

        Returns:
            Architecture label
        """
        for label, rule in ARCHITECTURE_RULES:
            if rule(files):
                return label
        return DEFAULT_ARCHITECTURE


def profile_project(
    files: Sequence[FileRecord],
    settings: AnalysisSettings | None = None,
) -> ProjectProfile:
    """Profile a project.

    Convenience function for project profiling.

    Args:
        files: All files of the project
        settings: Analysis thresholds (defaults if None)

    Returns:
        ProjectProfile
    """
    return ProjectProfiler(settings).profile(files)
