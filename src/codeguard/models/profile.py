"""Project profile entities.

This module contains the entities produced by project profiling:
- Complexity: Project size tier
- AnalysisDepth: How deep the requested analysis should go
- ModuleDescriptor: A detectable analysis module (lens)
- ProjectProfile: Derived summary that steers prompt composition
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from codeguard.models.files import FileRecord

# Detection predicate signature: full file list in, match decision out
DetectFn = Callable[[Sequence[FileRecord]], bool]


class Complexity(Enum):
    """Project complexity tier, ordered from smallest to largest."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        """Position of the tier in escalation order (0 = simple)."""
        return list(Complexity).index(self)


class AnalysisDepth(Enum):
    """Requested analysis depth."""

    QUICK = "quick"
    STANDARD = "standard"
    DEEP = "deep"


@dataclass(frozen=True)
class ModuleDescriptor:
    """A named, independently detectable area of concern.

    Descriptors are plain data: the detection predicate and the instruction
    text travel together, so adding a module never requires new control flow.

    Attributes:
        id: Unique identifier (e.g., "backend_database")
        name: Human-readable name
        priority: Ordering priority, 1 (lowest) to 10 (highest)
        weight: Relative weight of the module, 0 to 1
        detect: Predicate over the full file list
        instruction_block: Instructional text sent to the model
        focus_pattern: Path regex marking files this module cares about
    """

    id: str
    name: str
    priority: int
    weight: float
    detect: DetectFn = field(compare=False, repr=False)
    instruction_block: str = field(default="", repr=False)
    focus_pattern: str | None = None

    def __post_init__(self) -> None:
        """Validate descriptor ranges."""
        if not self.id:
            raise ValueError("Module id cannot be empty")
        if not 1 <= self.priority <= 10:
            raise ValueError(f"priority must be between 1 and 10. Got: {self.priority}")
        if not 0.0 <= self.weight <= 1.0:
            raise ValueError(f"weight must be between 0 and 1. Got: {self.weight}")

    def describe(self) -> str:
        """Return the instruction block for this module."""
        return self.instruction_block

    def matches_focus(self, path: str) -> bool:
        """Check whether a file path falls inside this module's focus."""
        if not self.focus_pattern:
            return False
        return re.search(self.focus_pattern, path, re.IGNORECASE) is not None


@dataclass(frozen=True)
class ProjectProfile:
    """Derived summary of a project's scale and applicable modules.

    Created once per analysis request and never mutated.

    Attributes:
        complexity: Complexity tier
        detected_modules: Modules ordered by priority (desc), registry order on ties
        total_files: Number of files in the project
        primary_language: Plurality language by file extension
        architecture: Architecture label from the first matching heuristic
        analysis_depth: Depth derived from complexity and module count
        matched_module_count: Modules whose predicate matched (fallback excluded)
    """

    complexity: Complexity
    detected_modules: tuple[ModuleDescriptor, ...]
    total_files: int
    primary_language: str
    architecture: str
    analysis_depth: AnalysisDepth
    matched_module_count: int = 0

    @property
    def module_ids(self) -> list[str]:
        """Identifiers of the detected modules, in order."""
        return [m.id for m in self.detected_modules]

    @property
    def module_names(self) -> list[str]:
        """Names of the detected modules, in order."""
        return [m.name for m in self.detected_modules]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "complexity": self.complexity.value,
            "detected_modules": [
                {"id": m.id, "name": m.name, "priority": m.priority}
                for m in self.detected_modules
            ],
            "total_files": self.total_files,
            "primary_language": self.primary_language,
            "architecture": self.architecture,
            "analysis_depth": self.analysis_depth.value,
            "matched_module_count": self.matched_module_count,
        }
