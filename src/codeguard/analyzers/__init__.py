"""CodeGuard analyzers - deterministic project profiling.

This module contains the deterministic analysis that runs BEFORE any model
invocation:
- Module registry: Catalog of analysis modules and their detection predicates
- Profiler: Complexity tier, detected modules, language and architecture
"""

from codeguard.analyzers.profiler import ProjectProfiler, profile_project
from codeguard.analyzers.registry import (
    DEFAULT_MODULES,
    FALLBACK_MODULE,
    ModuleRegistry,
    default_registry,
)

__all__ = [
    "DEFAULT_MODULES",
    "FALLBACK_MODULE",
    "ModuleRegistry",
    "ProjectProfiler",
    "default_registry",
    "profile_project",
]
