"""Unit tests for project profiling."""

import pytest

from codeguard.analyzers import ModuleRegistry, ProjectProfiler, profile_project
from codeguard.analyzers.detectors import file_count_above, path_matches
from codeguard.config import AnalysisSettings, ComplexityThresholds
from codeguard.models import AnalysisDepth, Complexity, FileRecord, ModuleDescriptor
from tests.fixtures import make_files, make_sized_files


class TestProfile:
    """Tests for ProjectProfiler.profile."""

    def test_empty_file_list(self) -> None:
        """Test the empty project profiles to simple/quick with the fallback."""
        profile = ProjectProfiler().profile([])

        assert profile.complexity is Complexity.SIMPLE
        assert profile.analysis_depth is AnalysisDepth.QUICK
        assert profile.module_ids == ["general_quality"]
        assert profile.matched_module_count == 0
        assert profile.total_files == 0
        assert profile.primary_language == "Unknown"
        assert profile.architecture == "Monolithic"

    def test_python_api(self, python_api_files: list[FileRecord]) -> None:
        """Test a FastAPI service with a database layer and tests."""
        profile = ProjectProfiler().profile(python_api_files)

        assert profile.module_ids == [
            "backend_database",
            "backend_api",
            "async_concurrency",
            "testing_quality",
        ]
        assert profile.complexity is Complexity.MEDIUM
        assert profile.analysis_depth is AnalysisDepth.STANDARD
        assert profile.primary_language == "Python"
        assert profile.architecture == "Backend API"

    def test_react_app(self, react_files: list[FileRecord]) -> None:
        """Test a React app with a store."""
        profile = ProjectProfiler().profile(react_files)

        assert profile.module_ids == ["frontend_react", "frontend_state"]
        assert profile.complexity is Complexity.SIMPLE
        assert profile.analysis_depth is AnalysisDepth.QUICK
        assert profile.primary_language == "TypeScript"
        assert profile.architecture == "Frontend SPA"

    def test_profile_is_deterministic(self, python_api_files: list[FileRecord]) -> None:
        """Test the same input yields the same profile."""
        profiler = ProjectProfiler()

        assert profiler.profile(python_api_files) == profiler.profile(python_api_files)

    def test_profile_project_helper(self, react_files: list[FileRecord]) -> None:
        """Test the convenience function matches the profiler."""
        assert profile_project(react_files) == ProjectProfiler().profile(react_files)


class TestDetectModules:
    """Tests for module detection ordering."""

    def test_sorted_by_priority_descending(self, python_api_files: list[FileRecord]) -> None:
        """Test detected modules are ordered by priority."""
        modules = ProjectProfiler().detect_modules(python_api_files)
        priorities = [m.priority for m in modules]

        assert priorities == sorted(priorities, reverse=True)

    def test_ties_keep_registry_order(self) -> None:
        """Test equal priorities keep registry order (api before react)."""
        files = make_files(
            {
                "server/index.ts": "import express from 'express'\n",
                "web/App.tsx": "export const App = () => null\n",
            }
        )

        ids = ProjectProfiler().profile(files).module_ids

        assert ids.index("backend_api") < ids.index("frontend_react")

    def test_ties_follow_custom_registry_order(self) -> None:
        """Test registry order decides ties for any catalog."""
        first = ModuleDescriptor(
            id="first", name="First", priority=5, weight=0.5, detect=file_count_above(0)
        )
        second = ModuleDescriptor(
            id="second", name="Second", priority=5, weight=0.5, detect=file_count_above(0)
        )
        top = ModuleDescriptor(
            id="top", name="Top", priority=9, weight=0.5, detect=path_matches(r"\.py$")
        )
        profiler = ProjectProfiler(registry=ModuleRegistry([first, second, top]))

        ids = profiler.profile(make_files({"a.py": ""})).module_ids

        assert ids == ["top", "first", "second"]


class TestClassifyComplexity:
    """Tests for complexity tiers."""

    @pytest.mark.parametrize(
        ("files", "modules", "expected"),
        [
            (0, 0, Complexity.SIMPLE),
            (20, 2, Complexity.SIMPLE),
            (21, 0, Complexity.MEDIUM),
            (0, 3, Complexity.MEDIUM),
            (51, 0, Complexity.COMPLEX),
            (0, 5, Complexity.COMPLEX),
            (101, 0, Complexity.ENTERPRISE),
            (0, 7, Complexity.ENTERPRISE),
        ],
    )
    def test_thresholds(self, files: int, modules: int, expected: Complexity) -> None:
        """Test the file OR module count raises the tier."""
        assert ProjectProfiler().classify_complexity(files, modules) is expected

    def test_custom_thresholds(self) -> None:
        """Test thresholds come from settings."""
        settings = AnalysisSettings(
            complexity=ComplexityThresholds(medium_files=2, complex_files=4, enterprise_files=6)
        )

        assert ProjectProfiler(settings).classify_complexity(5, 0) is Complexity.COMPLEX

    def test_complexity_is_monotone_in_file_count(self) -> None:
        """Test adding files never lowers the tier."""
        profiler = ProjectProfiler()
        ranks = [profiler.profile(make_sized_files(n)).complexity.rank for n in range(0, 130, 7)]

        assert ranks == sorted(ranks)
        assert ranks[-1] == Complexity.ENTERPRISE.rank


class TestSelectDepth:
    """Tests for analysis depth selection."""

    def test_enterprise_is_deep(self) -> None:
        """Test enterprise projects get a deep analysis."""
        assert ProjectProfiler().select_depth(Complexity.ENTERPRISE, 0) is AnalysisDepth.DEEP

    def test_many_modules_is_deep(self) -> None:
        """Test more than five modules force a deep analysis."""
        assert ProjectProfiler().select_depth(Complexity.SIMPLE, 6) is AnalysisDepth.DEEP

    def test_complex_is_standard(self) -> None:
        """Test complex projects get a standard analysis."""
        assert ProjectProfiler().select_depth(Complexity.COMPLEX, 0) is AnalysisDepth.STANDARD

    def test_simple_is_quick(self) -> None:
        """Test small projects get a quick analysis."""
        assert ProjectProfiler().select_depth(Complexity.MEDIUM, 3) is AnalysisDepth.QUICK


class TestLanguageAndArchitecture:
    """Tests for language and architecture heuristics."""

    def test_plurality_language(self) -> None:
        """Test the most common bucket wins."""
        files = make_files({"a.go": "", "b.go": "", "c.py": ""})

        assert ProjectProfiler().detect_primary_language(files) == "Go"

    def test_language_tie_uses_bucket_order(self) -> None:
        """Test ties resolve to the earlier bucket."""
        files = make_files({"a.py": "", "b.ts": ""})

        assert ProjectProfiler().detect_primary_language(files) == "TypeScript"

    def test_unrecognised_language(self) -> None:
        """Test files without a known extension give Unknown."""
        files = make_files({"README.txt": "", "Dockerfile": ""})

        assert ProjectProfiler().detect_primary_language(files) == "Unknown"

    def test_microservices_wins_first(self) -> None:
        """Test the microservices rule is checked before the others."""
        files = make_files(
            {
                "microservices/billing/app.py": "from flask import Flask\n",
                "web/App.tsx": "",
            }
        )

        assert ProjectProfiler().detect_architecture(files) == "Microservices"

    def test_backend_api_before_spa(self) -> None:
        """Test a backend framework wins over UI files."""
        files = make_files({"api/app.py": "import flask\n", "web/App.tsx": ""})

        assert ProjectProfiler().detect_architecture(files) == "Backend API"

    def test_default_monolithic(self) -> None:
        """Test the default label."""
        files = make_files({"lib/util.py": "def f(): pass\n"})

        assert ProjectProfiler().detect_architecture(files) == "Monolithic"
