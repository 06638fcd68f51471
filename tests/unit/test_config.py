"""Unit tests for configuration system."""

from pathlib import Path

import pytest
import yaml

from codeguard.config import (
    AnalysisSettings,
    ComplexityThresholds,
    CompositionLimits,
    RetryPolicy,
    create_default_config,
    find_config_file,
    load_config,
    load_config_from_dict,
    substitute_env_vars,
)
from codeguard.quality import QualityStandards


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitute_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env var in string."""
        monkeypatch.setenv("CG_TEST_VAR", "value")

        assert substitute_env_vars("key-${CG_TEST_VAR}") == "key-value"

    def test_substitute_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars inside dicts and lists."""
        monkeypatch.setenv("CG_API_KEY", "secret123")

        result = substitute_env_vars({"llm": {"api_key": "${CG_API_KEY}"}, "tags": ["${CG_API_KEY}"]})

        assert result == {"llm": {"api_key": "secret123"}, "tags": ["secret123"]}

    def test_missing_env_var_raises(self) -> None:
        """Test that missing env var raises ValueError."""
        with pytest.raises(ValueError, match="Environment variable not set"):
            substitute_env_vars("${CG_NONEXISTENT_VAR}")

    def test_passthrough_non_string(self) -> None:
        """Test that non-string values pass through unchanged."""
        assert substitute_env_vars(42) == 42
        assert substitute_env_vars(None) is None


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_find_hidden_dir_config(self, tmp_path: Path) -> None:
        """Test finding .codeguard/config.yaml."""
        config_file = tmp_path / ".codeguard" / "config.yaml"
        config_file.parent.mkdir()
        config_file.write_text("output:\n  path: report.json\n")

        assert find_config_file(tmp_path) == config_file

    def test_hidden_dir_wins_over_root_file(self, tmp_path: Path) -> None:
        """Test .codeguard/config.yaml has priority over codeguard.yaml."""
        hidden = tmp_path / ".codeguard" / "config.yaml"
        hidden.parent.mkdir()
        hidden.write_text("{}")
        (tmp_path / "codeguard.yaml").write_text("{}")

        assert find_config_file(tmp_path) == hidden

    def test_find_root_file(self, tmp_path: Path) -> None:
        """Test finding codeguard.yaml."""
        config_file = tmp_path / "codeguard.yaml"
        config_file.write_text("{}")

        assert find_config_file(tmp_path) == config_file

    def test_no_config_returns_none(self, tmp_path: Path) -> None:
        """Test None when no config file exists."""
        assert find_config_file(tmp_path) is None


class TestLoadConfig:
    """Tests for loading configuration."""

    def test_empty_dict_gives_defaults(self) -> None:
        """Test loading an empty dict yields default settings."""
        config = load_config_from_dict({})

        assert config.output.path == "codeguard-report.json"
        assert config.llm.provider == "ollama"
        assert config.analysis == AnalysisSettings()

    def test_analysis_sections(self) -> None:
        """Test analysis thresholds are read from nested sections."""
        config = load_config_from_dict(
            {
                "analysis": {
                    "complexity": {"medium_files": 10, "complex_files": 40},
                    "composition": {"max_context_chars": 5000},
                    "retry": {"max_retries": 4, "retry_on_quality_failure": True},
                    "quality": {
                        "pass_threshold": 70,
                        "summary": {"min": 40, "max": 400},
                        "min_findings": {
                            "simple": {"hotspots": 1, "bottlenecks": 1, "anti_patterns": 0}
                        },
                    },
                }
            }
        )

        analysis = config.analysis
        assert analysis.complexity.medium_files == 10
        assert analysis.complexity.enterprise_files == 100
        assert analysis.composition.max_context_chars == 5000
        assert analysis.retry.max_attempts == 5
        assert analysis.retry.retry_on_quality_failure is True
        assert analysis.quality.pass_threshold == 70
        assert analysis.quality.summary.min == 40
        assert analysis.quality.minimums_for("simple").hotspots == 1
        assert analysis.quality.minimums_for("complex").hotspots == 2

    def test_recommendation_thresholds_merge_with_defaults(self) -> None:
        """Test a partial threshold override keeps the other dimensions and their order."""
        config = load_config_from_dict(
            {"analysis": {"quality": {"recommendation_thresholds": {"consistency": 10}}}}
        )

        thresholds = config.analysis.quality.recommendation_thresholds
        assert list(thresholds) == [
            "quantification",
            "specificity",
            "actionability",
            "completeness",
            "consistency",
        ]
        assert thresholds["consistency"] == 10
        assert thresholds["quantification"] == 20

    def test_unknown_key_raises(self) -> None:
        """Test misspelled threshold keys are rejected."""
        with pytest.raises(ValueError, match="Unknown RetryPolicy keys"):
            load_config_from_dict({"analysis": {"retry": {"max_retry": 3}}})

    def test_llm_section(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test llm section with env substitution."""
        monkeypatch.setenv("CG_GEMINI_KEY", "g-key")

        config = load_config_from_dict(
            {"llm": {"provider": "gemini", "model": "gemini-2.5-flash", "api_key": "${CG_GEMINI_KEY}"}}
        )

        assert config.llm.provider == "gemini"
        assert config.llm.api_key == "g-key"

    def test_load_from_file(self, tmp_path: Path) -> None:
        """Test loading an explicit config file."""
        config_file = tmp_path / "codeguard.yaml"
        config_file.write_text("output:\n  path: out/report.json\n  quality_report: false\n")

        config = load_config(config_path=config_file)

        assert config.output.path == "out/report.json"
        assert config.output.quality_report is False
        assert config.config_path == config_file

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        """Test FileNotFoundError for a missing explicit path."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(config_path=tmp_path / "missing.yaml")

    def test_default_config_template_loads(self) -> None:
        """Test the init template parses into a valid config."""
        data = yaml.safe_load(create_default_config())

        config = load_config_from_dict(data)

        assert config.analysis.retry.max_retries == 2
        assert config.analysis.quality.pass_threshold == 60
        assert config.analysis.quality == QualityStandards()


class TestSettingsValidation:
    """Tests for threshold dataclass validation."""

    def test_decreasing_file_thresholds_raise(self) -> None:
        """Test tiers must not decrease."""
        with pytest.raises(ValueError, match="File thresholds"):
            ComplexityThresholds(medium_files=60, complex_files=50)

    def test_non_positive_budget_raises(self) -> None:
        """Test budgets must be positive."""
        with pytest.raises(ValueError, match="max_prompt_chars must be positive"):
            CompositionLimits(max_prompt_chars=0)

    def test_negative_retries_raise(self) -> None:
        """Test max_retries cannot be negative."""
        with pytest.raises(ValueError, match="max_retries cannot be negative"):
            RetryPolicy(max_retries=-1)

    def test_max_attempts(self) -> None:
        """Test total attempts is retries plus one."""
        assert RetryPolicy(max_retries=0).max_attempts == 1
        assert RetryPolicy().max_attempts == 3

    def test_pass_threshold_range(self) -> None:
        """Test pass threshold must be a percentage."""
        with pytest.raises(ValueError, match="pass_threshold must be between 0 and 100"):
            QualityStandards(pass_threshold=120)

    def test_recommendation_threshold_unknown_dimension(self) -> None:
        """Test thresholds must name rubric dimensions."""
        with pytest.raises(ValueError, match="unknown dimensions: \\['clarity'\\]"):
            QualityStandards(recommendation_thresholds={"clarity": 10.0})

    def test_recommendation_threshold_above_maximum(self) -> None:
        """Test a threshold cannot exceed the dimension maximum."""
        with pytest.raises(ValueError, match="'consistency'\\] must be between 0 and 15"):
            QualityStandards(recommendation_thresholds={"consistency": 16.0})
