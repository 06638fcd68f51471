"""CodeGuard configuration system.

Configuration is primarily YAML-based with minimal CLI overrides.
Supports environment variable substitution (${VAR}) in config files.

Every tunable threshold (complexity tiers, prompt budgets, retry policy,
quality standards) lives in one AnalysisSettings structure that is passed by
reference to the profiler, composer, requester and validator.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.codeguard/config.yaml
3. ./codeguard.yaml
"""

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from codeguard.models.llm_config import LLMConfig
from codeguard.quality.standards import FindingMinimums, LengthLimit, QualityStandards

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass(frozen=True)
class ComplexityThresholds:
    """Step thresholds for the complexity tier.

    A tier is reached when the file count OR the matched module count is
    strictly greater than the tier's threshold.
    """

    medium_files: int = 20
    medium_modules: int = 2
    complex_files: int = 50
    complex_modules: int = 4
    enterprise_files: int = 100
    enterprise_modules: int = 6

    def __post_init__(self) -> None:
        """Validate that thresholds increase with the tier."""
        if not self.medium_files <= self.complex_files <= self.enterprise_files:
            raise ValueError("File thresholds must be non-decreasing by tier")
        if not self.medium_modules <= self.complex_modules <= self.enterprise_modules:
            raise ValueError("Module thresholds must be non-decreasing by tier")


@dataclass(frozen=True)
class DepthThresholds:
    """Matched module counts that force a deeper analysis."""

    deep_modules: int = 5
    standard_modules: int = 3


@dataclass(frozen=True)
class CompositionLimits:
    """Budgets for prompt composition, in characters.

    Attributes:
        max_instruction_chars: Upper bound for the system instruction
        max_prompt_chars: Upper bound for the analysis request prompt
        max_context_chars: Upper bound for the file context
        enterprise_modules: Module blocks included for enterprise projects
        complex_modules: Module blocks included for complex projects
        default_modules: Module blocks included otherwise
    """

    max_instruction_chars: int = 60_000
    max_prompt_chars: int = 20_000
    max_context_chars: int = 800_000
    enterprise_modules: int = 6
    complex_modules: int = 4
    default_modules: int = 3

    def __post_init__(self) -> None:
        """Validate budgets."""
        for name in ("max_instruction_chars", "max_prompt_chars", "max_context_chars"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive. Got: {getattr(self, name)}")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry behaviour of the report requester.

    Attributes:
        max_retries: Retries after the first attempt (total calls = max_retries + 1)
        backoff_seconds: Fixed delay between attempts
        temperature_step: Temperature decrease applied on each retry
        retry_on_quality_failure: Also escalate when the quality gate fails
    """

    max_retries: int = 2
    backoff_seconds: float = 1.0
    temperature_step: float = 0.1
    retry_on_quality_failure: bool = False

    def __post_init__(self) -> None:
        """Validate retry settings."""
        if self.max_retries < 0:
            raise ValueError(f"max_retries cannot be negative. Got: {self.max_retries}")
        if self.backoff_seconds < 0:
            raise ValueError(
                f"backoff_seconds cannot be negative. Got: {self.backoff_seconds}"
            )

    @property
    def max_attempts(self) -> int:
        """Total number of model calls allowed."""
        return self.max_retries + 1


@dataclass(frozen=True)
class AnalysisSettings:
    """All thresholds of the analysis core, passed by reference.

    Attributes:
        complexity: Complexity tier thresholds
        depth: Analysis depth thresholds
        composition: Prompt and context budgets
        retry: Retry policy
        quality: Quality rubric standards
    """

    complexity: ComplexityThresholds = field(default_factory=ComplexityThresholds)
    depth: DepthThresholds = field(default_factory=DepthThresholds)
    composition: CompositionLimits = field(default_factory=CompositionLimits)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    quality: QualityStandards = field(default_factory=QualityStandards)


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Report output file path
        quality_report: Also write the Markdown quality report
    """

    path: str = "codeguard-report.json"
    quality_report: bool = True


@dataclass
class CodeGuardConfig:
    """Top-level CodeGuard configuration.

    Attributes:
        output: Output path and options
        llm: LLM provider settings
        analysis: Analysis thresholds
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${GEMINI_API_KEY} -> value of GEMINI_API_KEY

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.codeguard/config.yaml
    2. ./codeguard.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".codeguard" / "config.yaml",
        start_path / "codeguard.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _pick(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    """Return data as kwargs for cls, rejecting keys that are not its fields."""
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return dict(data)


def _load_quality(data: dict[str, Any]) -> QualityStandards:
    """Build QualityStandards from a config dictionary."""
    kwargs = _pick(QualityStandards, data)

    if "min_findings" in kwargs:
        minimums = dict(QualityStandards().min_findings)
        for tier, counts in kwargs["min_findings"].items():
            minimums[tier] = FindingMinimums(**counts)
        kwargs["min_findings"] = minimums

    if "recommendation_thresholds" in kwargs:
        thresholds = dict(QualityStandards().recommendation_thresholds)
        thresholds.update(kwargs["recommendation_thresholds"])
        kwargs["recommendation_thresholds"] = thresholds

    for limit_name in ("summary", "issue", "optimized_code"):
        if limit_name in kwargs:
            kwargs[limit_name] = LengthLimit(**kwargs[limit_name])

    return QualityStandards(**kwargs)


def load_analysis_settings(data: dict[str, Any]) -> AnalysisSettings:
    """Build AnalysisSettings from the "analysis" section of a config.

    Args:
        data: Analysis configuration dictionary

    Returns:
        AnalysisSettings instance
    """
    return AnalysisSettings(
        complexity=ComplexityThresholds(**_pick(ComplexityThresholds, data.get("complexity", {}))),
        depth=DepthThresholds(**_pick(DepthThresholds, data.get("depth", {}))),
        composition=CompositionLimits(**_pick(CompositionLimits, data.get("composition", {}))),
        retry=RetryPolicy(**_pick(RetryPolicy, data.get("retry", {}))),
        quality=_load_quality(data.get("quality", {})),
    )


def load_config_from_dict(data: dict[str, Any]) -> CodeGuardConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        CodeGuardConfig instance
    """
    data = substitute_env_vars(data)

    config = CodeGuardConfig()

    if "output" in data:
        output_data = data["output"]
        config.output = OutputConfig(
            path=output_data.get("path", config.output.path),
            quality_report=output_data.get("quality_report", config.output.quality_report),
        )

    if "llm" in data:
        config.llm = LLMConfig.from_dict(data["llm"])

    if "analysis" in data:
        config.analysis = load_analysis_settings(data["analysis"] or {})

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> CodeGuardConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        CodeGuardConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = CodeGuardConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# CodeGuard Configuration

# Output settings
output:
  path: "codeguard-report.json"
  quality_report: true   # also write a Markdown quality report

# LLM settings
llm:
  provider: "ollama"     # ollama (local), claude, gemini, bedrock
  model: "llama3.2"
  # api_key: "${GEMINI_API_KEY}"  # Required for claude/gemini
  api_base: "http://localhost:11434"
  temperature: 0.2       # first attempt; lowered on every retry
  max_tokens: 8192
  # timeout: 120         # seconds per model call

# Analysis thresholds
analysis:
  complexity:
    medium_files: 20
    medium_modules: 2
    complex_files: 50
    complex_modules: 4
    enterprise_files: 100
    enterprise_modules: 6
  composition:
    max_instruction_chars: 60000
    max_prompt_chars: 20000
    max_context_chars: 800000
  retry:
    max_retries: 2
    backoff_seconds: 1.0
    temperature_step: 0.1
    retry_on_quality_failure: false
  quality:
    pass_threshold: 60
    # Dimensions scoring below these get a recommendation
    recommendation_thresholds:
      quantification: 20
      specificity: 15
      actionability: 15
      completeness: 15
      consistency: 12
'''
