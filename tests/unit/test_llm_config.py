"""Unit tests for LLMConfig entity validation."""

import pytest

from codeguard.models.llm_config import VALID_PROVIDERS, LLMConfig


class TestLLMConfig:
    """Tests for LLMConfig entity."""

    def test_defaults_to_local_ollama(self) -> None:
        """Test the default configuration uses a local model."""
        config = LLMConfig()

        assert config.provider == "ollama"
        assert config.api_base == "http://localhost:11434"
        assert config.temperature == 0.2
        assert config.is_local is True

    def test_create_claude_config(self) -> None:
        """Test creating a Claude provider configuration."""
        config = LLMConfig(provider="claude", model="claude-sonnet-4", api_key="test-key")

        assert config.provider == "claude"
        assert config.api_key == "test-key"
        assert config.is_local is False

    def test_provider_normalized_to_lowercase(self) -> None:
        """Test provider is normalized to lowercase."""
        config = LLMConfig(provider="  GEMINI ", model="gemini-2.5-flash", api_key="k")

        assert config.provider == "gemini"

    def test_invalid_provider_raises_error(self) -> None:
        """Test invalid provider raises ValueError."""
        with pytest.raises(ValueError, match="Invalid provider"):
            LLMConfig(provider="openrouter", model="x")

    def test_empty_model_raises_error(self) -> None:
        """Test whitespace-only model raises ValueError."""
        with pytest.raises(ValueError, match="Model identifier cannot be empty"):
            LLMConfig(model="   ")

    def test_temperature_range(self) -> None:
        """Test temperature outside 0-2 raises ValueError."""
        with pytest.raises(ValueError, match="temperature must be between 0 and 2"):
            LLMConfig(temperature=2.5)

    def test_non_positive_timeout_raises(self) -> None:
        """Test timeout must be positive when set."""
        with pytest.raises(ValueError, match="timeout must be positive"):
            LLMConfig(timeout=0)

    def test_cloud_provider_requires_api_key(self) -> None:
        """Test Claude and Gemini need an API key."""
        with pytest.raises(ValueError, match="api_key is required for claude"):
            LLMConfig(provider="claude", model="claude-sonnet-4")

    def test_bedrock_does_not_require_api_key(self) -> None:
        """Test Bedrock reads AWS credentials from the environment."""
        config = LLMConfig(provider="bedrock", model="anthropic.claude-v2")

        assert config.api_key is None

    def test_valid_providers(self) -> None:
        """Test the provider set."""
        assert VALID_PROVIDERS == {"claude", "gemini", "ollama", "bedrock"}


class TestLLMConfigWarnings:
    """Tests for LLMConfig.validate warnings."""

    def test_low_max_tokens_warns(self) -> None:
        """Test small max_tokens produces a warning."""
        warnings = LLMConfig(max_tokens=512).validate()

        assert any("may truncate" in w for w in warnings)

    def test_bad_api_base_warns(self) -> None:
        """Test an api_base without scheme produces a warning."""
        warnings = LLMConfig(api_base="localhost:11434").validate()

        assert any("does not start with http" in w for w in warnings)

    def test_default_config_has_no_warnings(self) -> None:
        """Test defaults are warning-free."""
        assert LLMConfig().validate() == []


class TestLLMConfigSerialization:
    """Tests for LLMConfig dict conversion and model naming."""

    def test_round_trip(self) -> None:
        """Test to_dict/from_dict round trip."""
        config = LLMConfig(provider="gemini", model="gemini-2.5-flash", api_key="k", timeout=30)

        assert LLMConfig.from_dict(config.to_dict()) == config

    def test_from_dict_defaults(self) -> None:
        """Test missing keys fall back to defaults."""
        config = LLMConfig.from_dict({})

        assert config.model == "llama3.2"
        assert config.timeout is None

    @pytest.mark.parametrize(
        ("provider", "api_key", "expected"),
        [
            ("ollama", None, "ollama/m"),
            ("bedrock", None, "bedrock/m"),
            ("gemini", "k", "gemini/m"),
            ("claude", "k", "anthropic/m"),
        ],
    )
    def test_litellm_model_name(self, provider: str, api_key: str | None, expected: str) -> None:
        """Test provider prefixes for LiteLLM."""
        config = LLMConfig(provider=provider, model="m", api_key=api_key)

        assert config.get_litellm_model_name() == expected
