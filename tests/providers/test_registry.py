"""Tests for provider selection."""

from unittest.mock import patch

import pytest

from quizgen.config import Settings
from quizgen.errors import AuthError, UnsupportedProviderError
from quizgen.providers.base import BaseLLMProvider
from quizgen.providers.claude_provider import ClaudeProvider
from quizgen.providers.gemini_provider import GeminiProvider
from quizgen.providers.openai_provider import OpenAIProvider
from quizgen.providers.registry import (
    ProviderConfig,
    ProviderKind,
    ProviderRegistry,
    default_registry,
    select_provider,
)


class RecordingProvider(BaseLLMProvider):
    DEFAULT_MODEL = "recording-default"
    API_KEY_ENV = "RECORDING_API_KEY"

    def __init__(self, api_key, model, **options):
        super().__init__(api_key, model)
        self.options = options

    async def invoke(self, prompt, system_instruction):
        return ""


class TestProviderKind:
    """Tests for ProviderKind.parse."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("openai", ProviderKind.OPENAI),
            ("OpenAI", ProviderKind.OPENAI),
            (" gemini ", ProviderKind.GEMINI),
            ("google", ProviderKind.GEMINI),
            ("claude", ProviderKind.CLAUDE),
            ("Anthropic", ProviderKind.CLAUDE),
        ],
    )
    def test_parse_known_identifiers(self, identifier, expected):
        """Test identifiers and aliases resolve case-insensitively."""
        assert ProviderKind.parse(identifier) == expected

    @pytest.mark.parametrize("identifier", ["mistral", "", None])
    def test_parse_unknown_identifier(self, identifier):
        """Test that unknown identifiers list the supported providers."""
        with pytest.raises(UnsupportedProviderError) as exc_info:
            ProviderKind.parse(identifier)

        assert "Unsupported AI provider" in str(exc_info.value)
        assert "openai, gemini, claude" in str(exc_info.value)


class TestProviderConfig:
    """Tests for ProviderConfig.from_settings."""

    def test_uses_configured_provider(self):
        """Test that the configured provider's key and model are picked."""
        settings = Settings(
            _env_file=None,
            ai_provider="gemini",
            gemini_api_key="gem-key",
            gemini_model="gemini-2.0-flash",
            openai_api_key="openai-key",
        )

        config = ProviderConfig.from_settings(settings)

        assert config.kind == ProviderKind.GEMINI
        assert config.api_key == "gem-key"
        assert config.model == "gemini-2.0-flash"
        assert dict(config.client_options) == {}

    def test_provider_and_model_overrides(self):
        """Test explicit provider and model arguments win over settings."""
        settings = Settings(
            _env_file=None, ai_provider="openai", claude_api_key="claude-key"
        )

        config = ProviderConfig.from_settings(
            settings, provider="anthropic", model="claude-custom"
        )

        assert config.kind == ProviderKind.CLAUDE
        assert config.api_key == "claude-key"
        assert config.model == "claude-custom"

    def test_openai_organization_passed_as_option(self):
        """Test that the OpenAI organization becomes a client option."""
        settings = Settings(
            _env_file=None,
            ai_provider="openai",
            openai_api_key="openai-key",
            openai_organization="org-42",
        )

        config = ProviderConfig.from_settings(settings)

        assert dict(config.client_options) == {"organization": "org-42"}

    def test_unknown_provider(self):
        """Test that an unknown configured provider is rejected."""
        settings = Settings(_env_file=None, ai_provider="cohere")

        with pytest.raises(UnsupportedProviderError):
            ProviderConfig.from_settings(settings)

    def test_api_key_hidden_from_repr(self):
        """Test that the credential is not shown in the repr."""
        config = ProviderConfig(kind=ProviderKind.OPENAI, api_key="secret-key")

        assert "secret-key" not in repr(config)


class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_default_registry_has_all_providers(self):
        """Test the built-in adapters are registered."""
        registry = default_registry()

        assert registry.get(ProviderKind.OPENAI) is OpenAIProvider
        assert registry.get(ProviderKind.GEMINI) is GeminiProvider
        assert registry.get(ProviderKind.CLAUDE) is ClaudeProvider
        assert set(registry.supported()) == set(ProviderKind)

    def test_get_unregistered_kind(self):
        """Test that a kind without an adapter is unsupported."""
        registry = ProviderRegistry({ProviderKind.OPENAI: RecordingProvider})

        with pytest.raises(UnsupportedProviderError, match="Supported providers: openai"):
            registry.get(ProviderKind.CLAUDE)

    def test_create_uses_default_model(self):
        """Test that a config without a model uses the adapter default."""
        registry = ProviderRegistry({ProviderKind.OPENAI: RecordingProvider})

        provider = registry.create(
            ProviderConfig(kind=ProviderKind.OPENAI, api_key="key")
        )

        assert isinstance(provider, RecordingProvider)
        assert provider.model == "recording-default"
        assert provider.api_key == "key"

    def test_create_passes_client_options(self):
        """Test that client options reach the adapter constructor."""
        registry = ProviderRegistry({ProviderKind.OPENAI: RecordingProvider})

        provider = registry.create(
            ProviderConfig(
                kind=ProviderKind.OPENAI,
                api_key="key",
                model="m",
                client_options={"organization": "org-1"},
            )
        )

        assert provider.model == "m"
        assert provider.options == {"organization": "org-1"}

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_create_without_key(self, api_key):
        """Test that a missing credential is an AuthError naming the provider."""
        registry = ProviderRegistry({ProviderKind.GEMINI: RecordingProvider})

        with pytest.raises(AuthError) as exc_info:
            registry.create(ProviderConfig(kind=ProviderKind.GEMINI, api_key=api_key))

        assert exc_info.value.provider == "gemini"
        assert "RECORDING_API_KEY" in str(exc_info.value)

    def test_register_replaces_adapter(self):
        """Test that registering again replaces the adapter."""
        registry = default_registry()
        registry.register(ProviderKind.OPENAI, RecordingProvider)

        assert registry.get(ProviderKind.OPENAI) is RecordingProvider


class TestSelectProvider:
    """Tests for select_provider."""

    @patch("quizgen.providers.openai_provider.AsyncOpenAI")
    def test_builds_fresh_adapter_each_call(self, mock_openai_class):
        """Test that every call returns a new adapter instance."""
        config = ProviderConfig(kind=ProviderKind.OPENAI, api_key="key")

        first = select_provider(config)
        second = select_provider(config)

        assert isinstance(first, OpenAIProvider)
        assert first is not second
        assert first.model == OpenAIProvider.DEFAULT_MODEL

    def test_uses_given_registry(self):
        """Test that a custom registry is honored."""
        registry = ProviderRegistry({ProviderKind.CLAUDE: RecordingProvider})
        config = ProviderConfig(kind=ProviderKind.CLAUDE, api_key="key")

        assert isinstance(select_provider(config, registry), RecordingProvider)
