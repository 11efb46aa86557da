"""Provider selection.

Maps a provider identifier from configuration to the adapter class that talks
to that provider. Adding a provider means registering one more adapter; the
orchestrator never changes.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type

from ..errors import AuthError, UnsupportedProviderError
from .base import BaseLLMProvider
from .claude_provider import ClaudeProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class ProviderKind(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"  # Hosted chat-completion API
    GEMINI = "gemini"  # Hosted multimodal/generative API
    CLAUDE = "claude"  # Hosted conversational API

    @classmethod
    def parse(cls, identifier: str) -> "ProviderKind":
        """Resolve a configured identifier (or alias) to a provider kind.

        Raises:
            UnsupportedProviderError: If the identifier is not supported
        """
        key = (identifier or "").strip().lower()
        key = PROVIDER_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            supported = ", ".join(kind.value for kind in cls)
            raise UnsupportedProviderError(
                f"Unsupported AI provider: {identifier}. "
                f"Supported providers: {supported}"
            ) from None


PROVIDER_ALIASES: Dict[str, str] = {
    "google": ProviderKind.GEMINI.value,
    "anthropic": ProviderKind.CLAUDE.value,
}

# Settings attribute names holding each provider's credential and model
_SETTINGS_FIELDS: Dict[ProviderKind, Dict[str, str]] = {
    ProviderKind.OPENAI: {"api_key": "openai_api_key", "model": "openai_model"},
    ProviderKind.GEMINI: {"api_key": "gemini_api_key", "model": "gemini_model"},
    ProviderKind.CLAUDE: {"api_key": "claude_api_key", "model": "claude_model"},
}


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to build one provider adapter.

    Attributes:
        kind: Which provider to call
        api_key: Credential for that provider
        model: Model identifier (None = the adapter's default model)
        client_options: Extra adapter constructor arguments
    """

    kind: ProviderKind
    api_key: Optional[str] = field(default=None, repr=False)
    model: Optional[str] = None
    client_options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> "ProviderConfig":
        """Build a config from application settings.

        Args:
            settings: Settings object (see ``quizgen.config.Settings``)
            provider: Provider identifier overriding ``settings.ai_provider``
            model: Model overriding the provider's configured model

        Raises:
            UnsupportedProviderError: If the provider identifier is unknown
        """
        kind = ProviderKind.parse(provider or settings.ai_provider)
        fields = _SETTINGS_FIELDS[kind]

        client_options: Dict[str, Any] = {}
        if kind == ProviderKind.OPENAI and getattr(
            settings, "openai_organization", None
        ):
            client_options["organization"] = settings.openai_organization

        return cls(
            kind=kind,
            api_key=getattr(settings, fields["api_key"], None),
            model=model or getattr(settings, fields["model"], None),
            client_options=client_options,
        )


class ProviderRegistry:
    """Registry mapping provider kinds to adapter classes."""

    def __init__(
        self,
        providers: Optional[Mapping[ProviderKind, Type[BaseLLMProvider]]] = None,
    ):
        self._providers: Dict[ProviderKind, Type[BaseLLMProvider]] = dict(
            providers or {}
        )

    def register(
        self, kind: ProviderKind, provider_class: Type[BaseLLMProvider]
    ) -> None:
        """Register (or replace) the adapter class for a provider kind."""
        self._providers[kind] = provider_class

    def supported(self) -> List[ProviderKind]:
        """Provider kinds with a registered adapter."""
        return list(self._providers)

    def get(self, kind: ProviderKind) -> Type[BaseLLMProvider]:
        """Look up the adapter class for a provider kind.

        Raises:
            UnsupportedProviderError: If no adapter is registered for ``kind``
        """
        try:
            return self._providers[kind]
        except KeyError:
            supported = ", ".join(k.value for k in self._providers)
            raise UnsupportedProviderError(
                f"Unsupported AI provider: {kind.value}. "
                f"Supported providers: {supported}"
            ) from None

    def create(self, config: ProviderConfig) -> BaseLLMProvider:
        """Build the adapter described by ``config``.

        Raises:
            UnsupportedProviderError: If no adapter is registered for the kind
            AuthError: If the config carries no credential
        """
        provider_class = self.get(config.kind)
        if not config.api_key:
            raise AuthError(
                f"Missing {config.kind.value.upper()} API key. "
                f"Set {provider_class.API_KEY_ENV} in your configuration.",
                provider=config.kind.value,
            )

        model = config.model or provider_class.DEFAULT_MODEL
        logger.debug(f"Selected provider {config.kind.value} with model {model}")
        return provider_class(
            api_key=config.api_key, model=model, **dict(config.client_options)
        )


def default_registry() -> ProviderRegistry:
    """Registry with every built-in provider adapter."""
    return ProviderRegistry(
        {
            ProviderKind.OPENAI: OpenAIProvider,
            ProviderKind.GEMINI: GeminiProvider,
            ProviderKind.CLAUDE: ClaudeProvider,
        }
    )


def select_provider(
    config: ProviderConfig, registry: Optional[ProviderRegistry] = None
) -> BaseLLMProvider:
    """Resolve the adapter to use for one generation call.

    Stateless: a new adapter is built on every call.
    """
    return (registry or default_registry()).create(config)
