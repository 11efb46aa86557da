"""LLM provider integrations."""

from .base import BaseLLMProvider, LLMProviderError
from .claude_provider import ClaudeProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider
from .registry import (
    ProviderConfig,
    ProviderKind,
    ProviderRegistry,
    default_registry,
    select_provider,
)

__all__ = [
    "BaseLLMProvider",
    "LLMProviderError",
    "OpenAIProvider",
    "GeminiProvider",
    "ClaudeProvider",
    "ProviderConfig",
    "ProviderKind",
    "ProviderRegistry",
    "default_registry",
    "select_provider",
]
