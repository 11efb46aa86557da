"""Base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import ClassVar

from ..error_classifier import ClassifiedError, ErrorClassifier

# Sampling settings shared by every provider call
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 4000


class LLMProviderError(Exception):
    """Exception raised by LLM providers with classification.

    Attributes:
        classified_error: The classified error with category
        original_exception: The original exception that was raised
    """

    def __init__(
        self,
        classified_error: ClassifiedError,
        original_exception: Exception,
    ):
        """Initialize LLM provider error.

        Args:
            classified_error: The classified error
            original_exception: The original exception
        """
        self.classified_error = classified_error
        self.original_exception = original_exception
        super().__init__(str(classified_error))


class BaseLLMProvider(ABC):
    """Abstract base class for LLM provider integrations.

    Every provider makes exactly one request per ``invoke`` call; there is no
    retry loop at this layer.
    """

    DEFAULT_MODEL: ClassVar[str]
    API_KEY_ENV: ClassVar[str]

    def __init__(self, api_key: str, model: str):
        """
        Initialize the LLM provider.

        Args:
            api_key: API key for the provider
            model: Model identifier to use
        """
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def invoke(self, prompt: str, system_instruction: str) -> str:
        """
        Send a prompt and return the raw text the model produced.

        Args:
            prompt: The user prompt to send to the model
            system_instruction: Fixed system instruction for the model

        Returns:
            The generated text ("" if the provider returned no text)

        Raises:
            LLMProviderError: If the API call fails
        """

    def get_provider_name(self) -> str:
        """
        Get the name of this provider.

        Returns:
            Provider name (e.g., "openai", "gemini", "claude")
        """
        return self.__class__.__name__.replace("Provider", "").lower()

    def _handle_api_error(self, error: Exception) -> LLMProviderError:
        """Classify and wrap an API error.

        Args:
            error: The exception that was raised

        Returns:
            LLMProviderError with classified error
        """
        classified = ErrorClassifier.classify_error(
            error=error,
            provider=self.get_provider_name(),
        )
        return LLMProviderError(
            classified_error=classified,
            original_exception=error,
        )
