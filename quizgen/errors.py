"""Error taxonomy for quiz generation.

Every failure that leaves the generation pipeline is one of the kinds defined
here. Stage-local errors are re-tagged with the active provider at the
orchestrator boundary so callers always know which provider failed.
"""

from typing import Optional


class QuizGenerationError(Exception):
    """Base exception for all quiz generation failures."""

    def __init__(self, message: str, provider: Optional[str] = None):
        """Initialize QuizGenerationError with context.

        Args:
            message: Human-readable error description
            provider: Name of the provider active when the error occurred
        """
        self.message = message
        self.provider = provider
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with provider context."""
        if self.provider:
            return f"{self.message} (provider: {self.provider})"
        return self.message

    def with_provider(self, provider: str) -> "QuizGenerationError":
        """Attach the provider name if the error does not carry one yet."""
        if not self.provider:
            self.provider = provider
            self.args = (self._format_message(),)
        return self

    def __str__(self) -> str:
        return self._format_message()


class InvalidRequestError(QuizGenerationError):
    """The generation request violates its own contract."""


class UnsupportedProviderError(QuizGenerationError):
    """Configuration names a provider outside the supported set."""


class ProviderError(QuizGenerationError):
    """Base class for failures reported while calling a provider."""


class TransportError(ProviderError):
    """The provider could not be reached or the call failed."""


class AuthError(ProviderError):
    """The provider rejected (or is missing) the configured credential."""


class QuotaExceededError(ProviderError):
    """The provider reports billing or quota exhaustion."""


class ModelNotFoundError(ProviderError):
    """The provider rejected the configured model identifier."""


class ResponseError(QuizGenerationError):
    """Base class for provider output that cannot become a quiz."""


class MalformedResponseError(ResponseError):
    """Provider output is not parseable as JSON."""


class UnexpectedShapeError(ResponseError):
    """Parsed output matches none of the accepted top-level shapes."""


class InvalidQuestionError(ResponseError):
    """A question record fails structural validation.

    Attributes:
        index: 0-based position of the offending record
        reason: What was wrong with the record
    """

    def __init__(self, index: int, reason: str, provider: Optional[str] = None):
        self.index = index
        self.reason = reason
        super().__init__(
            f"Invalid question structure at index {index}: {reason}",
            provider=provider,
        )
