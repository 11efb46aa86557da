"""Quiz generation orchestrator.

This module implements the single entry point that turns source text into a
validated list of multiple-choice questions:

    select provider -> build prompt -> invoke -> normalize -> validate

Any stage failure aborts the whole call with one of the errors from
``quizgen.errors``; there are no retries and no partial results.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from .config import Settings
from .error_classifier import ErrorCategory
from .errors import (
    AuthError,
    InvalidRequestError,
    ModelNotFoundError,
    ProviderError,
    QuizGenerationError,
    QuotaExceededError,
    TransportError,
)
from .models import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    DifficultyPlan,
    GenerationRequest,
    Question,
    QuizResult,
)
from .normalizer import normalize_response
from .prompts import SYSTEM_PROMPT, build_quiz_prompt
from .providers.base import BaseLLMProvider, LLMProviderError
from .providers.registry import ProviderConfig, ProviderRegistry, select_provider
from .validator import validate_questions

logger = logging.getLogger(__name__)

_CATEGORY_ERRORS: Dict[ErrorCategory, Type[ProviderError]] = {
    ErrorCategory.BILLING_QUOTA: QuotaExceededError,
    ErrorCategory.AUTHENTICATION: AuthError,
    ErrorCategory.MODEL_ERROR: ModelNotFoundError,
}


def translate_provider_error(error: LLMProviderError) -> ProviderError:
    """Map a classified provider failure onto the generation error taxonomy.

    Quota, credential and model failures keep their own kinds so callers can
    act on them; every other failure is a transport-level generation failure.
    """
    classified = error.classified_error
    error_class = _CATEGORY_ERRORS.get(classified.category, TransportError)
    message = classified.message
    if error_class is TransportError:
        message = f"Failed to generate questions: {message}"
    return error_class(message, provider=classified.provider)


class QuizGenerator:
    """Generates multiple-choice quizzes through one configured LLM provider.

    The provider configuration is injected, so tests and callers can swap the
    provider (or the adapter registry) without touching process-wide state.
    """

    def __init__(
        self,
        config: ProviderConfig,
        registry: Optional[ProviderRegistry] = None,
    ):
        """Initialize the quiz generator.

        Args:
            config: Which provider, credential and model to use
            registry: Adapter registry (uses the built-in adapters if not provided)
        """
        self.config = config
        self.registry = registry

    @classmethod
    def from_settings(
        cls,
        app_settings: Optional[Settings] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> "QuizGenerator":
        """Build a generator from application settings.

        Raises:
            UnsupportedProviderError: If the configured provider is unknown
        """
        if app_settings is None:
            from .config import settings as app_settings

        return cls(ProviderConfig.from_settings(app_settings, provider, model))

    @property
    def provider_name(self) -> str:
        return self.config.kind.value

    async def generate(
        self,
        content: str,
        num_questions: int,
        difficulty: Union[DifficultyPlan, Mapping[str, Any]],
    ) -> List[Question]:
        """Generate validated questions from source content.

        Args:
            content: Source text to generate questions from
            num_questions: Total number of questions requested (1-50)
            difficulty: Per-tier counts summing to ``num_questions``

        Returns:
            Questions with ids 1..n. The length may differ from
            ``num_questions``; that is logged as a warning, not raised.

        Raises:
            QuizGenerationError: Any failure, tagged with the active provider
            asyncio.CancelledError: If the awaiting task is cancelled
        """
        provider_name = self.provider_name
        start_time = time.perf_counter()

        try:
            self._check_request(content, num_questions)

            provider = select_provider(self.config, self.registry)
            logger.info(
                f"Generating {num_questions} questions using {provider_name} "
                f"with model {provider.model}",
                extra={"provider": provider_name, "model": provider.model},
            )

            prompt = build_quiz_prompt(content, num_questions, difficulty)
            raw_response = await self._invoke(provider, prompt)
            records = normalize_response(raw_response)
            questions = validate_questions(records, expected_count=num_questions)

        except asyncio.CancelledError:
            logger.info(f"Quiz generation with {provider_name} was cancelled")
            raise
        except QuizGenerationError as e:
            e.with_provider(provider_name)
            logger.error(
                f"Error calling {provider_name} API: {e}",
                extra={"provider": provider_name},
            )
            raise

        logger.info(
            f"Generated {len(questions)} questions with {provider_name} "
            f"in {time.perf_counter() - start_time:.2f}s"
        )
        return questions

    async def generate_quiz(self, request: GenerationRequest) -> QuizResult:
        """Generate a complete quiz for a validated request."""
        questions = await self.generate(
            request.content, request.num_questions, request.difficulty
        )
        return QuizResult.from_request(request, questions)

    @staticmethod
    def _check_request(content: str, num_questions: int) -> None:
        if not isinstance(content, str) or not content.strip():
            raise InvalidRequestError("Content is required to generate questions")
        if not isinstance(num_questions, int) or isinstance(num_questions, bool):
            raise InvalidRequestError(
                f"Number of questions must be an integer, got {num_questions!r}"
            )
        if not MIN_QUESTIONS <= num_questions <= MAX_QUESTIONS:
            raise InvalidRequestError(
                f"Number of questions must be between {MIN_QUESTIONS} "
                f"and {MAX_QUESTIONS}, got {num_questions}"
            )

    async def _invoke(self, provider: BaseLLMProvider, prompt: str) -> str:
        provider_name = self.provider_name
        try:
            return await provider.invoke(prompt, SYSTEM_PROMPT)
        except LLMProviderError as e:
            logger.debug(
                f"Provider error from {provider_name}: {e}",
                extra={
                    "provider": provider_name,
                    "error_category": e.classified_error.category.value,
                    "status_code": e.classified_error.status_code,
                },
            )
            raise translate_provider_error(e) from e
        except QuizGenerationError:
            raise
        except Exception as e:
            raise TransportError(
                f"Failed to generate questions: {e}", provider=provider_name
            ) from e
