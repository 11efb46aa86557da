"""Quiz generation service.

Turns source text into a validated multiple-choice quiz using a configurable
LLM provider.
"""

from .errors import (
    AuthError,
    InvalidQuestionError,
    InvalidRequestError,
    MalformedResponseError,
    ModelNotFoundError,
    QuizGenerationError,
    QuotaExceededError,
    TransportError,
    UnexpectedShapeError,
    UnsupportedProviderError,
)
from .generator import QuizGenerator
from .models import (
    DifficultyLevel,
    DifficultyPlan,
    GenerationRequest,
    Question,
    QuizConfig,
    QuizResult,
)
from .providers import ProviderConfig, ProviderKind, ProviderRegistry

__version__ = "0.1.0"

__all__ = [
    "QuizGenerator",
    "ProviderConfig",
    "ProviderKind",
    "ProviderRegistry",
    "DifficultyLevel",
    "DifficultyPlan",
    "GenerationRequest",
    "Question",
    "QuizConfig",
    "QuizResult",
    "QuizGenerationError",
    "InvalidRequestError",
    "UnsupportedProviderError",
    "TransportError",
    "AuthError",
    "QuotaExceededError",
    "ModelNotFoundError",
    "MalformedResponseError",
    "UnexpectedShapeError",
    "InvalidQuestionError",
]
