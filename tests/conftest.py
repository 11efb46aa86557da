"""Pytest configuration and shared fixtures for quiz generation tests."""

import json
from typing import Any, List, Optional

import pytest

from quizgen.config import Settings
from quizgen.generator import QuizGenerator
from quizgen.models import DifficultyPlan
from quizgen.providers.base import BaseLLMProvider
from quizgen.providers.registry import ProviderConfig, ProviderKind, ProviderRegistry


@pytest.fixture
def mock_api_key() -> str:
    """Fixture providing a mock provider API key for testing."""
    return "sk-test-mock-api-key-12345"


@pytest.fixture
def sample_content() -> str:
    """Fixture providing source text of roughly 200 characters."""
    return (
        "Photosynthesis is the process by which green plants use sunlight, "
        "water and carbon dioxide to produce glucose and oxygen. It takes place "
        "in the chloroplasts, which contain the pigment chlorophyll."
    )


@pytest.fixture
def sample_plan() -> DifficultyPlan:
    """Fixture providing a 2/2/1 difficulty plan."""
    return DifficultyPlan(easy=2, medium=2, hard=1)


@pytest.fixture
def sample_records() -> List[dict]:
    """Fixture providing five well-formed question records."""
    difficulties = ["easy", "easy", "medium", "medium", "hard"]
    return [
        {
            "question": f"Question {i + 1} about photosynthesis?",
            "options": [f"Option {i + 1}{letter}" for letter in "ABCD"],
            "correctAnswer": i % 4,
            "explanation": f"Explanation {i + 1}",
            "difficulty": difficulty,
        }
        for i, difficulty in enumerate(difficulties)
    ]


@pytest.fixture
def sample_response(sample_records) -> str:
    """Fixture providing a raw provider response holding a bare JSON array."""
    return json.dumps(sample_records)


@pytest.fixture
def test_settings(mock_api_key) -> Settings:
    """Fixture providing settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        ai_provider="openai",
        openai_api_key=mock_api_key,
        log_level="DEBUG",
    )


@pytest.fixture
def make_generator(mock_api_key):
    """Factory building a QuizGenerator backed by a stub provider.

    The stub behaves like a real adapter: provider failures passed as
    ``error`` go through ``_handle_api_error``; ``raw_error`` is raised as-is.
    Returns ``(generator, stub_class)``; ``stub_class.calls`` records every
    ``(prompt, system_instruction)`` pair.
    """

    def _make(
        response: str = "",
        error: Optional[Exception] = None,
        raw_error: Optional[BaseException] = None,
        kind: ProviderKind = ProviderKind.OPENAI,
    ):
        class StubProvider(BaseLLMProvider):
            DEFAULT_MODEL = "stub-model"
            API_KEY_ENV = "STUB_API_KEY"
            calls: List[Any] = []

            async def invoke(self, prompt: str, system_instruction: str) -> str:
                StubProvider.calls.append((prompt, system_instruction))
                if raw_error is not None:
                    raise raw_error
                if error is not None:
                    raise self._handle_api_error(error)
                return response

            def get_provider_name(self) -> str:
                return kind.value

        registry = ProviderRegistry({kind: StubProvider})
        config = ProviderConfig(kind=kind, api_key=mock_api_key)
        return QuizGenerator(config, registry=registry), StubProvider

    return _make
