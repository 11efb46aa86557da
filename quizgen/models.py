"""Data models for quiz generation."""

from enum import Enum
from typing import Any, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_QUESTIONS = 1
MAX_QUESTIONS = 50
MIN_TIME_LIMIT_MINUTES = 1
MAX_TIME_LIMIT_MINUTES = 180
OPTIONS_PER_QUESTION = 4


class DifficultyLevel(str, Enum):
    """Difficulty tiers a question can be generated at."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class DifficultyPlan(BaseModel):
    """How many questions to generate at each difficulty tier."""

    model_config = ConfigDict(frozen=True)

    easy: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    hard: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        """Total number of questions across all tiers."""
        return self.easy + self.medium + self.hard

    @classmethod
    def coerce(
        cls, value: Union["DifficultyPlan", Mapping[str, Any]]
    ) -> "DifficultyPlan":
        """Build a plan from a plan or a mapping; missing tiers count as zero."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))


class QuizConfig(BaseModel):
    """Quiz settings chosen by the caller, independent of the source text."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    num_questions: int = Field(
        alias="numQuestions", ge=MIN_QUESTIONS, le=MAX_QUESTIONS
    )
    difficulty: DifficultyPlan
    time_limit: int = Field(
        alias="timeLimit", ge=MIN_TIME_LIMIT_MINUTES, le=MAX_TIME_LIMIT_MINUTES
    )

    @model_validator(mode="after")
    def _check_difficulty_total(self) -> "QuizConfig":
        if self.difficulty.total != self.num_questions:
            raise ValueError(
                "Difficulty distribution must sum to total number of questions"
            )
        return self


class GenerationRequest(QuizConfig):
    """A validated request to generate one quiz."""

    content: str = Field(min_length=1)

    @classmethod
    def from_config(cls, config: QuizConfig, content: str) -> "GenerationRequest":
        return cls(
            content=content,
            num_questions=config.num_questions,
            difficulty=config.difficulty,
            time_limit=config.time_limit,
        )


class Question(BaseModel):
    """A validated multiple-choice question.

    Serializes with camelCase keys (``correctAnswer``) for quiz clients.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(ge=1)
    question: str = Field(min_length=1)
    options: List[str] = Field(
        min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION
    )
    correct_answer: int = Field(
        alias="correctAnswer", ge=0, lt=OPTIONS_PER_QUESTION
    )
    explanation: str
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM


class QuizResult(BaseModel):
    """A generated quiz as handed to the quiz-taking client."""

    model_config = ConfigDict(populate_by_name=True)

    questions: List[Question]
    time_limit: int = Field(alias="timeLimit")
    total_questions: int = Field(alias="totalQuestions")
    difficulty: DifficultyPlan

    @classmethod
    def from_request(
        cls, request: GenerationRequest, questions: List[Question]
    ) -> "QuizResult":
        """Bundle validated questions with the request that produced them."""
        return cls(
            questions=questions,
            time_limit=request.time_limit,
            total_questions=request.num_questions,
            difficulty=request.difficulty,
        )
