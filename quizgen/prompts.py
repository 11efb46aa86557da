"""Prompt templates for quiz generation.

The prompt is the only mechanism steering the difficulty distribution: the
providers have no structured notion of question slots, so the exact per-tier
counts are spelled out in the instructions.
"""

from typing import Any, Mapping, Union

from pydantic import ValidationError

from .errors import InvalidRequestError
from .models import DifficultyLevel, DifficultyPlan

# System instruction sent alongside every generation prompt
SYSTEM_PROMPT = (
    "You are an expert educational content creator specializing in creating "
    "high-quality multiple-choice questions. Always respond with valid JSON only."
)

# What each tier is expected to test
DIFFICULTY_GUIDELINES = {
    DifficultyLevel.EASY: "Test basic understanding and recall",
    DifficultyLevel.MEDIUM: "Require application and analysis",
    DifficultyLevel.HARD: "Require synthesis, evaluation, and deep understanding",
}

OUTPUT_SCHEMA_EXAMPLE = """[
  {
    "question": "Question text here?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "explanation": "Detailed explanation of why this answer is correct",
    "difficulty": "easy"
  }
]"""


def build_quiz_prompt(
    content: str,
    num_questions: int,
    difficulty: Union[DifficultyPlan, Mapping[str, Any]],
) -> str:
    """Build the user prompt for generating a quiz from source content.

    Args:
        content: Source text; embedded verbatim, never truncated
        num_questions: Total number of questions requested
        difficulty: Per-tier question counts summing to ``num_questions``

    Returns:
        Prompt text mandating a bare JSON array of question objects

    Raises:
        InvalidRequestError: If the plan is malformed or does not sum to
            ``num_questions``
    """
    try:
        plan = DifficultyPlan.coerce(difficulty)
    except (ValidationError, TypeError, ValueError) as e:
        raise InvalidRequestError(f"Invalid difficulty distribution: {e}") from e
    if plan.total != num_questions:
        raise InvalidRequestError(
            f"Difficulty distribution ({plan.total}) must sum to total "
            f"number of questions ({num_questions})"
        )

    guidelines = "\n".join(
        f"- {level.value.capitalize()} questions: {text}"
        for level, text in DIFFICULTY_GUIDELINES.items()
    )

    return f"""You are an expert quiz creator. Generate {num_questions} multiple-choice questions based on the following content.

CONTENT:
{content}

REQUIREMENTS:
- Generate exactly {plan.easy} EASY questions, {plan.medium} MEDIUM questions, and {plan.hard} HARD questions
- Each question must have exactly 4 options (A, B, C, D)
- Only ONE option should be correct
- Provide a clear explanation for the correct answer
{guidelines}

Return ONLY a valid JSON array with this EXACT structure (no additional text):
{OUTPUT_SCHEMA_EXAMPLE}

IMPORTANT:
- correctAnswer must be the index (0-3) of the correct option in the options array
- difficulty must be one of "easy", "medium" or "hard"
- Ensure questions are diverse and cover different aspects of the content
- Make explanations clear and educational"""
