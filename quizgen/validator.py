"""Validation of normalized question records.

Validation is all-or-nothing: the first invalid record aborts the whole batch
with an ``InvalidQuestionError`` naming its 0-based index.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from .errors import InvalidQuestionError
from .models import OPTIONS_PER_QUESTION, DifficultyLevel, Question

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "No explanation provided"
DEFAULT_DIFFICULTY = DifficultyLevel.MEDIUM


def _require_question_text(index: int, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidQuestionError(index, "'question' must be a non-empty string")
    return value.strip()


def _require_options(index: int, value: Any) -> List[str]:
    if not isinstance(value, list) or len(value) != OPTIONS_PER_QUESTION:
        raise InvalidQuestionError(
            index, f"'options' must be a list of exactly {OPTIONS_PER_QUESTION} entries"
        )

    options: List[str] = []
    for position, option in enumerate(value):
        # Numeric answers ("42") are sometimes emitted as JSON numbers
        if isinstance(option, (int, float)) and not isinstance(option, bool):
            option = str(option)
        if not isinstance(option, str) or not option.strip():
            raise InvalidQuestionError(
                index, f"option {position} must be a non-empty string"
            )
        options.append(option.strip())

    if len(set(options)) != len(options):
        raise InvalidQuestionError(index, "options must be distinct")
    return options


def coerce_correct_answer(value: Any) -> Optional[int]:
    """Coerce a ``correctAnswer`` value to an int.

    Accepts ints, integral floats and numeric strings; returns None for
    anything else (including booleans).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _require_correct_answer(index: int, value: Any) -> int:
    answer = coerce_correct_answer(value)
    if answer is None:
        raise InvalidQuestionError(
            index, f"'correctAnswer' must be an integer index, got {value!r}"
        )
    if not 0 <= answer < OPTIONS_PER_QUESTION:
        raise InvalidQuestionError(
            index,
            f"'correctAnswer' {answer} is out of range "
            f"0-{OPTIONS_PER_QUESTION - 1}",
        )
    return answer


def _explanation(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_EXPLANATION


def _difficulty(value: Any) -> DifficultyLevel:
    if isinstance(value, str):
        try:
            return DifficultyLevel(value.strip().lower())
        except ValueError:
            pass
    return DEFAULT_DIFFICULTY


def validate_question(index: int, record: Any) -> Question:
    """Validate one raw record and build its ``Question``.

    The question id is ``index + 1``.

    Raises:
        InvalidQuestionError: If the record is structurally invalid
    """
    if not isinstance(record, Mapping):
        raise InvalidQuestionError(index, "question record must be a JSON object")

    return Question(
        id=index + 1,
        question=_require_question_text(index, record.get("question")),
        options=_require_options(index, record.get("options")),
        correct_answer=_require_correct_answer(index, record.get("correctAnswer")),
        explanation=_explanation(record.get("explanation")),
        difficulty=_difficulty(record.get("difficulty")),
    )


def validate_questions(
    records: Sequence[Any], expected_count: Optional[int] = None
) -> List[Question]:
    """Validate a batch of raw question records.

    Args:
        records: Records produced by the normalizer, in provider order
        expected_count: Number of questions requested; a mismatch is logged
            as a warning and the list is returned unchanged

    Returns:
        Questions with ids 1..n in input order

    Raises:
        InvalidQuestionError: On the first invalid record
    """
    questions = [validate_question(i, record) for i, record in enumerate(records)]

    if expected_count is not None and len(questions) != expected_count:
        logger.warning(
            f"Expected {expected_count} questions but got {len(questions)}",
            extra={"expected_count": expected_count, "actual_count": len(questions)},
        )

    return questions
