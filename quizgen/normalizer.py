"""Normalization of raw provider output into question records.

Providers answer in slightly different shapes: OpenAI's JSON mode forces an
object (``{"questions": [...]}``), other models return a bare array, and some
wrap the answer in a markdown code block. Everything here is a pure function
of the raw text.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional, Tuple

from .errors import MalformedResponseError, UnexpectedShapeError

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[ \t]*(?:json)?[ \t]*\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fence(text: Optional[str]) -> str:
    """Strip one surrounding markdown code block from text.

    LLMs often wrap JSON responses in markdown code blocks like:
    ```json
    [...]
    ```

    Both ```` ```json ```` and bare ```` ``` ```` fences are accepted. Text
    without a leading fence is only trimmed.

    Args:
        text: Raw text that may be wrapped in a code block

    Returns:
        The text inside the code block, or the trimmed original text
    """
    if not text:
        return ""

    cleaned = text.strip()
    opening = _OPENING_FENCE.match(cleaned)
    if not opening:
        return cleaned

    cleaned = cleaned[opening.end() :]
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_response(raw: Optional[str]) -> Any:
    """Parse raw provider output as JSON after removing any code fence.

    Raises:
        MalformedResponseError: If the text is empty or not valid JSON
    """
    body = strip_code_fence(raw)
    if not body:
        raise MalformedResponseError("AI provider returned an empty response")

    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response: {body[:500]}")
        raise MalformedResponseError(
            f"Failed to parse AI response as JSON: {e.msg}"
        ) from e


def _bare_list(value: Any) -> Optional[List[Any]]:
    return value if isinstance(value, list) else None


def _list_field(name: str) -> Callable[[Any], Optional[List[Any]]]:
    def decode(value: Any) -> Optional[List[Any]]:
        if isinstance(value, dict) and isinstance(value.get(name), list):
            return value[name]
        return None

    return decode


# Accepted top-level shapes, tried in priority order
_SHAPE_DECODERS: Tuple[Tuple[str, Callable[[Any], Optional[List[Any]]]], ...] = (
    ("array", _bare_list),
    ("questions", _list_field("questions")),
    ("quiz", _list_field("quiz")),
)


def decode_question_list(value: Any) -> List[Any]:
    """Extract the list of question records from a parsed response.

    Tries a bare array, then an object with a ``questions`` array, then an
    object with a ``quiz`` array. A decoder only falls through when the shape
    does not match; the records themselves are not inspected here.

    Raises:
        UnexpectedShapeError: If no accepted shape matches
    """
    for shape, decoder in _SHAPE_DECODERS:
        records = decoder(value)
        if records is not None:
            logger.debug(f"Decoded {len(records)} question records ({shape} shape)")
            return records

    raise UnexpectedShapeError(
        "Unexpected response structure from AI: expected a JSON array or an "
        f"object with a 'questions' or 'quiz' array, got {type(value).__name__}"
    )


def normalize_response(raw: Optional[str]) -> List[Any]:
    """Turn raw provider output into the list of raw question records.

    Raises:
        MalformedResponseError: If the output is not valid JSON
        UnexpectedShapeError: If the JSON has an unsupported shape or holds
            no question records
    """
    records = decode_question_list(parse_response(raw))
    if not records:
        raise UnexpectedShapeError("No questions generated")
    return records
