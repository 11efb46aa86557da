"""Command-line quiz generation.

Generates a quiz from inline text or a document and prints it as JSON.

Exit Codes:
    0 - Success (quiz generated)
    2 - Generation failure (provider or response error)
    3 - Configuration error (unsupported provider, missing credential)
    4 - Input error (bad arguments, unreadable document)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .config import settings
from .documents import DocumentExtractionError, extract_text
from .errors import AuthError, QuizGenerationError, UnsupportedProviderError
from .generator import QuizGenerator
from .logging_config import setup_logging
from .models import DifficultyPlan, GenerationRequest

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERATION_FAILURE = 2
EXIT_CONFIG_ERROR = 3
EXIT_INPUT_ERROR = 4


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="quizgen",
        description="Generate a multiple-choice quiz from text with an LLM.",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Source text to generate questions from")
    source.add_argument(
        "--file", type=Path, help="PDF, DOCX or TXT document to generate from"
    )

    parser.add_argument("--easy", type=int, default=0, help="Number of easy questions")
    parser.add_argument(
        "--medium", type=int, default=0, help="Number of medium questions"
    )
    parser.add_argument("--hard", type=int, default=0, help="Number of hard questions")
    parser.add_argument(
        "--time-limit",
        type=int,
        default=30,
        help="Quiz time limit in minutes (default: 30)",
    )
    parser.add_argument(
        "--provider",
        help=f"LLM provider to use (default: {settings.ai_provider})",
    )
    parser.add_argument("--model", help="Model to use instead of the configured one")
    parser.add_argument(
        "--output", type=Path, help="Write the quiz JSON here instead of stdout"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable DEBUG logging"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = parse_arguments(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    try:
        content = args.text if args.text is not None else extract_text(args.file)
    except (DocumentExtractionError, OSError) as e:
        logger.error(f"Could not read source document: {e}")
        return EXIT_INPUT_ERROR

    try:
        plan = DifficultyPlan(easy=args.easy, medium=args.medium, hard=args.hard)
        request = GenerationRequest(
            content=content,
            num_questions=plan.total,
            difficulty=plan,
            time_limit=args.time_limit,
        )
    except ValidationError as e:
        logger.error(f"Invalid quiz configuration: {e}")
        return EXIT_INPUT_ERROR

    try:
        generator = QuizGenerator.from_settings(
            settings, provider=args.provider, model=args.model
        )
        result = asyncio.run(generator.generate_quiz(request))
    except (UnsupportedProviderError, AuthError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except QuizGenerationError as e:
        logger.error(f"Quiz generation failed: {e}")
        return EXIT_GENERATION_FAILURE

    output = json.dumps(result.model_dump(by_alias=True, mode="json"), indent=2)
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(result.questions)} questions to {args.output}")
    else:
        print(output)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
