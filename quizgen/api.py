"""
HTTP API for quiz generation.

Run with:
    uvicorn quizgen.api:app
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, BinaryIO, Callable, List, Optional

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .config import Settings, settings
from .documents import SUPPORTED_EXTENSIONS, DocumentExtractionError, extract_text
from .errors import InvalidRequestError, QuizGenerationError
from .generator import QuizGenerator
from .logging_config import setup_logging
from .models import DifficultyPlan, GenerationRequest, QuizConfig, QuizResult

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[], QuizGenerator]

UPLOAD_CHUNK_SIZE = 64 * 1024


def _error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    details: Optional[List[str]] = None,
) -> JSONResponse:
    body: dict = {"error": error}
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _validation_details(error: Any) -> List[str]:
    """Flatten pydantic/FastAPI validation errors into readable strings."""
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
        message = item.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)
    return details


async def _copy_upload(source: UploadFile, target: BinaryIO, limit: int) -> bool:
    """Stream an upload into ``target`` in chunks.

    Returns:
        False as soon as more than ``limit`` bytes have been read
    """
    size = 0
    while True:
        chunk = await source.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            return True
        size += len(chunk)
        if size > limit:
            return False
        target.write(chunk)


def _success_response(result: QuizResult) -> dict:
    return {
        "success": True,
        "quiz": result.model_dump(by_alias=True, mode="json"),
    }


def create_app(
    app_settings: Optional[Settings] = None,
    generator_factory: Optional[GeneratorFactory] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_settings: Settings to use (uses the global settings if not provided)
        generator_factory: Builds the generator for each request (defaults to
            ``QuizGenerator.from_settings``)
    """
    app_settings = app_settings or settings
    if generator_factory is None:

        def generator_factory() -> QuizGenerator:
            return QuizGenerator.from_settings(app_settings)

    app = FastAPI(title="Quiz Generation Service")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation Error",
            details=_validation_details(exc),
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "quiz-generation"}

    router = APIRouter(prefix="/api/quiz")

    async def _generate(request: GenerationRequest, failure: str) -> Any:
        try:
            generator = generator_factory()
            result = await generator.generate_quiz(request)
        except InvalidRequestError as e:
            return _error_response(status.HTTP_400_BAD_REQUEST, "Validation Error", str(e))
        except QuizGenerationError as e:
            logger.error(f"{failure}: {e}")
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, failure, str(e)
            )
        return _success_response(result)

    @router.post("/generate-from-text")
    async def generate_from_text(request: GenerationRequest):
        """Generate a quiz from text supplied in the request body."""
        if len(request.content.strip()) < app_settings.min_content_length:
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                "Validation Error",
                details=[
                    f"content: must be at least {app_settings.min_content_length} "
                    "characters long"
                ],
            )
        return await _generate(request, "Failed to generate quiz")

    @router.post("/generate-from-file")
    async def generate_from_file(
        file: UploadFile = File(...),
        num_questions: int = Form(..., alias="numQuestions"),
        difficulty: str = Form(...),
        time_limit: int = Form(..., alias="timeLimit"),
    ):
        """Generate a quiz from an uploaded PDF, DOCX or TXT document.

        ``difficulty`` is a JSON object string, e.g. ``{"easy": 2, "medium": 2,
        "hard": 1}``.
        """
        try:
            config = QuizConfig(
                num_questions=num_questions,
                difficulty=DifficultyPlan.coerce(json.loads(difficulty)),
                time_limit=time_limit,
            )
        except (ValueError, TypeError) as e:
            details = (
                _validation_details(e)
                if isinstance(e, ValidationError)
                else [f"difficulty: {e}"]
            )
            return _error_response(
                status.HTTP_400_BAD_REQUEST, "Validation Error", details=details
            )

        extension = Path(file.filename or "").suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                "Invalid file type. Only PDF, DOCX, and TXT files are allowed.",
            )

        upload = tempfile.NamedTemporaryFile(suffix=extension, delete=False)
        upload_path = upload.name
        try:
            with upload:
                within_limit = await _copy_upload(
                    file, upload, app_settings.max_file_size
                )
            if not within_limit:
                return _error_response(
                    413,
                    f"File exceeds the {app_settings.max_file_size} byte upload limit",
                )
            content = await run_in_threadpool(extract_text, upload_path, extension)
        except DocumentExtractionError as e:
            logger.warning(f"Could not extract text from {file.filename}: {e}")
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                "Document content is too short or could not be extracted",
                str(e),
            )
        finally:
            os.unlink(upload_path)

        if len(content) < app_settings.min_content_length:
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                "Document content is too short or could not be extracted",
            )

        request = GenerationRequest.from_config(config, content)
        return await _generate(request, "Failed to generate quiz from file")

    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
    )
    port = int(os.getenv("PORT", "3000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
