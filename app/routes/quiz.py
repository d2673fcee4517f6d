import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.core.errors import ClientError
from app.core.storage import get_quiz_repository
from app.repositories.quiz_repository import QuizRepository
from app.schemas.quiz import (
    ErrorResponse,
    ModulesResponse,
    QuestionsResponse,
    UploadResponse,
)
from app.services.quiz import QuizService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quiz"])

INTERNAL_ERROR_MESSAGE = "Internal server error"

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def parse_count(raw: Optional[str]) -> Optional[int]:
    """Empty or 0 means "every question"; otherwise a positive integer"""
    if raw is None or not raw.strip():
        return None
    try:
        count = int(raw)
    except ValueError:
        raise ClientError("count must be a positive integer")
    if count < 0:
        raise ClientError("count must be a positive integer")
    return count or None


@router.get(
    "/modules",
    response_model=ModulesResponse,
    responses=ERROR_RESPONSES,
)
def list_modules(repository: QuizRepository = Depends(get_quiz_repository)):
    """List modules with their question counts"""
    try:
        service = QuizService(repository)
        return ModulesResponse(modules=service.list_modules())
    except Exception:
        logger.exception("Error fetching modules")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )


@router.get(
    "/questions",
    response_model=QuestionsResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
def get_questions(
    module: Optional[str] = None,
    count: Optional[str] = None,
    difficulty: Optional[str] = None,
    repository: QuizRepository = Depends(get_quiz_repository),
):
    """
    Get questions for a module

    - **module**: exact module name (required)
    - **count**: random sample size; all questions in stored order when omitted
    - **difficulty**: only questions with this difficulty
    """
    if not module:
        return error_response(
            status.HTTP_400_BAD_REQUEST, "Module parameter is required"
        )

    try:
        service = QuizService(repository)
        questions = service.get_questions(
            module, count=parse_count(count), difficulty=difficulty or None
        )
    except ClientError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception:
        logger.exception("Error fetching questions")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )

    # An unknown module and an empty pool look the same here
    if not questions:
        return error_response(
            status.HTTP_404_NOT_FOUND, f'No questions found for module "{module}"'
        )

    return QuestionsResponse(questions=questions)


@router.post(
    "/upload-questions",
    response_model=UploadResponse,
    responses=ERROR_RESPONSES,
)
async def upload_questions(
    request: Request, repository: QuizRepository = Depends(get_quiz_repository)
):
    """
    Append questions to the quiz document

    Body: `{"questions": [{"module_id", "question_text", "answers", ...}]}`.
    Uploaded ids are replaced with fresh ones.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response(
            status.HTTP_400_BAD_REQUEST, "Request body must be valid JSON."
        )

    try:
        service = QuizService(repository)
        # File I/O must not block the event loop
        uploaded_count = await run_in_threadpool(service.upload_questions, payload)
    except ClientError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except Exception:
        logger.exception("Error uploading questions")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )

    return UploadResponse(
        message=f"Successfully uploaded {uploaded_count} questions.",
        uploadedCount=uploaded_count,
    )
