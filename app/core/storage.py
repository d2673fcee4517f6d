from typing import Optional

from app.core.config import settings
from app.repositories.quiz_repository import QuizRepository

_repository: Optional[QuizRepository] = None


def get_quiz_repository() -> QuizRepository:
    """Process-wide repository; its cache lives as long as the server does"""
    global _repository
    if _repository is None:
        _repository = QuizRepository(settings.QUIZ_DATA_PATH)
    return _repository
