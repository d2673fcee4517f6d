from .quiz_repository import QuizDocumentCache, QuizRepository

__all__ = ["QuizRepository", "QuizDocumentCache"]
