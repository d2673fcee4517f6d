from .quiz import QuizService

__all__ = ["QuizService"]
