from .quiz import Answer, Module, Question, QuizDocument

__all__ = ["Module", "Answer", "Question", "QuizDocument"]
