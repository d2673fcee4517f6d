import logging
import math
import random
from typing import Any, List, Optional

from app.core.errors import QuestionValidationError
from app.models.quiz import Answer, Question, QuizDocument
from app.schemas.quiz import GeneratedQuestion

logger = logging.getLogger(__name__)

# (lower bound in percent, label), checked top to bottom
CLASSIFICATION_BANDS = [
    (70, "First Class"),
    (60, "2:1"),
    (50, "2:2"),
    (40, "Third Class"),
]
FAIL_LABEL = "Fail"

INVALID_FORMAT_MESSAGE = 'Invalid data format. Must contain a "questions" array.'
MISSING_FIELDS_MESSAGE = "Each question must have question_text and answers array."
INVALID_ANSWER_MESSAGE = "Each answer must be an object with text and is_correct."
NO_CORRECT_ANSWER_MESSAGE = "Each question must have at least one correct answer."


class QuizDomain:
    """Domain logic for quiz questions"""

    @staticmethod
    def to_generated_question(question: Question) -> Optional[GeneratedQuestion]:
        """
        Project a stored question to the client shape.

        Returns None when the question has no correct answer.
        """
        correct_index = question.correct_answer_index()
        if correct_index == -1:
            logger.warning(f"Question {question.id} has no correct answer")
            return None

        return GeneratedQuestion(
            id=question.id,
            question=question.question_text,
            options=[answer.text for answer in question.answers],
            correctAnswer=correct_index,
        )

    @staticmethod
    def to_generated_questions(questions: List[Question]) -> List[GeneratedQuestion]:
        generated = []
        for question in questions:
            projected = QuizDomain.to_generated_question(question)
            if projected is not None:
                generated.append(projected)
        return generated

    @staticmethod
    def sample(items: List, count: int, rng: Optional[random.Random] = None) -> List:
        """Shuffle a copy of items and keep the first min(count, len(items))"""
        rng = rng or random
        shuffled = list(items)
        rng.shuffle(shuffled)
        return shuffled[: max(0, min(count, len(shuffled)))]

    @staticmethod
    def validate_upload(payload: Any, document: Optional[QuizDocument] = None) -> List[dict]:
        """
        Check an upload payload against the current document.

        Stops at the first broken rule and raises QuestionValidationError naming
        it. Returns the list of question entries when everything is valid.
        Without a document the module check is skipped, so clients can run the
        same rules before sending.
        """
        if not isinstance(payload, dict) or not isinstance(
            payload.get("questions"), list
        ):
            raise QuestionValidationError(INVALID_FORMAT_MESSAGE)

        entries = payload["questions"]
        for entry in entries:
            QuizDomain.validate_entry(entry, document)
        return entries

    @staticmethod
    def validate_entry(entry: Any, document: Optional[QuizDocument] = None) -> None:
        if not isinstance(entry, dict):
            raise QuestionValidationError(MISSING_FIELDS_MESSAGE)

        question_text = entry.get("question_text")
        answers = entry.get("answers")
        if (
            not isinstance(question_text, str)
            or not question_text.strip()
            or not isinstance(answers, list)
            or not answers
        ):
            raise QuestionValidationError(MISSING_FIELDS_MESSAGE)

        for field in ("question_type", "difficulty"):
            value = entry.get(field)
            if value is not None and not isinstance(value, str):
                raise QuestionValidationError(f"{field} must be a string when given.")

        if not all(
            isinstance(answer, dict) and isinstance(answer.get("text"), str)
            for answer in answers
        ):
            raise QuestionValidationError(INVALID_ANSWER_MESSAGE)

        if document is not None:
            module_id = entry.get("module_id")
            if (
                isinstance(module_id, bool)
                or not isinstance(module_id, int)
                or not document.has_module_id(module_id)
            ):
                raise QuestionValidationError(
                    f"Module with id {module_id} does not exist."
                )

        if not any(answer.get("is_correct") is True for answer in answers):
            raise QuestionValidationError(NO_CORRECT_ANSWER_MESSAGE)

    @staticmethod
    def build_questions(entries: List[dict], start_id: int) -> List[Question]:
        """Turn validated upload entries into questions with fresh ids"""
        questions = []
        next_id = start_id
        for entry in entries:
            # Uploaded ids are ignored so they can never collide
            questions.append(
                Question(
                    id=next_id,
                    module_id=entry["module_id"],
                    question_text=entry["question_text"],
                    question_type=entry.get("question_type") or "multiple_choice",
                    difficulty=entry.get("difficulty") or "medium",
                    answers=[
                        Answer(**{**answer, "is_correct": answer.get("is_correct") is True})
                        for answer in entry["answers"]
                    ],
                )
            )
            next_id += 1
        return questions

    @staticmethod
    def percentage(score: int, total: int) -> int:
        """Score as a whole percentage, halves rounded up"""
        if total <= 0:
            return 0
        return int(math.floor(100 * score / total + 0.5))

    @staticmethod
    def classify(percentage: int) -> str:
        for lower_bound, label in CLASSIFICATION_BANDS:
            if percentage >= lower_bound:
                return label
        return FAIL_LABEL
