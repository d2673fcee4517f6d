"""Quiz session state machine.

Walks a user through a fetched list of questions one at a time. Options are
shown in a shuffled order; each question gets its own permutation (a list of
original option indices) and answers are always scored against the original
index, never the display position.

    LOADING -> ERROR | EMPTY | IN_PROGRESS -> FINISHED
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from app.domain.quiz_domain import QuizDomain
from app.schemas.quiz import GeneratedQuestion

logger = logging.getLogger(__name__)

QuestionFetcher = Callable[[], List[GeneratedQuestion]]


class SessionState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class InvalidTransitionError(Exception):
    """The requested action is not allowed in the current state"""


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    percentage: int
    classification: str

    @property
    def label(self) -> str:
        return f"{self.classification} ({self.percentage}%)"


class QuizSession:
    def __init__(self, fetch_questions: QuestionFetcher, rng: Optional[random.Random] = None):
        self._fetch_questions = fetch_questions
        self._rng = rng or random.Random()

        self.state = SessionState.LOADING
        self.error: Optional[str] = None
        self.questions: List[GeneratedQuestion] = []
        self.current_index = 0
        self.score = 0
        self.selected_answer: Optional[int] = None
        self.feedback_shown = False
        self.option_mapping: List[int] = []

    @classmethod
    def for_module(cls, client, module_name: str, count: Optional[int] = None, **kwargs):
        """Session that fetches its questions through a QuizApiClient"""
        return cls(lambda: client.get_questions(module_name, count), **kwargs)

    # Loading

    def load(self) -> SessionState:
        self.state = SessionState.LOADING
        self.error = None
        self.questions = []
        try:
            questions = list(self._fetch_questions())
        except Exception as e:
            logger.error(f"Error loading questions: {e}")
            self.state = SessionState.ERROR
            self.error = str(e) or "Failed to load questions. Please try again."
            return self.state

        if not questions:
            self.state = SessionState.EMPTY
            return self.state

        self.questions = questions
        self._reset_progress()
        self.state = SessionState.IN_PROGRESS
        return self.state

    def reload(self) -> SessionState:
        return self.load()

    # Answering

    def select_answer(self, position: int) -> None:
        self._require(SessionState.IN_PROGRESS)
        if self.feedback_shown:
            raise InvalidTransitionError("Answer is locked while feedback is shown")
        if not 0 <= position < len(self.option_mapping):
            raise InvalidTransitionError(f"No option at position {position}")
        self.selected_answer = position

    def advance(self) -> SessionState:
        """First call shows feedback; second call scores and moves on"""
        self._require(SessionState.IN_PROGRESS)
        if self.selected_answer is None:
            raise InvalidTransitionError("Select an answer first")

        if not self.feedback_shown:
            self.feedback_shown = True
            return self.state

        if self.original_index(self.selected_answer) == self.current_question.correctAnswer:
            self.score += 1

        if self.is_last_question:
            self.state = SessionState.FINISHED
        else:
            self.current_index += 1
            self._prepare_current_question()
        return self.state

    def restart(self) -> SessionState:
        self._require(SessionState.FINISHED)
        self._reset_progress()
        self.state = SessionState.IN_PROGRESS
        return self.state

    def result(self) -> QuizResult:
        self._require(SessionState.FINISHED)
        total = len(self.questions)
        percentage = QuizDomain.percentage(self.score, total)
        return QuizResult(
            score=self.score,
            total=total,
            percentage=percentage,
            classification=QuizDomain.classify(percentage),
        )

    # Display helpers

    @property
    def current_question(self) -> GeneratedQuestion:
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def display_options(self) -> List[str]:
        options = self.current_question.options
        return [options[index] for index in self.option_mapping]

    def original_index(self, position: int) -> int:
        return self.option_mapping[position]

    def is_correct_position(self, position: int) -> bool:
        return self.original_index(position) == self.current_question.correctAnswer

    @property
    def action_label(self) -> str:
        if not self.feedback_shown:
            return "Check Answer"
        return "Finish Quiz" if self.is_last_question else "Next Question"

    # Internals

    def _require(self, state: SessionState) -> None:
        if self.state != state:
            raise InvalidTransitionError(
                f"Expected session to be {state.value}, but it is {self.state.value}"
            )

    def _reset_progress(self) -> None:
        self.current_index = 0
        self.score = 0
        self._prepare_current_question()

    def _prepare_current_question(self) -> None:
        self.option_mapping = list(range(len(self.current_question.options)))
        self._rng.shuffle(self.option_mapping)
        self.selected_answer = None
        self.feedback_shown = False
