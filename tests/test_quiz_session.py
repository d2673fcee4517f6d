#!/usr/bin/env python3
"""
Pytest tests for the QuizSession state machine
"""

import random
from unittest.mock import Mock

import pytest

from app.client.quiz_client import QuizApiError
from app.domain.quiz_session import InvalidTransitionError, QuizSession, SessionState
from app.schemas.quiz import GeneratedQuestion


def make_questions():
    return [
        GeneratedQuestion(id=1, question="One", options=["a", "b", "c", "d"], correctAnswer=0),
        GeneratedQuestion(id=2, question="Two", options=["a", "b", "c"], correctAnswer=2),
        GeneratedQuestion(id=3, question="Three", options=["a", "b"], correctAnswer=1),
    ]


def answer(session, correct=True):
    """Select the display position for a right or wrong answer, then check and move on"""
    target = session.current_question.correctAnswer
    if correct:
        position = session.option_mapping.index(target)
    else:
        position = next(i for i, original in enumerate(session.option_mapping) if original != target)
    session.select_answer(position)
    session.advance()
    session.advance()


class TestQuizSessionLoading:
    def test_starts_in_loading(self):
        session = QuizSession(make_questions)

        assert session.state == SessionState.LOADING

    def test_load_success(self):
        session = QuizSession(make_questions, rng=random.Random(3))

        assert session.load() == SessionState.IN_PROGRESS
        assert session.current_index == 0
        assert session.score == 0
        assert sorted(session.option_mapping) == [0, 1, 2, 3]

    def test_load_empty(self):
        session = QuizSession(lambda: [])

        assert session.load() == SessionState.EMPTY
        assert session.questions == []

    def test_load_error_keeps_no_state(self):
        fetch = Mock(side_effect=QuizApiError('No questions found for module "X"', 404))
        session = QuizSession(fetch)

        assert session.load() == SessionState.ERROR
        assert session.error == 'No questions found for module "X"'
        assert session.questions == []

    def test_reload_after_error(self):
        fetch = Mock(side_effect=[QuizApiError("HTTP 500", 500), make_questions()])
        session = QuizSession(fetch)
        session.load()

        assert session.reload() == SessionState.IN_PROGRESS
        assert fetch.call_count == 2
        assert session.error is None

    def test_for_module_uses_client(self):
        client = Mock()
        client.get_questions.return_value = make_questions()

        session = QuizSession.for_module(client, "Advanced Algorithms", 3)
        session.load()

        client.get_questions.assert_called_once_with("Advanced Algorithms", 3)
        assert session.state == SessionState.IN_PROGRESS


class TestQuizSessionProgress:
    def setup_method(self):
        """Set up test fixtures"""
        self.session = QuizSession(make_questions, rng=random.Random(7))
        self.session.load()

    def test_scoring_two_of_three(self):
        """Right, wrong, right gives 2 / 3, 67 %, 2:1"""
        answer(self.session, correct=True)
        answer(self.session, correct=False)
        answer(self.session, correct=True)

        assert self.session.state == SessionState.FINISHED
        result = self.session.result()
        assert result.score == 2
        assert result.total == 3
        assert result.percentage == 67
        assert result.classification == "2:1"
        assert result.label == "2:1 (67%)"

    def test_check_then_next(self):
        session = self.session
        position = session.option_mapping.index(0)
        session.select_answer(position)

        assert session.action_label == "Check Answer"
        session.advance()
        assert session.feedback_shown
        assert session.score == 0
        assert session.current_index == 0
        assert session.action_label == "Next Question"

        session.advance()
        assert session.score == 1
        assert session.current_index == 1
        assert session.selected_answer is None
        assert not session.feedback_shown
        assert sorted(session.option_mapping) == [0, 1, 2]

    def test_selection_locked_during_feedback(self):
        self.session.select_answer(0)
        self.session.advance()

        with pytest.raises(InvalidTransitionError):
            self.session.select_answer(1)

    def test_advance_requires_selection(self):
        with pytest.raises(InvalidTransitionError):
            self.session.advance()

    def test_select_out_of_range(self):
        with pytest.raises(InvalidTransitionError):
            self.session.select_answer(4)

    def test_last_question_label(self):
        answer(self.session)
        answer(self.session)
        self.session.select_answer(0)
        self.session.advance()

        assert self.session.is_last_question
        assert self.session.action_label == "Finish Quiz"

    def test_result_only_when_finished(self):
        with pytest.raises(InvalidTransitionError):
            self.session.result()

    def test_restart_resets_counters(self):
        questions = list(self.session.questions)
        for _ in range(3):
            answer(self.session)

        assert self.session.restart() == SessionState.IN_PROGRESS
        assert self.session.score == 0
        assert self.session.current_index == 0
        assert self.session.selected_answer is None
        assert not self.session.feedback_shown
        assert self.session.questions == questions

    def test_restart_only_when_finished(self):
        with pytest.raises(InvalidTransitionError):
            self.session.restart()


class TestOptionShuffle:
    @pytest.mark.parametrize("seed", range(10))
    def test_display_position_maps_back_to_original(self, seed):
        """Every display position resolves to the option shown there"""
        session = QuizSession(make_questions, rng=random.Random(seed))
        session.load()
        options = session.current_question.options

        for position, text in enumerate(session.display_options):
            original = session.original_index(position)
            assert options[original] == text
            assert session.is_correct_position(position) == (
                original == session.current_question.correctAnswer
            )

    def test_each_question_gets_a_fresh_permutation(self):
        session = QuizSession(make_questions, rng=random.Random(0))
        session.load()
        answer(session)

        assert len(session.option_mapping) == len(session.current_question.options)
