import pytest

from models.analysis_models import QuizQuestion
from utils.quiz_utils import QuizUtils


@pytest.fixture
def quiz():
    return [
        QuizQuestion(id=f"q{i}", question=f"Q{i}", options=["a", "b", "c", "d"],
                     correct_answer_index=i % 4, explanation="")
        for i in range(5)
    ]


def test_calculate_score(quiz):
    answers = {"q0": 0, "q1": 1, "q2": 0, "q3": 3}

    assert QuizUtils.calculate_score(quiz, answers) == 3
    assert QuizUtils.calculate_score(quiz, {}) == 0
    assert QuizUtils.calculate_score(quiz, {q.id: q.correct_answer_index for q in quiz}) == 5


def test_score_ignores_unknown_question_ids(quiz):
    assert QuizUtils.calculate_score(quiz, {"other": 0}) == 0


@pytest.mark.parametrize("score, total, grade", [
    (5, 5, "S"),
    (9, 10, "S"),
    (4, 5, "A"),
    (7, 10, "B"),
    (3, 5, "C"),
    (0, 5, "C"),
    (0, 0, "C"),
])
def test_get_grade(score, total, grade):
    assert QuizUtils.get_grade(score, total) == grade


def test_is_complete(quiz):
    partial = {q.id: 0 for q in quiz[:-1]}

    assert not QuizUtils.is_complete(quiz, partial)
    assert QuizUtils.is_complete(quiz, {**partial, "q4": 2})
