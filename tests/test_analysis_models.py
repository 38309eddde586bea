import pytest
from pydantic import ValidationError

from models.analysis_models import AnalysisResult, QuizQuestion
from models.history_models import Theme
from ui.handlers.clipboard_handler import copy_text_for


def test_result_uses_camel_case_keys(sample_analysis_payload):
    result = AnalysisResult.model_validate(sample_analysis_payload)

    assert result.suggested_language == "Python"
    assert result.secondary_info.edge_cases == ["empty list", "missing value"]
    assert result.to_dict() == sample_analysis_payload


def test_optional_fields_may_be_absent(sample_analysis_payload):
    for key in ("code", "diagram", "flashcards"):
        del sample_analysis_payload[key]
    sample_analysis_payload["secondaryInfo"] = {}

    result = AnalysisResult.model_validate(sample_analysis_payload)

    assert result.code is None
    assert result.flashcards is None
    assert result.chat_context() == result.explanation
    assert "code" not in result.to_dict()


def test_chat_context_joins_explanation_and_code(make_result):
    result = make_result(explanation="Explain", code="print(1)")

    assert result.chat_context() == "Explain\n\nprint(1)"


def test_with_quiz_returns_copy(make_result):
    result = make_result()
    quiz = [QuizQuestion(id="q-1", question="?", options=["a", "b", "c", "d"],
                         correct_answer_index=2, explanation="c")]

    updated = result.with_quiz(quiz)

    assert result.quiz is None
    assert updated.quiz == quiz
    assert updated.to_dict()["quiz"][0]["correctAnswerIndex"] == 2


@pytest.mark.parametrize("overrides", [
    {"options": ["a", "b", "c"]},
    {"correctAnswerIndex": 4},
    {"correctAnswerIndex": -1},
])
def test_invalid_quiz_question(overrides):
    payload = {"id": "q", "question": "?", "options": ["a", "b", "c", "d"],
               "correctAnswerIndex": 0, "explanation": ""}
    payload.update(overrides)

    with pytest.raises(ValidationError):
        QuizQuestion.model_validate(payload)


def test_theme_toggled():
    assert Theme.LIGHT.toggled() is Theme.DARK
    assert Theme("dark").toggled() is Theme.LIGHT


def test_copy_text_prefers_code_then_explanation(make_result):
    result = make_result(code="print(1)", diagram="A-->B")

    assert copy_text_for(result) == "print(1)"
    assert copy_text_for(result, diagram_tab=True) == "flowchart TD\nA-->B"
    assert copy_text_for(make_result(code=None)) == make_result().explanation
    assert copy_text_for(None) == ""
