import json
import logging

import pytest

from conftest import FakeResponse, gemini_payload
from models.analysis_models import Flashcard, OutputMode, ProgrammingLanguage, QuizQuestion
from models.history_models import Theme
from services.ai_gateway import AIGateway, EmptyResponse
from services.session_service import SessionService, load_persisted_state, load_theme
from utils.constants import FLASHCARDS_STORAGE_KEY, HISTORY_STORAGE_KEY, THEME_STORAGE_KEY


@pytest.fixture
def session(storage):
    return SessionService(storage, load_persisted_state(storage))


def test_fresh_storage_loads_defaults(storage):
    state = load_persisted_state(storage)

    assert state.theme is Theme.LIGHT
    assert state.history == []
    assert state.saved_flashcards == []


def test_malformed_storage_is_treated_as_empty(storage):
    storage.set_item(HISTORY_STORAGE_KEY, "{broken")
    storage.save_json(FLASHCARDS_STORAGE_KEY, "not a list")
    storage.set_item(THEME_STORAGE_KEY, "purple")

    state = load_persisted_state(storage)

    assert state.history == []
    assert state.saved_flashcards == []
    assert state.theme is Theme.LIGHT


def test_theme_round_trip(storage):
    session = SessionService(storage, load_persisted_state(storage))

    session.set_theme(Theme.DARK)

    assert load_persisted_state(storage).theme is Theme.DARK
    assert session.toggle_theme() is Theme.LIGHT
    assert load_theme(storage) is Theme.LIGHT


def test_theme_accepts_raw_value(storage, caplog):
    storage.set_item(THEME_STORAGE_KEY, "dark")

    with caplog.at_level(logging.WARNING):
        assert load_theme(storage) is Theme.DARK

    assert caplog.records == []


def test_begin_analysis_requires_uploads(session):
    assert session.begin_analysis() is None
    assert session.is_processing is False


def test_begin_analysis_rejects_concurrent_request(session, image_asset):
    session.add_uploads([image_asset])
    session.language = ProgrammingLanguage.PYTHON
    session.mode = OutputMode.CODE

    request = session.begin_analysis("  ")

    assert request.images == (image_asset,)
    assert request.language is ProgrammingLanguage.PYTHON
    assert request.mode is OutputMode.CODE
    assert request.refinement == "  "
    assert session.begin_analysis() is None


def test_regenerate_scenario_yields_two_history_entries(storage, fake_post, config, image_asset,
                                                        sample_analysis_payload):
    refined = dict(sample_analysis_payload, title="Binary Search v2")
    fake_post(
        FakeResponse(gemini_payload(json.dumps(sample_analysis_payload))),
        FakeResponse(gemini_payload(json.dumps(refined))),
    )
    gateway = AIGateway(config)
    session = SessionService(storage, load_persisted_state(storage))
    session.add_uploads([image_asset])

    request = session.begin_analysis()
    session.finish_analysis(gateway.analyze(list(request.images), request.language, request.mode))
    request = session.begin_analysis("use recursion")
    session.finish_analysis(gateway.analyze(list(request.images), request.language, request.mode,
                                            request.refinement))

    titles = [h.result.title for h in session.history_items]
    assert titles == ["Binary Search v2", "Binary Search"]
    assert session.result.title == "Binary Search v2"
    assert session.history_items[0].thumbnail == image_asset.preview_ref
    stored = storage.load_json(HISTORY_STORAGE_KEY)
    assert [entry["result"]["title"] for entry in stored] == titles


def test_empty_response_keeps_state(storage, fake_post, config, image_asset):
    fake_post(FakeResponse(gemini_payload("")))
    gateway = AIGateway(config)
    session = SessionService(storage, load_persisted_state(storage))
    session.add_uploads([image_asset])

    request = session.begin_analysis()
    with pytest.raises(EmptyResponse):
        gateway.analyze(list(request.images), request.language, request.mode)
    session.fail_analysis()

    assert session.is_processing is False
    assert session.result is None
    assert session.history_items == []
    assert session.uploads == [image_asset]


def test_remove_upload_and_new_session(session, image_asset, make_result):
    session.add_uploads([image_asset])
    session.result = make_result()

    session.remove_upload("other")
    assert session.uploads == [image_asset]
    session.remove_upload(image_asset.id)
    assert session.uploads == []

    session.new_session()
    assert session.result is None
    assert session.chat_messages == []


def test_chat_send_rejects_second_send_while_outstanding(session, make_result, image_asset):
    session.result = make_result()
    session.add_uploads([image_asset])

    first = session.begin_chat_send("Explain this better")

    assert first is not None
    assert first.history == ()
    assert first.context == session.result.chat_context()
    assert session.begin_chat_send("Another question") is None
    assert [m.text for m in session.chat_messages] == ["Explain this better"]

    session.finish_chat_send("Here you go.", first.generation)
    second = session.begin_chat_send("Thanks")

    assert [m.role for m in second.history] == ["user", "model"]
    assert [m.role for m in session.chat_messages] == ["user", "model", "user"]


def test_chat_send_requires_result_and_text(session, make_result):
    assert session.begin_chat_send("hello") is None

    session.result = make_result()
    assert session.begin_chat_send("   ") is None
    assert session.chat_messages == []


def test_quiz_lifecycle_updates_history(session, make_result, sample_quiz_payload):
    session.finish_analysis(make_result())
    request = session.begin_quiz()
    assert request.context == session.result.explanation
    assert session.begin_quiz() is None

    questions = [QuizQuestion.model_validate({**q, "id": f"q-{i}"}) for i, q in enumerate(sample_quiz_payload)]
    result = session.finish_quiz(questions, request.generation)

    assert len(result.quiz) == 5
    assert session.history_items[0].result.quiz == result.quiz
    assert len(session.history_items) == 1
    assert session.is_generating_quiz is False


def _quiz(payload):
    return [QuizQuestion.model_validate({**q, "id": f"q-{i}"}) for i, q in enumerate(payload)]


def test_quiz_dropped_after_new_session(session, make_result, sample_quiz_payload):
    session.finish_analysis(make_result())
    request = session.begin_quiz()

    session.new_session()

    assert session.is_generating_quiz is False
    assert session.finish_quiz(_quiz(sample_quiz_payload), request.generation) is None
    assert session.result is None
    assert session.history_items[0].result.quiz is None


def test_quiz_not_attached_to_history_selected_meanwhile(session, make_result, sample_quiz_payload):
    item_b = session.finish_analysis(make_result("B"))
    session.finish_analysis(make_result("A"))
    request = session.begin_quiz()

    session.select_history(item_b)

    assert session.finish_quiz(_quiz(sample_quiz_payload), request.generation) is None
    assert session.result.title == "B"
    assert session.result.quiz is None
    assert [(i.result.title, i.result.quiz is None) for i in session.history_items] == [("A", True), ("B", True)]


def test_stale_quiz_failure_keeps_new_quiz_running(session, make_result):
    session.finish_analysis(make_result("A"))
    old = session.begin_quiz()
    session.new_session()
    session.finish_analysis(make_result("B"))
    current = session.begin_quiz()

    session.fail_quiz(old.generation)

    assert session.is_generating_quiz is True
    session.fail_quiz(current.generation)
    assert session.is_generating_quiz is False


def test_chat_reply_dropped_after_new_session(session, make_result):
    session.result = make_result()
    request = session.begin_chat_send("hello")

    session.new_session()
    session.result = make_result("Next")

    assert session.finish_chat_send("reply to old thread", request.generation) is None
    assert session.chat_messages == []
    assert session.is_chat_sending is False
    assert session.begin_chat_send("fresh question") is not None


def test_save_flashcards_defaults_deck_to_result_title(session, make_result):
    assert session.save_flashcards([Flashcard(term="a", definition="b")]) == []

    session.result = make_result("Graphs")
    added = session.save_flashcards([Flashcard(term="a", definition="b")])

    assert [c.deck_name for c in added] == ["Graphs"]
    assert session.save_flashcards([Flashcard(term="a", definition="b")]) == []
    assert len(session.saved_flashcards) == 1
    assert session.delete_flashcard(added[0].id) is True


def test_select_history_restores_upload_from_thumbnail(session, make_result, image_asset):
    session.add_uploads([image_asset])
    session.language = ProgrammingLanguage.JAVA
    item = session.commit_result(make_result("Saved"))
    session.new_session()
    session.language = ProgrammingLanguage.AUTO
    session.chat_messages = []

    session.select_history(item)

    assert session.result.title == "Saved"
    assert session.language is ProgrammingLanguage.JAVA
    assert len(session.uploads) == 1
    assert session.uploads[0].raw_base64 == image_asset.raw_base64
    assert session.begin_analysis() is not None


def test_clear_history(session, make_result):
    session.finish_analysis(make_result())

    session.clear_history()

    assert session.history_items == []
    assert load_persisted_state(session.storage).history == []
