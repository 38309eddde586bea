import json

import pytest
import requests

from conftest import FakeResponse, gemini_payload
from models.analysis_models import OutputMode, ProgrammingLanguage
from models.chat_models import ChatMessage
from services.ai_gateway import AIGateway, EmptyResponse, MalformedResponse, TransportError
from utils.config import AppConfig
from utils.constants import CHAT_EMPTY_REPLY, CHAT_ERROR_REPLY


def test_analyze_posts_to_generate_content(config, fake_post, image_asset, sample_analysis_payload):
    calls = fake_post(FakeResponse(gemini_payload(json.dumps(sample_analysis_payload))))
    gateway = AIGateway(config)

    result = gateway.analyze([image_asset], ProgrammingLanguage.PYTHON, OutputMode.CODE)

    assert result.title == "Binary Search"
    assert result.detected_type == "code"
    assert result.secondary_info.complexity == "O(log n)"
    call = calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://example.test/v1beta/models/test-model:generateContent"
    assert call["headers"] == {"x-goog-api-key": "test-key"}
    assert call["timeout"] is None
    parts = call["json"]["contents"][0]["parts"]
    assert parts[0] == image_asset.inline_data()
    assert "Output code in Python." in parts[-1]["text"]
    assert call["json"]["generationConfig"]["responseMimeType"] == "application/json"


def test_analyze_passes_configured_timeout(fake_post, image_asset, sample_analysis_payload):
    calls = fake_post(FakeResponse(gemini_payload(json.dumps(sample_analysis_payload))))
    gateway = AIGateway(AppConfig(api_key="k", request_timeout=30.0))

    gateway.analyze([image_asset], ProgrammingLanguage.AUTO)

    assert calls[0]["timeout"] == 30.0


def test_analyze_ignores_thought_parts(config, fake_post, image_asset, sample_analysis_payload):
    payload = {"candidates": [{"content": {"parts": [
        {"text": "thinking...", "thought": True},
        {"text": json.dumps(sample_analysis_payload)},
    ]}}]}
    fake_post(FakeResponse(payload))

    result = AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)

    assert result.title == "Binary Search"


def test_analyze_empty_text_raises_empty_response(config, fake_post, image_asset):
    fake_post(FakeResponse(gemini_payload("   ")))

    with pytest.raises(EmptyResponse):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_analyze_without_candidates_raises_empty_response(config, fake_post, image_asset):
    fake_post(FakeResponse({"candidates": []}))

    with pytest.raises(EmptyResponse):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_analyze_invalid_json_raises_malformed(config, fake_post, image_asset):
    fake_post(FakeResponse(gemini_payload("not json at all")))

    with pytest.raises(MalformedResponse):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_analyze_unknown_detected_type_raises_malformed(config, fake_post, image_asset, sample_analysis_payload):
    sample_analysis_payload["detectedType"] = "poem"
    fake_post(FakeResponse(gemini_payload(json.dumps(sample_analysis_payload))))

    with pytest.raises(MalformedResponse):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_analyze_missing_secondary_info_raises_malformed(config, fake_post, image_asset, sample_analysis_payload):
    del sample_analysis_payload["secondaryInfo"]
    fake_post(FakeResponse(gemini_payload(json.dumps(sample_analysis_payload))))

    with pytest.raises(MalformedResponse):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_http_error_raises_transport_error(config, fake_post, image_asset):
    fake_post(FakeResponse({"error": {"message": "quota"}}, status_code=429))

    with pytest.raises(TransportError):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_connection_error_raises_transport_error(config, fake_post, image_asset):
    fake_post(requests.exceptions.ConnectionError("unreachable"))

    with pytest.raises(TransportError):
        AIGateway(config).analyze([image_asset], ProgrammingLanguage.AUTO)


def test_missing_api_key_raises_transport_error_without_request(fake_post, image_asset):
    calls = fake_post(FakeResponse(gemini_payload("{}")))
    gateway = AIGateway(AppConfig(api_key=""))

    assert not gateway.is_configured()
    with pytest.raises(TransportError):
        gateway.analyze([image_asset], ProgrammingLanguage.AUTO)
    assert calls == []


def test_generate_quiz_assigns_ids(config, fake_post, sample_quiz_payload):
    calls = fake_post(FakeResponse(gemini_payload(json.dumps(sample_quiz_payload))))

    questions = AIGateway(config).generate_quiz("x" * 9000)

    assert len(questions) == 5
    assert len({q.id for q in questions}) == 5
    assert all(q.id.startswith("q-") and q.id.endswith(f"-{i}") for i, q in enumerate(questions))
    assert questions[1].correct_answer_index == 1
    prompt = calls[0]["json"]["contents"][0]["parts"][0]["text"]
    assert "x" * 8000 in prompt
    assert "x" * 8001 not in prompt


def test_generate_quiz_rejects_non_array(config, fake_post):
    fake_post(FakeResponse(gemini_payload(json.dumps({"question": "?"}))))

    with pytest.raises(MalformedResponse):
        AIGateway(config).generate_quiz("context")


def test_generate_quiz_rejects_wrong_option_count(config, fake_post, sample_quiz_payload):
    sample_quiz_payload[0]["options"] = ["a", "b", "c"]
    fake_post(FakeResponse(gemini_payload(json.dumps(sample_quiz_payload))))

    with pytest.raises(MalformedResponse):
        AIGateway(config).generate_quiz("context")


def test_send_follow_up_returns_reply_text(config, fake_post):
    calls = fake_post(FakeResponse(gemini_payload("Sure, here it is.")))
    history = [
        ChatMessage(id="1", role="user", text="hi", timestamp=1),
        ChatMessage(id="2", role="model", text="hello", timestamp=2),
    ]

    reply = AIGateway(config).send_follow_up(history, "explain", "the context")

    assert reply == "Sure, here it is."
    contents = calls[0]["json"]["contents"]
    assert [c["role"] for c in contents] == ["user", "model", "user"]
    assert contents[-1]["parts"] == [{"text": "explain"}]


def test_send_follow_up_absorbs_transport_errors(config, fake_post):
    fake_post(requests.exceptions.Timeout("slow"))

    assert AIGateway(config).send_follow_up([], "hello", "ctx") == CHAT_ERROR_REPLY


def test_send_follow_up_empty_reply(config, fake_post):
    fake_post(FakeResponse(gemini_payload("")))

    assert AIGateway(config).send_follow_up([], "hello", "ctx") == CHAT_EMPTY_REPLY
