import pytest

from models.analysis_models import OutputMode, ProgrammingLanguage
from models.chat_models import ChatMessage
from utils.constants import MODE_INSTRUCTIONS
from utils.prompt_utils import (
    ANALYSIS_SCHEMA, QUIZ_SCHEMA, build_analysis_prompt, build_analysis_request, build_chat_request,
    build_chat_system_instruction, build_quiz_request, quick_action_message, should_attach_images,
    truncate_context,
)


@pytest.mark.parametrize("text, expected", [
    ("Look at the image again", True),
    ("In my SKETCH the arrow points left", True),
    ("Optimize the code", False),
    ("", False),
])
def test_should_attach_images(text, expected):
    assert should_attach_images(text) is expected


def test_truncate_context():
    assert truncate_context("abcdef", 3) == "abc"
    assert truncate_context("abc", 10) == "abc"
    assert truncate_context(None, 10) == ""


def test_analysis_prompt_contains_mode_and_language():
    prompt = build_analysis_prompt(ProgrammingLanguage.CPP, OutputMode.DIAGRAM)

    assert MODE_INSTRUCTIONS["diagram"] in prompt
    assert "Output code in C++." in prompt
    assert "IMPORTANT REFINEMENT" not in prompt


def test_analysis_prompt_auto_language():
    prompt = build_analysis_prompt(ProgrammingLanguage.AUTO, OutputMode.AUTO)

    assert "Choose the best language for the code." in prompt


def test_analysis_prompt_includes_refinement():
    prompt = build_analysis_prompt(ProgrammingLanguage.PYTHON, OutputMode.CODE, "  use recursion  ")

    assert "IMPORTANT REFINEMENT: use recursion" in prompt


def test_analysis_prompt_ignores_blank_refinement():
    prompt = build_analysis_prompt(ProgrammingLanguage.PYTHON, OutputMode.CODE, "   ")

    assert "IMPORTANT REFINEMENT" not in prompt


def test_analysis_request_orders_images_before_text(image_asset):
    second = image_asset.__class__(
        id="img2", raw_base64="d29ybGQ=", mime_type="image/jpeg", preview_ref="data:image/jpeg;base64,d29ybGQ=",
    )

    body = build_analysis_request([image_asset, second], ProgrammingLanguage.AUTO, OutputMode.AUTO, thinking_budget=1024)

    parts = body["contents"][0]["parts"]
    assert [p["inlineData"]["data"] for p in parts[:2]] == ["aGVsbG8=", "d29ybGQ="]
    assert "text" in parts[2]
    config = body["generationConfig"]
    assert config["responseSchema"] is ANALYSIS_SCHEMA
    assert config["thinkingConfig"] == {"thinkingBudget": 1024}
    assert body["systemInstruction"]["parts"][0]["text"]


def test_analysis_request_without_thinking_budget(image_asset):
    body = build_analysis_request([image_asset], ProgrammingLanguage.AUTO, OutputMode.AUTO)

    assert "thinkingConfig" not in body["generationConfig"]


def test_analysis_schema_requires_secondary_info():
    assert "secondaryInfo" in ANALYSIS_SCHEMA["required"]
    assert ANALYSIS_SCHEMA["properties"]["detectedType"]["enum"] == ["code", "diagram", "math", "notes"]


def test_quiz_request_truncates_context():
    body = build_quiz_request("y" * 8500)

    prompt = body["contents"][0]["parts"][0]["text"]
    assert prompt.count("y") == 8000
    assert body["generationConfig"]["responseSchema"] is QUIZ_SCHEMA


def test_chat_system_instruction_truncates_context():
    instruction = build_chat_system_instruction("z" * 12000)

    assert instruction.count("z") == 10000


def test_chat_request_attaches_images_only_when_referenced(image_asset):
    history = [ChatMessage(id="1", role="user", text="hi", timestamp=1)]

    plain = build_chat_request(history, "Optimize the code", "ctx", [image_asset])
    with_image = build_chat_request(history, "What does the image show?", "ctx", [image_asset])

    assert plain["contents"][-1]["parts"] == [{"text": "Optimize the code"}]
    assert with_image["contents"][-1]["parts"][1] == image_asset.inline_data()
    assert plain["contents"][0] == {"role": "user", "parts": [{"text": "hi"}]}


def test_quick_action_message():
    assert quick_action_message("add comments to the code") == "Please add comments to the code."
