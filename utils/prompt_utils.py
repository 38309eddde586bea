# utils/prompt_utils.py
"""
AIサービスへ送信するプロンプトと構造化出力スキーマを組み立てる機能を提供します。

ここで組み立てる関数はすべて決定的で、副作用を持ちません。
戻り値はGemini generateContent APIのリクエストボディ（contents / systemInstruction /
generationConfig）そのものです。
"""
from typing import Any, Dict, List, Optional, Sequence

from models.analysis_models import OutputMode, ProgrammingLanguage
from models.chat_models import ChatMessage
from models.image_models import ImageAsset
from utils.constants import (
    ANALYSIS_SYSTEM_INSTRUCTION, CHAT_CONTEXT_LIMIT, FLASHCARD_COUNT_RANGE, IMAGE_REFERENCE_KEYWORDS,
    MODE_INSTRUCTIONS, QUIZ_CONTEXT_LIMIT, QUIZ_QUESTION_COUNT, QUIZ_SYSTEM_INSTRUCTION,
)

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "detectedType": {
            "type": "STRING",
            "enum": ["code", "diagram", "math", "notes"],
            "description": "The identified content type of the whiteboard.",
        },
        "suggestedLanguage": {
            "type": "STRING",
            "description": "The most appropriate programming language.",
        },
        "reasoning": {
            "type": "STRING",
            "description": "Why this type and language were chosen.",
        },
        "title": {
            "type": "STRING",
            "description": "A short, descriptive title.",
        },
        "transcription": {
            "type": "STRING",
            "description": "Raw transcription of text and logic seen on the whiteboard.",
        },
        "explanation": {
            "type": "STRING",
            "description": "Detailed natural language summary and walkthrough in Markdown format.",
        },
        "code": {
            "type": "STRING",
            "description": "Executable code implementation (if applicable).",
        },
        "diagram": {
            "type": "STRING",
            "description": "Mermaid.js diagram code (if applicable).",
        },
        "flashcards": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "term": {"type": "STRING", "description": "Front of card: A specific question or concept name"},
                    "definition": {"type": "STRING", "description": "Back of card: The answer/definition"},
                },
                "required": ["term", "definition"],
            },
            "description": "3-5 key learning concepts formatted as Question/Answer pairs.",
        },
        "secondaryInfo": {
            "type": "OBJECT",
            "properties": {
                "complexity": {"type": "STRING"},
                "edgeCases": {"type": "ARRAY", "items": {"type": "STRING"}},
                "relatedConcepts": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
        },
    },
    "required": [
        "detectedType", "suggestedLanguage", "reasoning", "title",
        "transcription", "explanation", "secondaryInfo",
    ],
}

QUIZ_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "question": {"type": "STRING"},
            "options": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Provide exactly 4 options.",
            },
            "correctAnswerIndex": {
                "type": "INTEGER",
                "description": "The index (0-3) of the correct option.",
            },
            "explanation": {"type": "STRING", "description": "Why this answer is correct."},
        },
        "required": ["question", "options", "correctAnswerIndex", "explanation"],
    },
}


def truncate_context(text: Optional[str], limit: int) -> str:
    """コンテキスト文字列を先頭からlimit文字までに切り詰める。

    上流サービスのリクエストサイズ制限に収めるための方針で、切り詰めはすべてこの関数で行います。
    """
    if not text:
        return ""
    return text[:limit]


def should_attach_images(text: str) -> bool:
    """チャットのメッセージに元画像を添付すべきかを判定する。

    メッセージに画像を参照する語（"image", "sketch"）が含まれる場合のみTrueを返します。
    近似的な判定であり、厳密なルールではありません。

    Args:
        text (str): ユーザーのメッセージ。

    Returns:
        bool: 画像を添付すべきであればTrue。
    """
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in IMAGE_REFERENCE_KEYWORDS)


def mode_instruction(mode: OutputMode) -> str:
    return MODE_INSTRUCTIONS.get(OutputMode(mode).value, MODE_INSTRUCTIONS["auto"])


def language_instruction(language: ProgrammingLanguage) -> str:
    language = ProgrammingLanguage(language)
    if language is ProgrammingLanguage.AUTO:
        return "Choose the best language for the code."
    return f"Output code in {language.value}."


def build_analysis_prompt(
    language: ProgrammingLanguage,
    mode: OutputMode,
    refinement: Optional[str] = None,
) -> str:
    """解析用の指示文を組み立てる。

    Args:
        language (ProgrammingLanguage): コードの出力言語。
        mode (OutputMode): 出力モード。
        refinement (Optional[str]): 前回の結果に重ねる追加指示。空なら付与しない。

    Returns:
        str: AIサービスに送る指示文。
    """
    lines = [
        "Analyze these whiteboard images.",
        mode_instruction(mode),
        language_instruction(language),
    ]
    if refinement and refinement.strip():
        lines.append(f"IMPORTANT REFINEMENT: {refinement.strip()}")
    lines.extend([
        "",
        "Tasks:",
        "1. Transcribe what you see.",
        "2. Explain the logic in simple terms (Student-friendly, use Markdown).",
        "3. Generate WORKING CODE (even if it's a diagram, implement the logic).",
        "4. Generate a MERMAID DIAGRAM (if applicable).",
        "5. Create {}-{} high-quality Flashcards.".format(*FLASHCARD_COUNT_RANGE),
        "6. Fill all schema fields.",
    ])
    return "\n".join(lines)


def _system_instruction(text: str) -> Dict[str, Any]:
    return {"parts": [{"text": text}]}


def _json_generation_config(schema: Dict[str, Any], thinking_budget: Optional[int] = None) -> Dict[str, Any]:
    config: Dict[str, Any] = {
        "responseMimeType": "application/json",
        "responseSchema": schema,
    }
    if thinking_budget:
        config["thinkingConfig"] = {"thinkingBudget": thinking_budget}
    return config


def build_analysis_request(
    images: Sequence[ImageAsset],
    language: ProgrammingLanguage,
    mode: OutputMode,
    refinement: Optional[str] = None,
    thinking_budget: Optional[int] = None,
) -> Dict[str, Any]:
    """解析リクエストのボディを組み立てる。画像パートは指示文より前に、入力順で並ぶ。"""
    parts: List[Dict[str, Any]] = [image.inline_data() for image in images]
    parts.append({"text": build_analysis_prompt(language, mode, refinement)})
    return {
        "contents": [{"role": "user", "parts": parts}],
        "systemInstruction": _system_instruction(ANALYSIS_SYSTEM_INSTRUCTION),
        "generationConfig": _json_generation_config(ANALYSIS_SCHEMA, thinking_budget),
    }


def build_quiz_request(context_text: str) -> Dict[str, Any]:
    """クイズ生成リクエストのボディを組み立てる。コンテキストはQUIZ_CONTEXT_LIMIT文字に切り詰める。"""
    prompt = (
        f"Based on the following content, generate {QUIZ_QUESTION_COUNT} multiple-choice "
        "questions to test understanding.\n"
        "Content:\n"
        f'"""{truncate_context(context_text, QUIZ_CONTEXT_LIMIT)}"""'
    )
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "systemInstruction": _system_instruction(QUIZ_SYSTEM_INSTRUCTION),
        "generationConfig": _json_generation_config(QUIZ_SCHEMA),
    }


def build_chat_system_instruction(context: str) -> str:
    return (
        "You are BoardToCode Copilot.\n"
        f"Context: {truncate_context(context, CHAT_CONTEXT_LIMIT)}\n"
        "Help the user refine their code, explain concepts, or troubleshoot."
    )


def build_chat_request(
    history: Sequence[ChatMessage],
    new_message: str,
    context: str,
    images: Sequence[ImageAsset] = (),
) -> Dict[str, Any]:
    """フォローアップチャットのリクエストボディを組み立てる。

    これまでのやり取りをrole付きのcontentsとして並べ、最後に今回のユーザーメッセージを置きます。
    画像はshould_attach_imagesがTrueの場合のみ最後のメッセージに添付されます。
    """
    contents = [message.to_content() for message in history]
    last_parts: List[Dict[str, Any]] = [{"text": new_message}]
    if should_attach_images(new_message):
        last_parts.extend(image.inline_data() for image in images)
    contents.append({"role": "user", "parts": last_parts})
    return {
        "contents": contents,
        "systemInstruction": _system_instruction(build_chat_system_instruction(context)),
    }


def quick_action_message(action: str) -> str:
    """クイックアクションをチャットに送信するメッセージに変換する。"""
    return f"Please {action}."
