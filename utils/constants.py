# utils/constants.py
"""アプリケーション全体で共有される定数を定義します。"""

APP_NAME = "BoardVision"
APP_VERSION = "2.5.0"

# --- 永続ストレージのキー ---
THEME_STORAGE_KEY = "boardvision_theme"
HISTORY_STORAGE_KEY = "boardvision_history"
FLASHCARDS_STORAGE_KEY = "boardvision_flashcards"

# 履歴の最大保持件数（新しい順）
MAX_HISTORY_ITEMS = 20

# --- AIサービス ---
DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_THINKING_BUDGET = 32768

# リクエストサイズ上限に収めるための文字数の上限
QUIZ_CONTEXT_LIMIT = 8000
CHAT_CONTEXT_LIMIT = 10000

QUIZ_QUESTION_COUNT = 5
FLASHCARD_COUNT_RANGE = (3, 5)

ANALYSIS_SYSTEM_INSTRUCTION = (
    "You are BoardToCode AI, an elite technical architect. Convert sketches to "
    "high-quality code and architectural diagrams. Always be precise, educational, and clean."
)
QUIZ_SYSTEM_INSTRUCTION = "Create a rigorous but fair quiz based on the provided content."

MODE_INSTRUCTIONS = {
    "auto": "Detect the content type automatically.",
    "code": "Focus on extracting algorithms and generating clean code.",
    "diagram": "Focus on system design. Generate a clear Mermaid diagram and explain the flow.",
    "math": "Solve the math problem step-by-step with LaTeX.",
    "notes": "Summarize the content as study notes.",
}

# チャットのメッセージにこれらの語が含まれる場合のみ、元画像を添付する
IMAGE_REFERENCE_KEYWORDS = ("image", "sketch")

CHAT_ERROR_REPLY = "I encountered an error processing your request."
CHAT_EMPTY_REPLY = "I'm not sure how to respond to that."

CHAT_SUGGESTIONS = ("Explain this better", "Optimize the code", "Check for bugs")

# 解析結果のクイックアクション。"Please <action>." としてチャットに送信される
QUICK_ACTIONS = ("simplify the explanation", "add comments to the code", "suggest test cases")

# --- UIに表示する通知 ---
ANALYSIS_FAILURE_NOTICE = "Analysis engine failure."
QUIZ_FAILURE_NOTICE = "Quiz failed."

# Mermaidの図として認識されるキーワード（小文字）
MERMAID_KEYWORDS = (
    "flowchart", "graph", "sequence", "class", "state", "erdiagram", "gantt", "pie",
)

# クイズの評価しきい値（正答率, 評価）
QUIZ_GRADES = ((0.9, "S"), (0.8, "A"), (0.7, "B"))
QUIZ_DEFAULT_GRADE = "C"
