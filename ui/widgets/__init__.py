from .sidebar import Sidebar
from .chat_panel import ChatPanel
from .quiz_panel import QuizPanel
from .flashcard_panel import FlashcardPanel

__all__ = [
    "Sidebar",
    "ChatPanel",
    "QuizPanel",
    "FlashcardPanel",
]
