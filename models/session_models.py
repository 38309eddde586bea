# models/session_models.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.analysis_models import OutputMode, ProgrammingLanguage
from models.chat_models import ChatMessage
from models.history_models import HistoryItem, SavedFlashcard, Theme
from models.image_models import ImageAsset


@dataclass
class PersistedState:
    """起動時に永続ストレージから一度だけ読み込まれるアプリケーション状態。

    Attributes:
        theme (Theme): 配色テーマ。
        history (List[HistoryItem]): 解析履歴（新しい順）。
        saved_flashcards (List[SavedFlashcard]): 保存済みの単語帳カード。
    """
    theme: Theme = Theme.LIGHT
    history: List[HistoryItem] = field(default_factory=list)
    saved_flashcards: List[SavedFlashcard] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisRequest:
    """解析リクエストのスナップショット。ワーカースレッドへ渡される。"""
    images: Tuple[ImageAsset, ...]
    language: ProgrammingLanguage
    mode: OutputMode
    refinement: Optional[str] = None


@dataclass(frozen=True)
class ChatRequest:
    """フォローアップチャット送信のスナップショット。

    Attributes:
        history (Tuple[ChatMessage, ...]): 今回のメッセージより前のやり取り。
        message (str): 今回送信するユーザーのメッセージ。
        context (str): 現在の解析結果から作られたコンテキスト文字列。
        images (Tuple[ImageAsset, ...]): 添付候補の画像。
        generation (int): 送信時点のセッション世代。
    """
    history: Tuple[ChatMessage, ...]
    message: str
    context: str
    images: Tuple[ImageAsset, ...]
    generation: int = 0


@dataclass(frozen=True)
class QuizRequest:
    """クイズ生成リクエストのスナップショット。

    Attributes:
        context (str): クイズの元になる解説テキスト。
        generation (int): 開始時点のセッション世代。
    """
    context: str
    generation: int
