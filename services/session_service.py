# services/session_service.py
"""
アプリケーションのセッション状態を一元管理するストアを提供します。

- load_persisted_state: 起動時に一度だけ永続ストレージから状態を読み込む。
- SessionService: 現在のセッションの揮発的な状態（保留中のアップロード、現在の解析結果、
  チャット履歴、処理中フラグ）と、永続化される履歴・単語帳・テーマを保持する。

状態の変更はすべてGUIスレッド上で行われる前提で、ロックは使用しません。
AI呼び出しは begin_* で開始し、finish_* / fail_* で完了させます。
同種のリクエストが処理中の間、begin_* は None を返して新しいリクエストを拒否します。
"""
import json
import logging
import time
import uuid
from typing import Iterable, List, Optional

from models.analysis_models import AnalysisResult, Flashcard, OutputMode, ProgrammingLanguage, QuizQuestion
from models.chat_models import ChatMessage, ChatRole
from models.history_models import HistoryItem, SavedFlashcard, Theme
from models.image_models import ImageAsset
from models.session_models import AnalysisRequest, ChatRequest, PersistedState, QuizRequest
from services.flashcard_service import FlashcardService
from services.history_service import HistoryService
from services.storage_service import StorageService
from utils.constants import FLASHCARDS_STORAGE_KEY, HISTORY_STORAGE_KEY, THEME_STORAGE_KEY
from utils.image_utils import asset_from_data_url, remove_asset

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def load_theme(storage: StorageService) -> Theme:
    """保存されているテーマを読み込む。未保存または不正な値の場合はLIGHTを返す。"""
    raw = storage.get_item(THEME_STORAGE_KEY)
    if raw is None:
        return Theme.LIGHT
    try:
        value = json.loads(raw)
    except ValueError:
        # JSON化されていない生の文字列で保存されている場合
        value = raw.strip()
    try:
        return Theme(value)
    except ValueError:
        logger.warning("保存されているテーマが不正なため無視します: %r", value)
        return Theme.LIGHT


def load_persisted_state(storage: StorageService) -> PersistedState:
    """永続ストレージからアプリケーション状態を構築する。

    キーが存在しない場合は空のコレクション（テーマはLIGHT）として扱います。
    保存形式が不正・非互換の場合も存在しないものとして扱い、例外は送出しません。

    Args:
        storage (StorageService): 読み込み元のストレージ。

    Returns:
        PersistedState: 読み込まれた状態。
    """
    history = HistoryService(storage, items=[]).load_data(HISTORY_STORAGE_KEY) or []
    cards = FlashcardService(storage, cards=[]).load_data(FLASHCARDS_STORAGE_KEY) or []
    return PersistedState(theme=load_theme(storage), history=history, saved_flashcards=cards)


class SessionService:
    """現在のセッションの状態と、永続化されるコレクションを保持するストア。

    Attributes:
        storage (StorageService): 永続ストレージ。
        history (HistoryService): 解析履歴。
        flashcards (FlashcardService): 保存済みの単語帳カード。
        theme (Theme): 現在のテーマ。
        uploads (List[ImageAsset]): 保留中のアップロード画像。
        result (Optional[AnalysisResult]): 現在表示中の解析結果。
        chat_messages (List[ChatMessage]): フォローアップチャットの履歴。
        language (ProgrammingLanguage): 選択中の言語。
        mode (OutputMode): 選択中の出力モード。
        is_processing (bool): 解析リクエストが処理中かどうか。
        is_generating_quiz (bool): クイズ生成リクエストが処理中かどうか。
        is_chat_sending (bool): チャット送信が処理中かどうか。
        generation (int): セッション世代。新しいセッションや履歴の選択で進み、
            それ以前に開始したクイズ・チャットの応答は破棄されます。
    """

    def __init__(self, storage: StorageService, state: Optional[PersistedState] = None) -> None:
        if state is None:
            state = load_persisted_state(storage)
        self.storage = storage
        self.history = HistoryService(storage, items=state.history)
        self.flashcards = FlashcardService(storage, cards=state.saved_flashcards)
        self.theme: Theme = state.theme

        self.uploads: List[ImageAsset] = []
        self.result: Optional[AnalysisResult] = None
        self.chat_messages: List[ChatMessage] = []
        self.language: ProgrammingLanguage = ProgrammingLanguage.AUTO
        self.mode: OutputMode = OutputMode.AUTO

        self.is_processing = False
        self.is_generating_quiz = False
        self.is_chat_sending = False
        self.generation = 0

    # --- アップロード ---

    def add_uploads(self, assets: Iterable[ImageAsset]) -> None:
        """読み込み済みの画像バッチを保留中のアップロードに追加する。"""
        self.uploads = [*self.uploads, *assets]

    def remove_upload(self, asset_id: str) -> None:
        self.uploads = remove_asset(self.uploads, asset_id)

    def new_session(self) -> None:
        """アップロード、解析結果、チャットをクリアして新しいセッションを開始する。"""
        self.uploads = []
        self.result = None
        self._advance_generation()

    def _advance_generation(self) -> None:
        # 処理中の解析は完了まで待つが、クイズとチャットの応答は古い世代のものとして扱う
        self.generation += 1
        self.chat_messages = []
        self.is_generating_quiz = False

    # --- 解析 ---

    def begin_analysis(self, refinement: Optional[str] = None) -> Optional[AnalysisRequest]:
        """解析を開始し、ワーカーに渡すリクエストを返す。

        アップロードがない場合、または解析が処理中の場合はNoneを返します。
        """
        if not self.uploads or self.is_processing:
            return None
        self.is_processing = True
        logger.debug("解析を開始します: %d枚, refinement=%r", len(self.uploads), refinement)
        return AnalysisRequest(
            images=tuple(self.uploads),
            language=self.language,
            mode=self.mode,
            refinement=refinement or None,
        )

    def finish_analysis(self, result: AnalysisResult) -> HistoryItem:
        """解析結果を現在の結果として設定し、履歴に登録する。"""
        self.is_processing = False
        self.result = result
        return self.commit_result(result)

    def fail_analysis(self) -> None:
        """解析の失敗を記録する。結果・履歴・アップロードは変更しない。"""
        self.is_processing = False

    def commit_result(self, result: AnalysisResult) -> HistoryItem:
        """現在のアップロード・選択状態とともに解析結果を履歴に登録する。"""
        thumbnail = self.uploads[0].preview_ref if self.uploads else ""
        return self.history.commit_result(result, thumbnail, self.language, self.mode)

    # --- クイズ ---

    def begin_quiz(self) -> Optional[QuizRequest]:
        """クイズ生成を開始し、現在の結果の解説テキストを持つリクエストを返す。"""
        if self.result is None or self.is_generating_quiz:
            return None
        self.is_generating_quiz = True
        return QuizRequest(context=self.result.explanation, generation=self.generation)

    def finish_quiz(self, questions: List[QuizQuestion], generation: int) -> Optional[AnalysisResult]:
        """生成されたクイズで現在の結果を補強し、履歴を更新する。

        クイズの開始後にセッションが切り替わっている場合は、別の結果に付けないよう破棄して
        Noneを返します。

        Args:
            questions (List[QuizQuestion]): 生成されたクイズ。
            generation (int): QuizRequestの世代。

        Returns:
            Optional[AnalysisResult]: クイズを付けた結果。破棄した場合はNone。
        """
        if generation != self.generation or self.result is None:
            logger.debug("古いセッションのクイズを破棄します: generation=%d, current=%d",
                         generation, self.generation)
            return None
        self.is_generating_quiz = False
        self.result = self.result.with_quiz(questions)
        self.commit_result(self.result)
        return self.result

    def fail_quiz(self, generation: int) -> None:
        if generation == self.generation:
            self.is_generating_quiz = False
    # --- チャット ---

    def _append_message(self, role: ChatRole, text: str) -> ChatMessage:
        message = ChatMessage(id=uuid.uuid4().hex, role=role, text=text, timestamp=_now_ms())
        self.chat_messages.append(message)
        return message

    def begin_chat_send(self, text: str) -> Optional[ChatRequest]:
        """ユーザーのメッセージを追加し、ワーカーに渡すリクエストを返す。

        解析結果がない場合、メッセージが空の場合、または前回の送信が処理中の場合は
        Noneを返し、何も追加しません。
        """
        if self.result is None or self.is_chat_sending or not text or not text.strip():
            return None
        self.is_chat_sending = True
        history = tuple(self.chat_messages)
        self._append_message("user", text)
        return ChatRequest(
            history=history,
            message=text,
            context=self.result.chat_context(),
            images=tuple(self.uploads),
            generation=self.generation,
        )

    def finish_chat_send(self, reply: str, generation: int) -> Optional[ChatMessage]:
        """AIの応答をチャット履歴に追加する。

        送信後にセッションが切り替わっている場合は応答を追加せず、送信中フラグだけを解除します。
        """
        self.is_chat_sending = False
        if generation != self.generation:
            logger.debug("古いセッションのチャット応答を破棄します: generation=%d, current=%d",
                         generation, self.generation)
            return None
        return self._append_message("model", reply)
    # --- 単語帳・履歴・テーマ ---

    def save_flashcards(self, cards: Iterable[Flashcard], deck_name: Optional[str] = None) -> List[SavedFlashcard]:
        """カードをデッキに保存する。デッキ名の既定値は現在の解析結果のタイトル。"""
        if deck_name is None:
            if self.result is None:
                return []
            deck_name = self.result.title
        return self.flashcards.save_flashcards(cards, deck_name)

    def delete_flashcard(self, card_id: str) -> bool:
        return self.flashcards.delete_flashcard(card_id)

    def clear_history(self) -> None:
        self.history.clear_history()

    def select_history(self, item: HistoryItem) -> None:
        """履歴の項目を現在の結果として開く。

        サムネイルから画像を復元して保留中のアップロードとし、再生成できるようにします。
        チャットは新しい結果に合わせてクリアされます。
        """
        self.result = item.result
        self.language = item.language
        self.mode = item.mode
        self._advance_generation()
        asset = asset_from_data_url(item.thumbnail)
        self.uploads = [asset] if asset else []

    def set_theme(self, theme: Theme) -> None:
        self.theme = Theme(theme)
        self.storage.save_json(THEME_STORAGE_KEY, self.theme.value)

    def toggle_theme(self) -> Theme:
        self.set_theme(self.theme.toggled())
        return self.theme

    @property
    def saved_flashcards(self) -> List[SavedFlashcard]:
        return self.flashcards.cards

    @property
    def history_items(self) -> List[HistoryItem]:
        return self.history.items
