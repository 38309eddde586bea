# services/flashcard_service.py
import logging
import time
import uuid
from typing import TYPE_CHECKING, Iterable, List, Optional

from pydantic import ValidationError

from .base_service import BaseService
from models.analysis_models import Flashcard
from models.history_models import SavedFlashcard
from utils.constants import FLASHCARDS_STORAGE_KEY

if TYPE_CHECKING:
    from .storage_service import StorageService

logger = logging.getLogger(__name__)


class FlashcardService(BaseService[List[SavedFlashcard]]):
    """保存済みの単語帳カード（デッキ）を管理するサービスクラス。

    カードの追加、削除、全消去を提供します。カードは (term, definition, deck_name)
    の組で重複が判定され、明示的に消去されるまで保持されます。
    """

    def __init__(
        self,
        storage_service: Optional['StorageService'] = None,
        cards: Optional[List[SavedFlashcard]] = None,
    ) -> None:
        super().__init__(storage_service=storage_service)
        if cards is None:
            cards = self.load_data(FLASHCARDS_STORAGE_KEY) or []
        self.cards: List[SavedFlashcard] = list(cards)

    def save_flashcards(self, cards: Iterable[Flashcard], deck_name: str) -> List[SavedFlashcard]:
        """カードをデッキに追加する。

        既に同じ (term, definition, deck_name) のカードが保存されている場合は追加しません。
        追加後、保存済みの全カードを永続化します。

        Args:
            cards (Iterable[Flashcard]): 追加候補のカード。
            deck_name (str): 保存先のデッキ名。

        Returns:
            List[SavedFlashcard]: 実際に追加されたカード。
        """
        existing = {card.identity() for card in self.cards}
        added: List[SavedFlashcard] = []
        for card in cards:
            key = (card.term, card.definition, deck_name)
            if key in existing:
                continue
            saved = SavedFlashcard(
                term=card.term,
                definition=card.definition,
                id=uuid.uuid4().hex[:9],
                deck_name=deck_name,
                date_added=int(time.time() * 1000),
            )
            self.cards.append(saved)
            existing.add(key)
            added.append(saved)

        self.save_data(self.cards)
        return added

    def delete_flashcard(self, card_id: str) -> bool:
        """指定されたIDのカードを削除する。

        Returns:
            bool: 削除に成功した場合はTrue、該当IDのカードが見つからなかった場合はFalse。
        """
        initial_len = len(self.cards)
        self.cards = [c for c in self.cards if c.id != card_id]
        if len(self.cards) < initial_len:
            self.save_data(self.cards)
            return True
        return False

    def clear(self) -> None:
        self.cards = []
        self.save_data(self.cards)

    def deck_names(self) -> List[str]:
        """保存済みカードのデッキ名を、最初に追加された順で重複なく返す。"""
        return list(dict.fromkeys(card.deck_name for card in self.cards))

    def load_data(self, identifier: str) -> Optional[List[SavedFlashcard]]:
        """ストレージからカードを読み込む。形式が不正な場合は存在しないものとして扱う。"""
        if not self.storage_service:
            return None
        data = self.storage_service.load_json(identifier)
        if data is None:
            return None
        if not isinstance(data, list):
            logger.warning("単語帳データの形式が不正なため無視します: %s", identifier)
            return None
        try:
            return [SavedFlashcard.model_validate(entry) for entry in data]
        except ValidationError as e:
            logger.warning("単語帳データのデシリアライズに失敗したため無視します: %s", e)
            return None

    def save_data(self, data: List[SavedFlashcard]) -> bool:
        if not self.storage_service:
            return False
        return self.storage_service.save_json(FLASHCARDS_STORAGE_KEY, [card.to_dict() for card in data])
