# services/review_service.py
from typing import List, Optional, Sequence

from models.history_models import SavedFlashcard


class ReviewService:
    """保存済みカードを1枚ずつめくって復習する流れを管理するクラス。

    表示中のカード位置、表裏の状態、完了状態を保持します。
    最後のカードで「次へ」を選ぶと完了状態になり、restartで最初から復習し直せます。
    """

    def __init__(self, cards: Sequence[SavedFlashcard]) -> None:
        self.cards: List[SavedFlashcard] = list(cards)
        self.current_index: int = 0
        self.is_flipped: bool = False
        self.is_finished: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.cards

    @property
    def current_card(self) -> Optional[SavedFlashcard]:
        if self.is_empty or self.is_finished:
            return None
        return self.cards[self.current_index]

    @property
    def progress(self) -> float:
        """進捗率（0.0〜1.0）。表示中のカードを含めて数える。"""
        if self.is_empty:
            return 0.0
        return (self.current_index + 1) / len(self.cards)

    def progress_label(self) -> str:
        if self.is_empty:
            return "0 / 0"
        return f"{self.current_index + 1} / {len(self.cards)}"

    def can_go_back(self) -> bool:
        return self.current_index > 0 and not self.is_finished

    def flip(self) -> None:
        if not self.is_empty and not self.is_finished:
            self.is_flipped = not self.is_flipped

    def next(self) -> None:
        """次のカードへ進む。最後のカードの場合は完了状態にする。"""
        if self.is_empty:
            return
        if self.current_index < len(self.cards) - 1:
            self.current_index += 1
            self.is_flipped = False
        else:
            self.is_finished = True

    def previous(self) -> None:
        if self.can_go_back():
            self.current_index -= 1
            self.is_flipped = False

    def restart(self) -> None:
        self.current_index = 0
        self.is_flipped = False
        self.is_finished = False
