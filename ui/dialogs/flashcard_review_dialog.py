# ui/dialogs/flashcard_review_dialog.py
"""
保存済みの単語帳カードを復習するためのダイアログウィンドウを提供します。

このモジュールには、カードを1枚ずつ表示して表裏をめくり、前後に移動しながら
デッキ全体を復習する FlashcardReviewDialog クラスが含まれています。
"""
from typing import List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QProgressBar, QPushButton, QVBoxLayout, QWidget
)

from models.history_models import SavedFlashcard
from services.review_service import ReviewService
from ui.components import ClickableLabel


class FlashcardReviewDialog(QDialog):
    """
    単語帳の復習を行うモーダルダイアログ。

    カードをクリックするか「Flip」を押すと表裏が切り替わります。
    最後のカードの後は完了画面を表示し、最初からやり直すことができます。
    デッキが空の場合はその旨だけを表示します。
    """
    def __init__(self, parent: Optional[QWidget], cards: List[SavedFlashcard]) -> None:
        """
        FlashcardReviewDialogのコンストラクタ。

        Args:
            parent (Optional[QWidget]): 親ウィジェット。通常はMainWindow。
            cards (List[SavedFlashcard]): 復習するカード。
        """
        super().__init__(parent)
        self.setWindowTitle("Mastery Review")
        self.setModal(True)
        self.setMinimumSize(520, 380)

        self.review = ReviewService(cards)

        # UIコンポーネントの型ヒント
        self.progress_label: QLabel
        self.progress_bar: QProgressBar
        self.deck_label: QLabel
        self.card_label: ClickableLabel
        self.prev_button: QPushButton
        self.flip_button: QPushButton
        self.next_button: QPushButton
        self.restart_button: QPushButton

        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self.progress_label = QLabel()
        self.deck_label = QLabel()
        header.addWidget(self.progress_label)
        header.addStretch()
        header.addWidget(self.deck_label)
        layout.addLayout(header)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.card_label = ClickableLabel()
        self.card_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.card_label.setWordWrap(True)
        self.card_label.setMinimumHeight(220)
        self.card_label.setStyleSheet("font-size: 16pt; border: 1px solid #999; border-radius: 12px; padding: 16px;")
        layout.addWidget(self.card_label, 1)

        buttons = QHBoxLayout()
        self.prev_button = QPushButton("Previous")
        self.flip_button = QPushButton("Flip")
        self.next_button = QPushButton("Next")
        self.next_button.setObjectName("PrimaryButton")
        self.restart_button = QPushButton("Review Again")
        close_button = QPushButton("Close")
        for button in (self.prev_button, self.flip_button, self.next_button, self.restart_button):
            buttons.addWidget(button)
        buttons.addStretch()
        buttons.addWidget(close_button)
        layout.addLayout(buttons)

        self.card_label.clicked.connect(self.on_flip)
        self.flip_button.clicked.connect(self.on_flip)
        self.prev_button.clicked.connect(self.on_previous)
        self.next_button.clicked.connect(self.on_next)
        self.restart_button.clicked.connect(self.on_restart)
        close_button.clicked.connect(self.accept)

        self.refresh()

    def on_flip(self) -> None:
        self.review.flip()
        self.refresh()

    def on_previous(self) -> None:
        self.review.previous()
        self.refresh()

    def on_next(self) -> None:
        self.review.next()
        self.refresh()

    def on_restart(self) -> None:
        self.review.restart()
        self.refresh()

    def refresh(self) -> None:
        """現在の復習状態に合わせて表示を更新する。"""
        review = self.review
        in_progress = not review.is_empty and not review.is_finished
        self.prev_button.setVisible(in_progress)
        self.flip_button.setVisible(in_progress)
        self.next_button.setVisible(in_progress)
        self.restart_button.setVisible(review.is_finished)
        self.prev_button.setEnabled(review.can_go_back())
        self.progress_label.setText(review.progress_label())
        self.progress_bar.setValue(int(review.progress * 100))

        if review.is_empty:
            self.deck_label.setText("")
            self.card_label.setText("Your deck is empty.\nSave cards from a result's Study Deck tab.")
            return
        if review.is_finished:
            self.deck_label.setText("")
            self.progress_bar.setValue(100)
            self.card_label.setText(f"Review complete!\nYou went through {len(review.cards)} cards.")
            return

        card = review.current_card
        self.deck_label.setText(card.deck_name)
        self.card_label.setText(card.definition if review.is_flipped else card.term)
