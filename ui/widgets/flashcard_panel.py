# ui/widgets/flashcard_panel.py
from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QPushButton, QVBoxLayout, QWidget

from models.analysis_models import Flashcard


class FlashcardPanel(QWidget):
    """
    「Study Deck」タブ。解析結果に含まれる単語帳カードを一覧表示し、デッキへの保存を要求する。

    各カードはチェックボックスで選択でき、初期状態ではすべて選択されています。

    Signals:
        save_requested (pyqtSignal): 「Save to Deck」が押されたときに選択中のカードのリストを送信します。
    """
    save_requested = pyqtSignal(list)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._cards: List[Flashcard] = []

        layout = QVBoxLayout(self)
        self.card_list = QListWidget()
        self.card_list.setWordWrap(True)
        layout.addWidget(self.card_list, 1)

        self.empty_label = QLabel("No flashcards were generated for this board.")
        layout.addWidget(self.empty_label)

        self.status_label = QLabel()
        layout.addWidget(self.status_label)

        self.save_button = QPushButton("Save to Deck")
        self.save_button.setObjectName("PrimaryButton")
        layout.addWidget(self.save_button)

        self.save_button.clicked.connect(self._on_save_clicked)
        self.card_list.itemChanged.connect(self._refresh_controls)

        self.set_cards([])

    def set_cards(self, cards: Optional[List[Flashcard]]) -> None:
        self._cards = list(cards or [])
        self.card_list.blockSignals(True)
        self.card_list.clear()
        for card in self._cards:
            entry = QListWidgetItem(f"{card.term}\n    {card.definition}")
            entry.setFlags(entry.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            entry.setCheckState(Qt.CheckState.Checked)
            self.card_list.addItem(entry)
        self.card_list.blockSignals(False)
        has_cards = bool(self._cards)
        self.card_list.setVisible(has_cards)
        self.empty_label.setVisible(not has_cards)
        self.status_label.setText("")
        self._refresh_controls()

    def selected_cards(self) -> List[Flashcard]:
        """チェックされているカードを表示順で返す。"""
        selected = []
        for row, card in enumerate(self._cards):
            if self.card_list.item(row).checkState() == Qt.CheckState.Checked:
                selected.append(card)
        return selected

    def show_saved(self, added_count: int) -> None:
        """保存結果を表示する。重複していたカードは追加されない。"""
        if added_count:
            self.status_label.setText(f"{added_count} cards added to your deck.")
        else:
            self.status_label.setText("All selected cards are already in your deck.")

    def _refresh_controls(self, *_args) -> None:
        self.save_button.setEnabled(bool(self.selected_cards()))

    def _on_save_clicked(self) -> None:
        cards = self.selected_cards()
        if cards:
            self.save_requested.emit(cards)
