# ui/widgets/sidebar.py
from typing import List, Optional

from PyQt6.QtCore import QSize, Qt, pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import (
    QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QPushButton, QVBoxLayout, QWidget
)

from models.history_models import HistoryItem
from ui.components import pixmap_from_data_url
from utils.constants import APP_NAME, APP_VERSION


class Sidebar(QWidget):
    """
    解析履歴と単語帳デッキを表示するサイドバー。

    Signals:
        history_selected (pyqtSignal): 履歴の項目が選択されたときに HistoryItem を送信します。
        new_analysis_requested (pyqtSignal): 「New Creation」が押されたときに送信されます。
        clear_history_requested (pyqtSignal): 履歴の消去が要求されたときに送信されます。
        review_requested (pyqtSignal): デッキの復習開始が要求されたときに送信されます。
    """
    history_selected = pyqtSignal(object)
    new_analysis_requested = pyqtSignal()
    clear_history_requested = pyqtSignal()
    review_requested = pyqtSignal()

    THUMBNAIL_SIZE = 64

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(260)
        self._items: List[HistoryItem] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        title = QLabel("Curation")
        title.setStyleSheet("font-size: 20pt; font-weight: bold;")
        layout.addWidget(title)

        self.new_button = QPushButton("New Creation")
        layout.addWidget(self.new_button)

        header = QHBoxLayout()
        header.addWidget(QLabel("Archive"))
        header.addStretch()
        self.clear_button = QPushButton("Wipe")
        header.addWidget(self.clear_button)
        layout.addLayout(header)

        self.history_list = QListWidget()
        self.history_list.setIconSize(QSize(self.THUMBNAIL_SIZE, self.THUMBNAIL_SIZE))
        layout.addWidget(self.history_list, 1)

        self.empty_label = QLabel("Empty Archive")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.empty_label)

        deck_header = QLabel("Mastery Deck")
        deck_header.setStyleSheet("font-weight: bold;")
        layout.addWidget(deck_header)
        self.deck_count_label = QLabel()
        layout.addWidget(self.deck_count_label)
        self.review_button = QPushButton("Start Review")
        self.review_button.setObjectName("PrimaryButton")
        layout.addWidget(self.review_button)

        footer = QLabel(f"{APP_NAME} v{APP_VERSION}")
        footer.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(footer)

        self.new_button.clicked.connect(self.new_analysis_requested)
        self.clear_button.clicked.connect(self.clear_history_requested)
        self.review_button.clicked.connect(self.review_requested)
        self.history_list.itemClicked.connect(self._on_item_clicked)

        self.set_history([])
        self.set_deck_count(0)

    def set_history(self, items: List[HistoryItem]) -> None:
        """履歴の一覧を更新する。"""
        self._items = list(items)
        self.history_list.clear()
        for item in self._items:
            entry = QListWidgetItem(item.result.title)
            pixmap = pixmap_from_data_url(item.thumbnail, self.THUMBNAIL_SIZE)
            if not pixmap.isNull():
                entry.setIcon(QIcon(pixmap))
            entry.setData(Qt.ItemDataRole.UserRole, item.id)
            self.history_list.addItem(entry)
        has_items = bool(self._items)
        self.history_list.setVisible(has_items)
        self.empty_label.setVisible(not has_items)
        self.clear_button.setVisible(has_items)

    def set_deck_count(self, count: int) -> None:
        self.deck_count_label.setText(f"{count} cards collected")
        self.review_button.setEnabled(count > 0)

    def set_processing(self, processing: bool) -> None:
        """解析中は新規作成と履歴の選択を無効にする。"""
        self.new_button.setEnabled(not processing)
        self.history_list.setEnabled(not processing)

    def _on_item_clicked(self, entry: QListWidgetItem) -> None:
        item_id = entry.data(Qt.ItemDataRole.UserRole)
        for item in self._items:
            if item.id == item_id:
                self.history_selected.emit(item)
                return
