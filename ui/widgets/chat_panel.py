# ui/widgets/chat_panel.py
from typing import List, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout, QLabel, QLineEdit, QPushButton, QTextBrowser, QVBoxLayout, QWidget
)

from models.chat_models import ChatMessage
from utils.constants import CHAT_SUGGESTIONS


class ChatPanel(QWidget):
    """
    フォローアップチャット（Copilot）のパネル。

    送信中は入力欄と送信ボタンが無効化され、同じ入力からの二重送信を防ぎます。

    Signals:
        message_submitted (pyqtSignal): ユーザーがメッセージを送信したときに本文（str）を送信します。
    """
    message_submitted = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(360)
        self._sending: bool = False
        self._messages: List[ChatMessage] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        header = QLabel("BoardVision Copilot")
        header.setStyleSheet("font-weight: bold; font-size: 13pt;")
        layout.addWidget(header)

        self.transcript = QTextBrowser()
        self.transcript.setOpenExternalLinks(True)
        layout.addWidget(self.transcript, 1)

        # 会話が空のときだけ表示する提案ボタン
        self.suggestion_widget = QWidget()
        suggestion_layout = QVBoxLayout(self.suggestion_widget)
        suggestion_layout.setContentsMargins(0, 0, 0, 0)
        suggestion_layout.addWidget(QLabel(
            "Ask questions about the logic, request refactoring, or just say hello."
        ))
        for suggestion in CHAT_SUGGESTIONS:
            button = QPushButton(suggestion)
            button.clicked.connect(lambda _checked=False, text=suggestion: self._submit(text))
            suggestion_layout.addWidget(button)
        layout.addWidget(self.suggestion_widget)

        input_layout = QHBoxLayout()
        self.input_edit = QLineEdit()
        self.input_edit.setPlaceholderText("Type a message...")
        self.send_button = QPushButton("Send")
        self.send_button.setObjectName("PrimaryButton")
        input_layout.addWidget(self.input_edit, 1)
        input_layout.addWidget(self.send_button)
        layout.addLayout(input_layout)

        self.send_button.clicked.connect(self._on_send_clicked)
        self.input_edit.returnPressed.connect(self._on_send_clicked)
        self.input_edit.textChanged.connect(self._refresh_controls)

        self.set_messages([])

    def set_messages(self, messages: List[ChatMessage]) -> None:
        """チャット履歴の表示を更新する。"""
        self._messages = list(messages)
        blocks = []
        for message in self._messages:
            speaker = "**You**" if message.role == "user" else "**Copilot**"
            blocks.append(f"{speaker}\n\n{message.text}")
        if self._sending:
            blocks.append("**Copilot**\n\n_..._")
        self.transcript.setMarkdown("\n\n---\n\n".join(blocks))
        scrollbar = self.transcript.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())
        self.suggestion_widget.setVisible(not self._messages)

    def set_sending(self, sending: bool) -> None:
        """送信中の状態を切り替える。"""
        self._sending = sending
        self.input_edit.setEnabled(not sending)
        self.suggestion_widget.setEnabled(not sending)
        self._refresh_controls()
        self.set_messages(self._messages)

    def _refresh_controls(self) -> None:
        self.send_button.setEnabled(not self._sending and bool(self.input_edit.text().strip()))

    def _on_send_clicked(self) -> None:
        text = self.input_edit.text()
        if self._submit(text):
            self.input_edit.clear()

    def _submit(self, text: str) -> bool:
        if self._sending or not text.strip():
            return False
        self.message_submitted.emit(text)
        return True
