# ui/screens/result_screen.py
"""
解析結果画面のUIコンポーネントを提供します。

ヘッダー（タイトル、Archive、Copy）、5つのタブ（Walkthrough / Source Code /
Architecture / Check Point / Study Deck）、再生成用の指示入力欄、
およびチャットへのクイックアクションから構成されます。
"""
from typing import List, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QHBoxLayout, QLabel, QLineEdit, QPlainTextEdit, QPushButton, QTabWidget, QTextBrowser,
    QVBoxLayout, QWidget
)

from models.analysis_models import AnalysisResult
from ui.widgets import FlashcardPanel, QuizPanel
from utils.constants import QUICK_ACTIONS
from utils.diagram_utils import clean_chart_code
from utils.prompt_utils import quick_action_message


def _bullet_list(items: Optional[List[str]]) -> str:
    return "\n".join(f"- {item}" for item in items or [])


def walkthrough_markdown(result: AnalysisResult) -> str:
    """解説タブに表示するMarkdownを組み立てる。補足情報は存在する項目のみ含める。"""
    sections = [result.explanation]
    info = result.secondary_info
    if info.complexity:
        sections.append(f"### Complexity\n\n{info.complexity}")
    if info.edge_cases:
        sections.append(f"### Edge Cases\n\n{_bullet_list(info.edge_cases)}")
    if info.related_concepts:
        sections.append(f"### Related Concepts\n\n{_bullet_list(info.related_concepts)}")
    if result.transcription:
        sections.append(f"### Transcription\n\n{result.transcription}")
    return "\n\n".join(sections)


class ResultScreen(QWidget):
    """
    解析結果を表示するメインウィジェット。

    Signals:
        archive_requested (pyqtSignal): 「Archive」が押されたときに送信されます。
        copy_requested (pyqtSignal): 「Copy」が押されたときに送信されます。
        regenerate_requested (pyqtSignal): 再生成が要求されたときに追加の指示（str）を送信します。
        chat_message_requested (pyqtSignal): クイックアクションのメッセージ（str）を送信します。
    """
    archive_requested = pyqtSignal()
    copy_requested = pyqtSignal()
    regenerate_requested = pyqtSignal(str)
    chat_message_requested = pyqtSignal(str)

    TAB_WALKTHROUGH = 0
    TAB_CODE = 1
    TAB_DIAGRAM = 2
    TAB_QUIZ = 3
    TAB_DECK = 4

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.result: Optional[AnalysisResult] = None

        # --- UI要素の型定義 ---
        self.title_label: QLabel
        self.meta_label: QLabel
        self.archive_button: QPushButton
        self.copy_button: QPushButton
        self.tabs: QTabWidget
        self.walkthrough_view: QTextBrowser
        self.code_view: QPlainTextEdit
        self.diagram_view: QPlainTextEdit
        self.quiz_panel: QuizPanel
        self.flashcard_panel: FlashcardPanel
        self.refine_edit: QLineEdit
        self.regenerate_button: QPushButton

        self.setup_ui()
        self.setup_connections()

    def setup_ui(self) -> None:
        """UIの構築とレイアウト設定を行う。"""
        layout = QVBoxLayout(self)
        layout.addLayout(self._create_header_layout())

        self.tabs = QTabWidget()
        self.walkthrough_view = QTextBrowser()
        self.walkthrough_view.setOpenExternalLinks(True)
        self.code_view = self._create_source_view()
        self.diagram_view = self._create_source_view()
        self.quiz_panel = QuizPanel()
        self.flashcard_panel = FlashcardPanel()
        self.tabs.addTab(self.walkthrough_view, "Walkthrough")
        self.tabs.addTab(self.code_view, "Source Code")
        self.tabs.addTab(self.diagram_view, "Architecture")
        self.tabs.addTab(self.quiz_panel, "Check Point")
        self.tabs.addTab(self.flashcard_panel, "Study Deck")
        layout.addWidget(self.tabs, 1)

        self.quick_action_buttons: List[QPushButton] = []
        actions_layout = QHBoxLayout()
        for action in QUICK_ACTIONS:
            button = QPushButton(action.capitalize())
            button.clicked.connect(
                lambda _checked=False, a=action: self.chat_message_requested.emit(quick_action_message(a))
            )
            self.quick_action_buttons.append(button)
            actions_layout.addWidget(button)
        actions_layout.addStretch()
        layout.addLayout(actions_layout)

        refine_layout = QHBoxLayout()
        self.refine_edit = QLineEdit()
        self.refine_edit.setPlaceholderText("Refine the result, e.g. \"use recursion instead\"")
        self.regenerate_button = QPushButton("Regenerate")
        refine_layout.addWidget(self.refine_edit, 1)
        refine_layout.addWidget(self.regenerate_button)
        layout.addLayout(refine_layout)

    def _create_header_layout(self) -> QHBoxLayout:
        header = QHBoxLayout()
        title_box = QVBoxLayout()
        self.title_label = QLabel()
        self.title_label.setStyleSheet("font-size: 18pt; font-weight: bold;")
        self.title_label.setWordWrap(True)
        self.meta_label = QLabel()
        title_box.addWidget(self.title_label)
        title_box.addWidget(self.meta_label)
        header.addLayout(title_box, 1)

        self.archive_button = QPushButton("Archive")
        self.copy_button = QPushButton("Copy")
        header.addWidget(self.archive_button)
        header.addWidget(self.copy_button)
        return header

    @staticmethod
    def _create_source_view() -> QPlainTextEdit:
        view = QPlainTextEdit()
        view.setReadOnly(True)
        font = QFont("Courier New")
        font.setStyleHint(QFont.StyleHint.Monospace)
        view.setFont(font)
        return view

    def setup_connections(self) -> None:
        """シグナルとスロットを接続する。"""
        self.archive_button.clicked.connect(self.archive_requested)
        self.copy_button.clicked.connect(self.copy_requested)
        self.regenerate_button.clicked.connect(self._on_regenerate_clicked)
        self.refine_edit.returnPressed.connect(self._on_regenerate_clicked)

    def set_result(self, result: Optional[AnalysisResult]) -> None:
        """表示する解析結果を設定する。Noneの場合は表示をクリアする。"""
        self.result = result
        if result is None:
            self.title_label.setText("")
            self.meta_label.setText("")
            self.walkthrough_view.clear()
            self.code_view.clear()
            self.diagram_view.clear()
            self.quiz_panel.set_quiz(None)
            self.flashcard_panel.set_cards(None)
            return

        self.title_label.setText(result.title)
        self.meta_label.setText(f"{result.detected_type} · {result.suggested_language}")
        self.walkthrough_view.setMarkdown(walkthrough_markdown(result))
        self.code_view.setPlainText(result.code or "No source code was generated.")
        if result.diagram:
            self.diagram_view.setPlainText(clean_chart_code(result.diagram))
        else:
            self.diagram_view.setPlainText("No chart generated.")
        self.quiz_panel.set_quiz(result.quiz)
        self.flashcard_panel.set_cards(result.flashcards)
        self.refine_edit.clear()

    def set_quiz(self, result: AnalysisResult) -> None:
        """クイズだけを更新する。他のタブの状態は保持する。"""
        self.result = result
        self.quiz_panel.set_quiz(result.quiz)

    def set_processing(self, processing: bool) -> None:
        self.regenerate_button.setEnabled(not processing)
        self.regenerate_button.setText("Regenerating..." if processing else "Regenerate")

    def set_chat_sending(self, sending: bool) -> None:
        for button in self.quick_action_buttons:
            button.setEnabled(not sending)

    def is_diagram_tab(self) -> bool:
        return self.tabs.currentIndex() == self.TAB_DIAGRAM

    def _on_regenerate_clicked(self) -> None:
        self.regenerate_requested.emit(self.refine_edit.text().strip())
