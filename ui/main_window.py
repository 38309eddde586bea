# ui/main_window.py
from typing import List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QCloseEvent
from PyQt6.QtWidgets import (
    QLabel, QMainWindow, QMessageBox, QSplitter, QStackedWidget, QToolBar
)

from models.analysis_models import Flashcard, OutputMode, ProgrammingLanguage
from models.history_models import HistoryItem, Theme
from services.ai_gateway import AIGateway
from services.session_service import SessionService
from ui.dialogs.flashcard_review_dialog import FlashcardReviewDialog
from ui.handlers.analysis_handler import AnalysisHandler
from ui.handlers.chat_handler import ChatHandler
from ui.handlers.clipboard_handler import ClipboardHandler
from ui.screens.result_screen import ResultScreen
from ui.screens.upload_screen import UploadScreen
from ui.styles import apply_theme
from ui.widgets import ChatPanel, Sidebar
from utils.constants import APP_NAME


class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウ。

    左からサイドバー（履歴・デッキ）、中央の画面（アップロード / 解析結果）、
    右のCopilotチャットを QSplitter で並べます。セッション状態は SessionService が保持し、
    ウィンドウは状態の表示とユーザー操作の受け付けだけを行います。
    """
    UPLOAD_PAGE = 0
    RESULT_PAGE = 1

    def __init__(self, session: SessionService, gateway: AIGateway) -> None:
        """
        MainWindowのコンストラクタ。

        Args:
            session (SessionService): 起動時に読み込まれた状態を持つセッションストア。
            gateway (AIGateway): AIサービスへのゲートウェイ。
        """
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setGeometry(50, 50, 1400, 900)

        self.session: SessionService = session
        self.gateway: AIGateway = gateway

        self.analysis_handler = AnalysisHandler(self)
        self.chat_handler = ChatHandler(self)
        self.clipboard_handler = ClipboardHandler(self)

        # --- UI要素の型定義 ---
        self.sidebar: Sidebar
        self.upload_screen: UploadScreen
        self.result_screen: ResultScreen
        self.chat_panel: ChatPanel
        self.stack: QStackedWidget
        self.main_splitter: QSplitter
        self.copilot_action: QAction
        self.theme_action: QAction

        self.setup_toolbar()
        self.setup_layout()
        self.connect_signals()

        apply_theme(self.session.theme)
        self.refresh_all()
        if not self.gateway.is_configured():
            self.statusBar().showMessage("GEMINI_API_KEY is not set. Analysis requests will fail.")

    def createPopupMenu(self):
        return None

    def setup_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, toolbar)

        brand = QLabel(f"  {APP_NAME}  ")
        brand.setStyleSheet("font-weight: bold; font-size: 14pt;")
        toolbar.addWidget(brand)
        toolbar.addSeparator()

        self.new_session_action = QAction("New Session", self)
        self.study_deck_action = QAction("Study Deck", self)
        self.copilot_action = QAction("Copilot", self)
        self.copilot_action.setCheckable(True)
        self.copilot_action.setChecked(True)
        self.theme_action = QAction("", self)
        for action in (self.new_session_action, self.study_deck_action, self.copilot_action, self.theme_action):
            toolbar.addAction(action)

    def setup_layout(self) -> None:
        self.sidebar = Sidebar()
        self.upload_screen = UploadScreen()
        self.result_screen = ResultScreen()
        self.chat_panel = ChatPanel()

        self.stack = QStackedWidget()
        self.stack.addWidget(self.upload_screen)
        self.stack.addWidget(self.result_screen)

        self.main_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_splitter.addWidget(self.sidebar)
        self.main_splitter.addWidget(self.stack)
        self.main_splitter.addWidget(self.chat_panel)
        self.main_splitter.setStretchFactor(1, 1)
        self.main_splitter.setSizes([260, 760, 380])
        self.setCentralWidget(self.main_splitter)

    def connect_signals(self) -> None:
        self.new_session_action.triggered.connect(self.on_new_session)
        self.study_deck_action.triggered.connect(self.open_review)
        self.copilot_action.toggled.connect(lambda _checked: self.refresh_copilot_visibility())
        self.theme_action.triggered.connect(self.on_toggle_theme)

        self.sidebar.history_selected.connect(self.on_history_selected)
        self.sidebar.new_analysis_requested.connect(self.on_new_session)
        self.sidebar.clear_history_requested.connect(self.on_clear_history)
        self.sidebar.review_requested.connect(self.open_review)

        self.upload_screen.files_selected.connect(self.analysis_handler.add_files)
        self.upload_screen.remove_requested.connect(self.analysis_handler.remove_file)
        self.upload_screen.language_changed.connect(self.on_language_changed)
        self.upload_screen.mode_changed.connect(self.on_mode_changed)
        self.upload_screen.analyze_requested.connect(lambda: self.analysis_handler.start_analysis())

        self.result_screen.archive_requested.connect(self.on_archive)
        self.result_screen.copy_requested.connect(self.clipboard_handler.handle_copy)
        self.result_screen.regenerate_requested.connect(self.analysis_handler.start_analysis)
        self.result_screen.chat_message_requested.connect(self.chat_handler.send_message)
        self.result_screen.quiz_panel.quiz_requested.connect(self.analysis_handler.generate_quiz)
        self.result_screen.flashcard_panel.save_requested.connect(self.on_save_flashcards)

        self.chat_panel.message_submitted.connect(self.chat_handler.send_message)

    # --- 表示の更新 ---

    def refresh_all(self) -> None:
        """セッション状態に合わせてすべての表示を更新する。"""
        session = self.session
        self.upload_screen.set_selection(session.language, session.mode)
        self.result_screen.set_result(session.result)
        self.stack.setCurrentIndex(self.RESULT_PAGE if session.result else self.UPLOAD_PAGE)
        self.refresh_uploads()
        self.refresh_history()
        self.refresh_processing()
        self.refresh_chat()
        self.refresh_theme()

    def refresh_uploads(self) -> None:
        self.upload_screen.set_uploads(self.session.uploads)

    def refresh_history(self) -> None:
        self.sidebar.set_history(self.session.history_items)
        self.sidebar.set_deck_count(len(self.session.saved_flashcards))

    def refresh_processing(self) -> None:
        processing = self.session.is_processing
        self.upload_screen.set_processing(processing)
        self.result_screen.set_processing(processing)
        self.new_session_action.setEnabled(not processing)
        self.sidebar.set_processing(processing)
        self.result_screen.quiz_panel.set_generating(self.session.is_generating_quiz)

    def refresh_chat(self) -> None:
        sending = self.session.is_chat_sending
        self.chat_panel.set_sending(sending)
        self.chat_panel.set_messages(self.session.chat_messages)
        self.result_screen.set_chat_sending(sending)
        self.refresh_copilot_visibility()

    def refresh_copilot_visibility(self) -> None:
        # Copilotは解析結果がある場合のみ利用できる
        has_result = self.session.result is not None
        self.copilot_action.setVisible(has_result)
        self.chat_panel.setVisible(has_result and self.copilot_action.isChecked())

    def refresh_theme(self) -> None:
        is_dark = self.session.theme is Theme.DARK
        self.theme_action.setText("Light Mode" if is_dark else "Dark Mode")

    def notify_error(self, message: str) -> None:
        QMessageBox.warning(self, APP_NAME, message)

    # --- スロット ---

    def on_new_session(self) -> None:
        if self.session.is_processing:
            return
        self.session.new_session()
        self.refresh_all()

    def on_language_changed(self, language: ProgrammingLanguage) -> None:
        self.session.language = ProgrammingLanguage(language)

    def on_mode_changed(self, mode: OutputMode) -> None:
        self.session.mode = OutputMode(mode)

    def on_history_selected(self, item: HistoryItem) -> None:
        if self.session.is_processing:
            return
        self.session.select_history(item)
        self.refresh_all()

    def on_clear_history(self) -> None:
        reply = QMessageBox.question(
            self, APP_NAME, "Wipe the entire archive?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.session.clear_history()
            self.refresh_history()

    def on_archive(self) -> None:
        if self.session.result is None:
            return
        self.session.commit_result(self.session.result)
        self.refresh_history()
        self.statusBar().showMessage("Archived", 2000)

    def on_save_flashcards(self, cards: List[Flashcard]) -> None:
        added = self.session.save_flashcards(cards)
        self.result_screen.flashcard_panel.show_saved(len(added))
        self.refresh_history()

    def on_toggle_theme(self) -> None:
        apply_theme(self.session.toggle_theme())
        self.refresh_theme()

    def open_review(self, _checked: Optional[bool] = None) -> None:
        dialog = FlashcardReviewDialog(self, self.session.saved_flashcards)
        dialog.exec()

    def closeEvent(self, event: QCloseEvent) -> None:
        # 応答待ちのスレッドがあれば完了を待ってから終了する
        for thread in list(self.analysis_handler.threads):
            thread.wait()
        if self.chat_handler.chat_thread is not None and self.chat_handler.chat_thread.isRunning():
            self.chat_handler.chat_thread.wait()
        event.accept()

