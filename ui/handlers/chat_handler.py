from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from utils.constants import CHAT_ERROR_REPLY
from utils.task_thread import TaskThread

if TYPE_CHECKING:
    from ..main_window import MainWindow

logger = logging.getLogger(__name__)


class ChatHandler:
    """
    フォローアップチャット（Copilot）の送受信を管理するハンドラクラス。

    前回の送信に対する応答を待っている間の送信は、セッションストア側で拒否されます。
    """
    def __init__(self, main_window: MainWindow) -> None:
        """
        ChatHandlerのコンストラクタ。

        Args:
            main_window (MainWindow): 親となるメインウィンドウインスタンス。
        """
        self.main: MainWindow = main_window
        self.chat_thread: Optional[TaskThread] = None

    def send_message(self, text: str) -> bool:
        """
        メッセージを送信する。

        Args:
            text (str): ユーザーのメッセージ。

        Returns:
            bool: 送信を開始した場合はTrue。拒否された場合はFalse。
        """
        request = self.main.session.begin_chat_send(text)
        if request is None:
            return False
        self.main.refresh_chat()

        self.chat_thread = TaskThread(
            self.main.gateway.send_follow_up,
            list(request.history),
            request.message,
            request.context,
            list(request.images),
            parent=self.main,
        )
        self.chat_thread.result_ready.connect(lambda reply, g=request.generation: self.on_reply_ready(reply, g))
        self.chat_thread.error_occurred.connect(lambda error, g=request.generation: self.on_reply_failed(error, g))
        self.chat_thread.finished.connect(self._on_thread_finished)
        self.chat_thread.start()
        return True

    def on_reply_ready(self, reply: str, generation: int) -> None:
        self.main.session.finish_chat_send(reply, generation)
        self.main.refresh_chat()

    def on_reply_failed(self, error: Exception, generation: int) -> None:
        # send_follow_upは例外を送出しないため、ここに来るのは想定外の失敗のみ
        logger.error("Chat worker failed: %s", error)
        self.main.session.finish_chat_send(CHAT_ERROR_REPLY, generation)
        self.main.refresh_chat()

    def _on_thread_finished(self) -> None:
        if self.chat_thread is not None:
            self.chat_thread.deleteLater()
            self.chat_thread = None
