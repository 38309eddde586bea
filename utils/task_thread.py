# utils/task_thread.py
"""AI呼び出しや画像読み込みなどの時間のかかる処理を非同期で実行するためのスレッド機能を提供します。"""
import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal

logger = logging.getLogger(__name__)


class TaskThread(QThread):
    """任意の関数をバックグラウンドで実行するワーカースレッド。

    UIのフリーズを防ぐため、ネットワークリクエストやファイル読み込みをバックグラウンドで実行します。
    スレッド内ではアプリケーションの状態を変更せず、結果はシグナルでGUIスレッドに通知します。

    Signals:
        result_ready (pyqtSignal):
            処理に成功した際に、関数の戻り値（object）を送信します。
        error_occurred (pyqtSignal):
            処理中に例外が発生した際に、その例外（object）を送信します。
    """
    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(object)

    def __init__(self, func: Callable[..., Any], *args: Any, parent: Optional[QObject] = None, **kwargs: Any) -> None:
        """TaskThreadのコンストラクタ。

        Args:
            func (Callable[..., Any]): バックグラウンドで実行する関数。
            *args: 関数に渡す位置引数。
            parent (Optional[QObject]): 親オブジェクト。デフォルトはNone。
            **kwargs: 関数に渡すキーワード引数。
        """
        super().__init__(parent)
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        """スレッドのメイン処理。関数を実行し、結果または例外をシグナルで通知する。"""
        try:
            result = self.func(*self.args, **self.kwargs)
        except Exception as e:
            logger.debug("バックグラウンド処理が失敗しました: %s", e)
            self.error_occurred.emit(e)
            return
        self.result_ready.emit(result)
