from __future__ import annotations
import logging
from typing import TYPE_CHECKING, List, Optional

from PyQt6.QtCore import QThread

from models.analysis_models import AnalysisResult, QuizQuestion
from models.image_models import ImageAsset
from utils.constants import ANALYSIS_FAILURE_NOTICE, QUIZ_FAILURE_NOTICE
from utils.image_utils import load_image_assets
from utils.task_thread import TaskThread

if TYPE_CHECKING:
    from ..main_window import MainWindow

logger = logging.getLogger(__name__)


class AnalysisHandler:
    """
    画像の読み込み、ホワイトボード解析、クイズ生成の非同期処理を管理するハンドラクラス。

    各処理はTaskThreadで実行し、完了時のスロットでのみセッション状態を変更します。
    処理中のリクエストはキャンセルされず、完了まで待ちます。
    """
    def __init__(self, main_window: MainWindow) -> None:
        """
        AnalysisHandlerのコンストラクタ。

        Args:
            main_window (MainWindow): 親となるメインウィンドウインスタンス。
        """
        self.main: MainWindow = main_window
        # 実行中のスレッドがガベージコレクションされないよう参照を保持する
        self.threads: List[QThread] = []

    def _start_thread(self, thread: TaskThread) -> None:
        self.threads.append(thread)
        thread.finished.connect(lambda t=thread: self._forget_thread(t))
        thread.start()

    def _forget_thread(self, thread: QThread) -> None:
        if thread in self.threads:
            self.threads.remove(thread)
        thread.deleteLater()

    # --- 画像の読み込み ---

    def add_files(self, paths: List[str]) -> None:
        """選択された画像ファイルをバックグラウンドで読み込む。"""
        if not paths:
            return
        thread = TaskThread(load_image_assets, list(paths), parent=self.main)
        thread.result_ready.connect(self.on_images_loaded)
        thread.error_occurred.connect(self.on_images_failed)
        self._start_thread(thread)

    def on_images_loaded(self, assets: List[ImageAsset]) -> None:
        self.main.session.add_uploads(assets)
        self.main.refresh_uploads()

    def on_images_failed(self, error: Exception) -> None:
        self.main.notify_error(str(error))

    def remove_file(self, asset_id: str) -> None:
        self.main.session.remove_upload(asset_id)
        self.main.refresh_uploads()

    # --- 解析 ---

    def start_analysis(self, refinement: Optional[str] = None) -> None:
        """
        保留中のアップロードの解析を開始する。

        解析が既に処理中の場合、またはアップロードがない場合は何もしません。

        Args:
            refinement (Optional[str]): 再生成時の追加指示。
        """
        request = self.main.session.begin_analysis(refinement)
        if request is None:
            return
        self.main.refresh_processing()
        thread = TaskThread(
            self.main.gateway.analyze,
            list(request.images),
            request.language,
            request.mode,
            request.refinement,
            parent=self.main,
        )
        thread.result_ready.connect(self.on_analysis_ready)
        thread.error_occurred.connect(self.on_analysis_failed)
        self._start_thread(thread)

    def on_analysis_ready(self, result: AnalysisResult) -> None:
        self.main.session.finish_analysis(result)
        self.main.refresh_all()

    def on_analysis_failed(self, error: Exception) -> None:
        logger.error("Analysis failed: %s", error)
        self.main.session.fail_analysis()
        self.main.refresh_processing()
        self.main.notify_error(ANALYSIS_FAILURE_NOTICE)

    # --- クイズ ---

    def generate_quiz(self) -> None:
        """現在の解析結果の解説からクイズを生成する。"""
        request = self.main.session.begin_quiz()
        if request is None:
            return
        self.main.result_screen.quiz_panel.set_generating(True)
        thread = TaskThread(self.main.gateway.generate_quiz, request.context, parent=self.main)
        thread.result_ready.connect(lambda questions, g=request.generation: self.on_quiz_ready(questions, g))
        thread.error_occurred.connect(lambda error, g=request.generation: self.on_quiz_failed(error, g))
        self._start_thread(thread)

    def on_quiz_ready(self, questions: List[QuizQuestion], generation: int) -> None:
        result = self.main.session.finish_quiz(questions, generation)
        if result is None:
            return
        self.main.result_screen.quiz_panel.set_generating(False)
        self.main.result_screen.set_quiz(result)
        self.main.refresh_history()

    def on_quiz_failed(self, error: Exception, generation: int) -> None:
        logger.error("Quiz generation failed: %s", error)
        if generation != self.main.session.generation:
            return
        self.main.session.fail_quiz(generation)
        self.main.result_screen.quiz_panel.set_generating(False)
        self.main.notify_error(QUIZ_FAILURE_NOTICE)
