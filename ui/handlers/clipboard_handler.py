from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from PyQt6.QtWidgets import QApplication

from models.analysis_models import AnalysisResult
from utils.diagram_utils import clean_chart_code

if TYPE_CHECKING:
    from ..main_window import MainWindow


def copy_text_for(result: Optional[AnalysisResult], diagram_tab: bool = False) -> str:
    """
    「Copy」でクリップボードにコピーするテキストを決定する。

    Architectureタブ表示中で図がある場合は整形済みのMermaidソースを、
    それ以外はコードを、コードがなければ解説をコピー対象とします。

    Args:
        result (Optional[AnalysisResult]): 現在の解析結果。
        diagram_tab (bool): Architectureタブを表示中かどうか。

    Returns:
        str: コピーするテキスト。結果がなければ空文字列。
    """
    if result is None:
        return ""
    if diagram_tab and result.diagram:
        return clean_chart_code(result.diagram)
    return result.code or result.explanation


class ClipboardHandler:
    """
    解析結果のクリップボードへのコピーを処理するハンドラ。
    """
    def __init__(self, main_window: MainWindow) -> None:
        """
        ClipboardHandlerのコンストラクタ。

        Args:
            main_window (MainWindow): 親となるメインウィンドウインスタンス。
        """
        self.main: MainWindow = main_window

    def handle_copy(self) -> None:
        """表示中のタブに応じたテキストをクリップボードにコピーする。"""
        text = copy_text_for(self.main.session.result, self.main.result_screen.is_diagram_tab())
        if not text:
            return
        clipboard = QApplication.clipboard()
        if clipboard is not None:
            clipboard.setText(text)
        self.main.statusBar().showMessage("Copied to clipboard", 2000)
