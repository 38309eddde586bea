# models/history_models.py
from enum import Enum

from models.analysis_models import AnalysisResult, CamelModel, Flashcard, OutputMode, ProgrammingLanguage


class Theme(str, Enum):
    """アプリケーション全体の配色テーマ。"""
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


class HistoryItem(CamelModel):
    """解析履歴の1件を表現するデータモデル。

    Attributes:
        id (str): 履歴の一意なID。
        timestamp (int): 登録日時（エポックミリ秒）。
        thumbnail (str): 先頭のアップロード画像のdata URL。画像がない場合は空文字列。
        language (ProgrammingLanguage): 解析時に選択されていた言語。
        mode (OutputMode): 解析時に選択されていた出力モード。
        result (AnalysisResult): 解析結果。
    """
    id: str
    timestamp: int
    thumbnail: str = ""
    language: ProgrammingLanguage = ProgrammingLanguage.AUTO
    mode: OutputMode = OutputMode.AUTO
    result: AnalysisResult


class SavedFlashcard(Flashcard):
    """ユーザーが単語帳（デッキ）に保存したカード。

    (term, definition, deck_name) の組で重複が判定されます。

    Attributes:
        id (str): カードの一意なID。
        deck_name (str): 保存先のデッキ名（通常は解析結果のタイトル）。
        date_added (int): 保存日時（エポックミリ秒）。
    """
    id: str
    deck_name: str
    date_added: int

    def identity(self) -> tuple:
        return (self.term, self.definition, self.deck_name)
