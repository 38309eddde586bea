# services/history_service.py
import logging
import time
import uuid
from typing import TYPE_CHECKING, List, Optional

from pydantic import ValidationError

from .base_service import BaseService
from models.analysis_models import AnalysisResult, OutputMode, ProgrammingLanguage
from models.history_models import HistoryItem
from utils.constants import HISTORY_STORAGE_KEY, MAX_HISTORY_ITEMS

if TYPE_CHECKING:
    from .storage_service import StorageService

logger = logging.getLogger(__name__)


class HistoryService(BaseService[List[HistoryItem]]):
    """解析履歴の登録・一覧・消去を管理するサービスクラス。

    履歴は新しい順に最大MAX_HISTORY_ITEMS件まで保持され、解析結果のタイトルで
    重複が排除されます。変更のたびに全件がStorageServiceを介して永続化されます。
    """

    def __init__(
        self,
        storage_service: Optional['StorageService'] = None,
        items: Optional[List[HistoryItem]] = None,
    ) -> None:
        """HistoryServiceのコンストラクタ。

        Args:
            storage_service (Optional[StorageService]): データ永続化のためのストレージサービス。
            items (Optional[List[HistoryItem]]): 起動時に読み込み済みの履歴。
                Noneの場合はストレージから読み込む。
        """
        super().__init__(storage_service=storage_service)
        if items is None:
            items = self.load_data(HISTORY_STORAGE_KEY) or []
        self.items: List[HistoryItem] = list(items)

    def commit_result(
        self,
        result: AnalysisResult,
        thumbnail: str = "",
        language: ProgrammingLanguage = ProgrammingLanguage.AUTO,
        mode: OutputMode = OutputMode.AUTO,
    ) -> HistoryItem:
        """解析結果を履歴の先頭に登録する。

        同じタイトルを持つ既存の履歴は削除され、全体はMAX_HISTORY_ITEMS件に切り詰められます。

        Args:
            result (AnalysisResult): 登録する解析結果。
            thumbnail (str): サムネイルとして保存する画像のdata URL。
            language (ProgrammingLanguage): 解析時の言語選択。
            mode (OutputMode): 解析時の出力モード。

        Returns:
            HistoryItem: 登録された履歴。
        """
        now = int(time.time() * 1000)
        item = HistoryItem(
            id=uuid.uuid4().hex,
            timestamp=now,
            thumbnail=thumbnail,
            language=language,
            mode=mode,
            result=result,
        )
        others = [h for h in self.items if h.result.title != result.title]
        self.items = [item, *others][:MAX_HISTORY_ITEMS]
        self.save_data(self.items)
        return item

    def clear_history(self) -> None:
        """履歴をすべて消去する。"""
        self.items = []
        self.save_data(self.items)

    def load_data(self, identifier: str) -> Optional[List[HistoryItem]]:
        """ストレージから履歴を読み込む。形式が不正な場合は存在しないものとして扱う。"""
        if not self.storage_service:
            return None
        data = self.storage_service.load_json(identifier)
        if data is None:
            return None
        if not isinstance(data, list):
            logger.warning("履歴データの形式が不正なため無視します: %s", identifier)
            return None
        try:
            return [HistoryItem.model_validate(entry) for entry in data]
        except ValidationError as e:
            logger.warning("履歴データのデシリアライズに失敗したため無視します: %s", e)
            return None

    def save_data(self, data: List[HistoryItem]) -> bool:
        if not self.storage_service:
            return False
        return self.storage_service.save_json(HISTORY_STORAGE_KEY, [item.to_dict() for item in data])
