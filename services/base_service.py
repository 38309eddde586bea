# services/base_service.py
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from .storage_service import StorageService

# データモデルを表すジェネリック型を定義
T = TypeVar('T')


class BaseService(Generic[T], ABC):
    """
    永続化されるコレクションを扱うサービスクラスの基底となる抽象クラス（ABC）。

    データロードとセーブの共通インターフェースを定義します。
    具象サービスクラスは、特定のデータモデル（例: HistoryItem, SavedFlashcard）を
    扱うために、このクラスを継承し、抽象メソッドを実装する必要があります。

    Attributes:
        storage_service (Optional[StorageService]): ローカルストレージサービスへの参照。
            Noneの場合は永続化を行わず、メモリ上でのみ状態を保持します。
    """

    def __init__(self, storage_service: Optional['StorageService'] = None) -> None:
        """BaseServiceのコンストラクタ。

        Args:
            storage_service (Optional[StorageService]): ストレージサービスインスタンス。
        """
        self.storage_service = storage_service

    @abstractmethod
    def load_data(self, identifier: str) -> Optional[T]:
        """
        指定されたキーを使用してデータを読み込むための抽象メソッド。

        Args:
            identifier (str): ストレージのキー。

        Returns:
            Optional[T]: 読み込まれたデータ。存在しない、または形式が不正な場合はNone。
        """

    @abstractmethod
    def save_data(self, data: T) -> bool:
        """
        データを永続化するための抽象メソッド。

        Args:
            data (T): 保存するデータ。

        Returns:
            bool: 保存に成功した場合はTrue。
        """
