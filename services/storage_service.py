# services/storage_service.py
import json
import logging
import os
from typing import Any, Optional

logger = logging.getLogger(__name__)


class StorageService:
    """ローカルファイルシステム上のキー・バリュー型ストレージを管理するサービスクラス。

    キーも値も文字列のシンプルなストアで、キーごとに1ファイルとして保存します。
    書き込みは毎回、値全体を同期的に書き出します。JSON形式での保存・読み込み用の
    ヘルパーも提供します。
    """

    def __init__(self, base_path: str = "data") -> None:
        """StorageServiceのコンストラクタ。

        Args:
            base_path (str): データを保存する基準ディレクトリのパス。
                             存在しない場合は自動的に作成されます。
        """
        self.base_path = base_path
        os.makedirs(self.base_path, exist_ok=True)

    def get_path(self, key: str) -> str:
        """ベースパスとキーを結合して完全なファイルパスを取得する。

        Args:
            key (str): ストレージのキー。

        Returns:
            str: 完全なファイルパス。
        """
        return os.path.join(self.base_path, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        """キーに対応する値を読み込む。

        Args:
            key (str): 読み込むキー。

        Returns:
            Optional[str]: 保存されている文字列。キーが存在しない、または読み込めない場合はNone。
        """
        file_path = self.get_path(key)
        if not os.path.exists(file_path):
            return None
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except (IOError, UnicodeDecodeError) as e:
            logger.warning("ファイル読み込み中にエラーが発生しました: %s, %s", file_path, e)
            return None

    def set_item(self, key: str, value: str) -> bool:
        """キーに値を書き込む。既存の値は置き換えられる。

        Args:
            key (str): 書き込むキー。
            value (str): 保存する文字列。

        Returns:
            bool: 保存に成功した場合はTrue、失敗した場合はFalse。
        """
        file_path = self.get_path(key)
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(value)
            logger.debug("データを %s に保存しました。", file_path)
            return True
        except IOError as e:
            logger.error("ファイル保存中にエラーが発生しました: %s, %s", file_path, e)
            return False

    def remove_item(self, key: str) -> None:
        """キーを削除する。存在しない場合は何もしない。"""
        file_path = self.get_path(key)
        try:
            os.remove(file_path)
        except FileNotFoundError:
            pass

    def save_json(self, key: str, data: Any) -> bool:
        """データをJSON文字列に変換して保存する。

        Args:
            key (str): 保存先のキー。
            data (Any): JSONに変換可能なデータ。

        Returns:
            bool: 保存に成功した場合はTrue。
        """
        return self.set_item(key, json.dumps(data, ensure_ascii=False, indent=4))

    def load_json(self, key: str) -> Optional[Any]:
        """保存されているJSONを読み込む。

        Args:
            key (str): 読み込むキー。

        Returns:
            Optional[Any]: 読み込まれたデータ。キーが存在しない、またはJSONとして不正な場合はNone。
        """
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("JSONの読み込みに失敗しました: %s, %s", key, e)
            return None
