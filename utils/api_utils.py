# utils/api_utils.py
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class APIUtils:
    """API連携に関する共通処理を提供するユーティリティクラス。"""

    @staticmethod
    def make_api_request(
        url: str,
        method: str = "POST",
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """指定されたURLにAPIリクエストを送信し、JSONレスポンスを返す。

        Args:
            url (str): リクエストを送信するAPIエンドポイントのURL。
            method (str): HTTPメソッド（例: "GET", "POST"）。
            data (Optional[Dict[str, Any]]): リクエストボディとして送信するデータ（JSON）。
            headers (Optional[Dict[str, str]]): 追加のHTTPヘッダ。
            timeout (Optional[float]): タイムアウト秒数。Noneの場合は無期限に待つ。

        Returns:
            Dict[str, Any]: APIからのJSONレスポンス。

        Raises:
            requests.exceptions.RequestException: ネットワークエラーやHTTPエラーステータスの場合。
            ValueError: レスポンスボディがJSONとして解釈できない場合。
        """
        try:
            response = requests.request(method, url, json=data, headers=headers, timeout=timeout)
            response.raise_for_status()  # 2xx以外のステータスコードで例外を発生させる
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error("API request to %s failed: %s", url, e)
            raise

    @staticmethod
    def extract_response_text(response_json: Dict[str, Any]) -> str:
        """generateContentのレスポンスから最初の候補のテキストを取り出す。

        思考過程のパート（thought=True）は除外し、残りのテキストパートを連結します。
        候補やテキストが存在しない場合は空文字列を返します。

        Args:
            response_json (Dict[str, Any]): APIから返されたパース済みのJSONデータ。

        Returns:
            str: 応答テキスト。

        Raises:
            ValueError: レスポンスにエラーが含まれている場合。
        """
        if not isinstance(response_json, dict):
            raise ValueError("API response is not a JSON object")
        if response_json.get("error"):
            raise ValueError(f"API Error: {response_json['error']}")

        candidates = response_json.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content") or {}
        texts = [
            part.get("text", "")
            for part in content.get("parts") or []
            if isinstance(part, dict) and not part.get("thought")
        ]
        return "".join(texts)
