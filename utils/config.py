# utils/config.py
"""環境変数（および .env ファイル）からアプリケーション設定を読み込みます。"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from utils.constants import DEFAULT_API_BASE_URL, DEFAULT_MODEL, DEFAULT_THINKING_BUDGET

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """実行時設定。

    Attributes:
        api_key (str): AIサービスのAPIキー。空の場合、AI呼び出し時にエラーとなる。
        model (str): 使用するモデルID。
        api_base_url (str): AIサービスのベースURL。
        thinking_budget (Optional[int]): 解析時の思考トークン予算。Noneなら送信しない。
        request_timeout (Optional[float]): リクエストのタイムアウト秒数。Noneなら無期限。
        data_dir (str): 永続ストレージの保存ディレクトリ。
        log_level (str): ログレベル名。
    """
    api_key: str = ""
    model: str = DEFAULT_MODEL
    api_base_url: str = DEFAULT_API_BASE_URL
    thinking_budget: Optional[int] = DEFAULT_THINKING_BUDGET
    request_timeout: Optional[float] = None
    data_dir: str = "data"
    log_level: str = "WARNING"


def _read_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("環境変数 %s の値が不正です: %r", name, raw)
        return default
    return value if value > 0 else None


def _read_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("環境変数 %s の値が不正です: %r", name, raw)
        return default
    return value if value > 0 else None


def load_config(dotenv_path: Optional[str] = None) -> AppConfig:
    """環境変数からAppConfigを構築する。

    カレントディレクトリ（または指定されたパス）の .env ファイルがあれば先に読み込みます。
    既に設定されている環境変数は上書きされません。

    Args:
        dotenv_path (Optional[str]): 読み込む .env ファイルのパス。

    Returns:
        AppConfig: 読み込まれた設定。
    """
    load_dotenv(dotenv_path or find_dotenv(usecwd=True))
    return AppConfig(
        api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", ""),
        model=os.getenv("BOARDVISION_MODEL") or DEFAULT_MODEL,
        api_base_url=(os.getenv("BOARDVISION_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        thinking_budget=_read_int("BOARDVISION_THINKING_BUDGET", DEFAULT_THINKING_BUDGET),
        request_timeout=_read_float("BOARDVISION_REQUEST_TIMEOUT", None),
        data_dir=os.getenv("BOARDVISION_DATA_DIR") or "data",
        log_level=(os.getenv("BOARDVISION_LOG_LEVEL") or "WARNING").upper(),
    )
