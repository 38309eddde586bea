# utils/logging_utils.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """ルートロガーを設定する。アプリケーション起動時に一度だけ呼び出す。

    Args:
        level (str): ログレベル名（例: "INFO"）。不明な名前の場合はWARNINGになる。
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
