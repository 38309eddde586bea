# ui/styles.py
"""ライト/ダークの各テーマに対応するスタイルシートを提供します。"""
from PyQt6.QtWidgets import QApplication

from models.history_models import Theme

_COMMON = """
    QPushButton {
        padding: 6px 14px;
        border-radius: 6px;
    }
    QPushButton:disabled { color: #999; }
    QTabBar::tab { padding: 8px 16px; }
    QListWidget { border: none; }
"""

LIGHT_STYLESHEET = _COMMON + """
    QWidget { background-color: #fdf8f0; color: #1f4e5a; }
    QPushButton { background-color: #ffffff; border: 1px solid #1f4e5a; }
    QPushButton:hover { background-color: #1f4e5a; color: #ffffff; }
    QPushButton#PrimaryButton { background-color: #1f4e5a; color: #ffffff; font-weight: bold; }
    QTextBrowser, QPlainTextEdit, QLineEdit, QListWidget {
        background-color: #ffffff; border: 1px solid #e8c7c8;
    }
"""

DARK_STYLESHEET = _COMMON + """
    QWidget { background-color: #0f172a; color: #e5e7eb; }
    QPushButton { background-color: #1e293b; border: 1px solid #d4a94c; color: #d4a94c; }
    QPushButton:hover { background-color: #d4a94c; color: #0f172a; }
    QPushButton#PrimaryButton { background-color: #d4a94c; color: #0f172a; font-weight: bold; }
    QTextBrowser, QPlainTextEdit, QLineEdit, QListWidget {
        background-color: #1e293b; border: 1px solid #334155;
    }
"""


def stylesheet_for(theme: Theme) -> str:
    return DARK_STYLESHEET if Theme(theme) is Theme.DARK else LIGHT_STYLESHEET


def apply_theme(theme: Theme) -> None:
    """アプリケーション全体にテーマのスタイルシートを適用する。"""
    app = QApplication.instance()
    if app is not None:
        app.setStyleSheet(stylesheet_for(theme))
