# ui/components.py
"""
アプリケーション全体で再利用されるカスタムUIコンポーネントを提供します。

- ClickableLabel: クリックイベントを送信する機能を持つラベル。
- pixmap_from_asset / pixmap_from_data_url: 画像データからサムネイル用のQPixmapを生成する。
"""
import binascii
from typing import Optional

from PyQt6.QtWidgets import QLabel, QWidget
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QMouseEvent, QPixmap

from models.image_models import ImageAsset
from utils.image_utils import asset_from_data_url, decode_asset_bytes


class ClickableLabel(QLabel):
    """
    クリックされたときに `clicked` シグナルを送信するQLabel。

    Signals:
        clicked (pyqtSignal): ラベルが左クリックされたときに送信されます。
    """
    clicked = pyqtSignal()

    def __init__(self, text: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(text, parent)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


def pixmap_from_asset(asset: ImageAsset, size: int = 120) -> QPixmap:
    """ImageAssetから、指定サイズに収まるサムネイルのQPixmapを生成する。

    画像として解釈できない場合は空のQPixmapを返します。
    """
    pixmap = QPixmap()
    try:
        data = decode_asset_bytes(asset)
    except (binascii.Error, ValueError):
        return pixmap
    if not pixmap.loadFromData(data):
        return QPixmap()
    return pixmap.scaled(
        size, size,
        Qt.AspectRatioMode.KeepAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )


def pixmap_from_data_url(data_url: str, size: int = 120) -> QPixmap:
    asset = asset_from_data_url(data_url)
    if asset is None:
        return QPixmap()
    return pixmap_from_asset(asset, size)
