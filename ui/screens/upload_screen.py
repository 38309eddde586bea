# ui/screens/upload_screen.py
"""
画像アップロード画面のUIコンポーネントを提供します。

このモジュールには、ホワイトボードの写真をドラッグ&ドロップまたはファイル選択で
受け付け、言語と出力モードを選んで解析を開始するための UploadScreen クラスが含まれています。
"""
from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QDragEnterEvent, QDropEvent
from PyQt6.QtWidgets import (
    QComboBox, QFileDialog, QGridLayout, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
)

from models.analysis_models import OutputMode, ProgrammingLanguage
from models.image_models import ImageAsset
from ui.components import ClickableLabel, pixmap_from_asset
from utils.image_utils import filter_image_paths

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp *.heic *.heif)"


class UploadScreen(QWidget):
    """
    アップロード画面のメインウィジェット。

    ドロップされたファイルのうち画像だけを受け付け、パスのリストとして通知します。
    画像の読み込み自体はハンドラがワーカースレッドで行います。

    Signals:
        files_selected (pyqtSignal): 画像ファイルが選択・ドロップされたときにパスのリストを送信します。
        remove_requested (pyqtSignal): サムネイルの削除ボタンが押されたときに画像IDを送信します。
        language_changed (pyqtSignal): 言語が変更されたときに ProgrammingLanguage を送信します。
        mode_changed (pyqtSignal): 出力モードが変更されたときに OutputMode を送信します。
        analyze_requested (pyqtSignal): 「Begin Analysis」が押されたときに送信されます。
    """
    files_selected = pyqtSignal(list)
    remove_requested = pyqtSignal(str)
    language_changed = pyqtSignal(object)
    mode_changed = pyqtSignal(object)
    analyze_requested = pyqtSignal()

    THUMBNAIL_SIZE = 120
    GRID_COLUMNS = 4

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAcceptDrops(True)
        self._processing: bool = False
        self._has_uploads: bool = False

        # --- UI要素の型定義 ---
        self.drop_label: ClickableLabel
        self.thumbnail_grid: QGridLayout
        self.language_combo: QComboBox
        self.mode_combo: QComboBox
        self.analyze_button: QPushButton

        self.setup_ui()
        self.setup_connections()
        self.set_uploads([])

    def setup_ui(self) -> None:
        """UIの構築とレイアウト設定を行う。"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(40, 30, 40, 30)

        title = QLabel("Turn your whiteboard into code, diagrams and notes.")
        title.setStyleSheet("font-size: 18pt; font-weight: bold;")
        title.setWordWrap(True)
        layout.addWidget(title)

        self.drop_label = ClickableLabel("Drop whiteboard photos here, or click to browse")
        self.drop_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.drop_label.setMinimumHeight(160)
        self.drop_label.setStyleSheet("border: 2px dashed #999; border-radius: 12px;")
        layout.addWidget(self.drop_label)

        thumbnails = QWidget()
        self.thumbnail_grid = QGridLayout(thumbnails)
        layout.addWidget(thumbnails)

        layout.addLayout(self._create_options_layout())

        self.analyze_button = QPushButton("Begin Analysis")
        self.analyze_button.setObjectName("PrimaryButton")
        layout.addWidget(self.analyze_button)
        layout.addStretch()

    def _create_options_layout(self) -> QHBoxLayout:
        options = QHBoxLayout()
        options.addWidget(QLabel("Language"))
        self.language_combo = QComboBox()
        for language in ProgrammingLanguage:
            self.language_combo.addItem(language.value, language)
        options.addWidget(self.language_combo)

        options.addSpacing(20)
        options.addWidget(QLabel("Mode"))
        self.mode_combo = QComboBox()
        for mode in OutputMode:
            self.mode_combo.addItem(mode.value.capitalize(), mode)
        options.addWidget(self.mode_combo)
        options.addStretch()
        return options

    def setup_connections(self) -> None:
        """シグナルとスロットを接続する。"""
        self.drop_label.clicked.connect(self.open_file_dialog)
        self.analyze_button.clicked.connect(self.analyze_requested)
        self.language_combo.currentIndexChanged.connect(
            lambda _index: self.language_changed.emit(self.language_combo.currentData())
        )
        self.mode_combo.currentIndexChanged.connect(
            lambda _index: self.mode_changed.emit(self.mode_combo.currentData())
        )

    def open_file_dialog(self) -> None:
        """ファイル選択ダイアログを開き、選ばれた画像のパスを通知する。"""
        paths, _ = QFileDialog.getOpenFileNames(self, "Select whiteboard photos", "", IMAGE_FILE_FILTER)
        self._emit_paths(paths)

    def _emit_paths(self, paths: List[str]) -> None:
        images = filter_image_paths(paths)
        if images:
            self.files_selected.emit(images)

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        paths = [url.toLocalFile() for url in event.mimeData().urls() if url.isLocalFile()]
        self._emit_paths(paths)
        event.acceptProposedAction()

    def set_uploads(self, assets: List[ImageAsset]) -> None:
        """保留中のアップロードのサムネイル表示を更新する。"""
        while self.thumbnail_grid.count():
            item = self.thumbnail_grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        for index, asset in enumerate(assets):
            row, column = divmod(index, self.GRID_COLUMNS)
            self.thumbnail_grid.addWidget(self._create_thumbnail(asset), row, column)
        self._has_uploads = bool(assets)
        self._refresh_controls()

    def _create_thumbnail(self, asset: ImageAsset) -> QWidget:
        frame = QWidget()
        frame_layout = QVBoxLayout(frame)
        frame_layout.setContentsMargins(0, 0, 0, 0)
        image_label = QLabel()
        image_label.setFixedSize(self.THUMBNAIL_SIZE, self.THUMBNAIL_SIZE)
        image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        pixmap = pixmap_from_asset(asset, self.THUMBNAIL_SIZE)
        if pixmap.isNull():
            image_label.setText(asset.name or "image")
        else:
            image_label.setPixmap(pixmap)
        remove_button = QPushButton("Remove")
        remove_button.clicked.connect(lambda _checked=False, asset_id=asset.id: self.remove_requested.emit(asset_id))
        frame_layout.addWidget(image_label)
        frame_layout.addWidget(remove_button)
        return frame

    def set_selection(self, language: ProgrammingLanguage, mode: OutputMode) -> None:
        """言語と出力モードの選択状態を反映する。シグナルは送信しない。"""
        for combo, value in ((self.language_combo, language), (self.mode_combo, mode)):
            combo.blockSignals(True)
            index = combo.findData(value)
            if index >= 0:
                combo.setCurrentIndex(index)
            combo.blockSignals(False)

    def set_processing(self, processing: bool) -> None:
        self._processing = processing
        self._refresh_controls()

    def _refresh_controls(self) -> None:
        self.analyze_button.setEnabled(self._has_uploads and not self._processing)
        self.analyze_button.setText("Analyzing..." if self._processing else "Begin Analysis")
        self.drop_label.setEnabled(not self._processing)
