"""
アプリケーションのエントリーポイント。

このスクリプトは、設定とロギングを初期化し、永続ストレージから状態を一度だけ読み込んで
セッションストアとAIゲートウェイを構築したうえで、MainWindowを生成・表示して
アプリケーションのイベントループを開始します。
"""
import sys
import os
from PyQt6.QtWidgets import QApplication

# このファイル(main.py)があるディレクトリをsys.pathに追加し、
# models, services, ui, utils の各パッケージを見つけられるようにします。
current_dir: str = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from services.ai_gateway import AIGateway
from services.session_service import SessionService, load_persisted_state
from services.storage_service import StorageService
from ui.main_window import MainWindow
from utils.config import load_config
from utils.constants import APP_NAME
from utils.logging_utils import setup_logging


def main() -> int:
    # 1. 環境変数（.envを含む）から設定を読み込み、ロギングを構成します。
    config = load_config()
    setup_logging(config.log_level)

    # 2. PyQtアプリケーションインスタンスを作成します。
    app: QApplication = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # 3. 永続化された状態を読み込み、セッションストアに渡します。
    storage = StorageService(config.data_dir)
    session = SessionService(storage, load_persisted_state(storage))

    # 4. メインウィンドウを作成して表示します。
    window: MainWindow = MainWindow(session, AIGateway(config))
    window.show()

    # 5. イベントループを開始し、終了コードを返します。
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
