# models/image_models.py
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageAsset:
    """アップロードされたホワイトボード画像1枚を表現するデータモデル。

    ファイル選択時に生成され、以後は変更されません。
    保留中のアップロード一覧から削除されるか、新しいセッションが開始された時点で破棄されます。

    Attributes:
        id (str): 画像の一意なID。
        raw_base64 (str): 画像バイト列をBase64エンコードした文字列（data URLのヘッダを含まない）。
        mime_type (str): 画像のMIMEタイプ（例: "image/png"）。
        preview_ref (str): プレビュー表示用のdata URL（"data:<mime>;base64,<payload>"）。
        name (str): 元のファイル名。履歴から復元した場合は空文字列。
    """
    id: str
    raw_base64: str
    mime_type: str
    preview_ref: str
    name: str = ""

    def inline_data(self) -> dict:
        """AIサービスへ送信するinlineDataパートを返す。"""
        return {"inlineData": {"mimeType": self.mime_type, "data": self.raw_base64}}
