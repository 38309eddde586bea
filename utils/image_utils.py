# utils/image_utils.py
"""ホワイトボード画像ファイルを読み込み、ImageAssetに変換する機能を提供します。"""
import base64
import logging
import mimetypes
import os
import re
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from models.image_models import ImageAsset

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


class ImageReadError(Exception):
    """画像ファイルを読み込めなかった場合のエラー。バッチ全体が失敗したことを表す。"""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"画像ファイルを読み込めませんでした: {path}\n{cause}")
        self.path = path
        self.cause = cause


def guess_image_mime_type(path: str) -> Optional[str]:
    """ファイル名から画像のMIMEタイプを推定する。画像でなければNoneを返す。"""
    mime_type, _ = mimetypes.guess_type(path)
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return None


def filter_image_paths(paths: Iterable[str]) -> List[str]:
    """画像ファイルのパスだけを残す。"""
    return [p for p in paths if guess_image_mime_type(p)]


def make_data_url(mime_type: str, raw_base64: str) -> str:
    return f"data:{mime_type};base64,{raw_base64}"


def read_image_asset(path: str) -> ImageAsset:
    """1つの画像ファイルを読み込んでImageAssetを生成する。

    Raises:
        ImageReadError: ファイルが画像でない、または読み込めなかった場合。
    """
    mime_type = guess_image_mime_type(path)
    if mime_type is None:
        raise ImageReadError(path, ValueError("not an image file"))
    try:
        with open(path, "rb") as f:
            raw_base64 = base64.b64encode(f.read()).decode("ascii")
    except OSError as e:
        raise ImageReadError(path, e) from e
    return ImageAsset(
        id=uuid.uuid4().hex[:9],
        raw_base64=raw_base64,
        mime_type=mime_type,
        preview_ref=make_data_url(mime_type, raw_base64),
        name=os.path.basename(path),
    )


def load_image_assets(paths: Sequence[str]) -> List[ImageAsset]:
    """複数の画像ファイルを並列に読み込む。

    画像以外のファイルは除外されます。すべての読み込みが完了してから結果を返し、
    1つでも失敗した場合はバッチ全体を失敗として ImageReadError を送出します
    （部分的な結果は返しません）。結果は入力の順序を保持します。

    Args:
        paths (Sequence[str]): 読み込むファイルのパス。

    Returns:
        List[ImageAsset]: 読み込まれた画像。

    Raises:
        ImageReadError: いずれかのファイルの読み込みに失敗した場合。
    """
    image_paths = filter_image_paths(paths)
    if not image_paths:
        return []

    with ThreadPoolExecutor(max_workers=len(image_paths)) as executor:
        futures = [executor.submit(read_image_asset, p) for p in image_paths]
        # すべての読み込みが終わるまで待ってから結果を評価する
        errors = [f.exception() for f in futures]

    for error in errors:
        if error is not None:
            logger.error("画像の読み込みに失敗しました: %s", error)
            raise error
    return [f.result() for f in futures]


def remove_asset(assets: Sequence[ImageAsset], asset_id: str) -> List[ImageAsset]:
    return [a for a in assets if a.id != asset_id]


def asset_from_data_url(data_url: Optional[str]) -> Optional[ImageAsset]:
    """保存されたサムネイルのdata URLからImageAssetを復元する。

    Base64形式の画像data URLでない場合はNoneを返します。
    """
    if not data_url:
        return None
    match = _DATA_URL_PATTERN.match(data_url)
    if not match:
        return None
    return ImageAsset(
        id=uuid.uuid4().hex[:9],
        raw_base64=match.group("data"),
        mime_type=match.group("mime"),
        preview_ref=data_url,
    )


def decode_asset_bytes(asset: ImageAsset) -> bytes:
    """プレビュー表示用に画像のバイト列を取得する。"""
    return base64.b64decode(asset.raw_base64)
