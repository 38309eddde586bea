# models/chat_models.py
from dataclasses import dataclass
from typing import Literal

ChatRole = Literal["user", "model"]


@dataclass(frozen=True)
class ChatMessage:
    """フォローアップチャットの1メッセージを表現するデータモデル。

    チャットの履歴は追記のみで、既存のメッセージが変更・並べ替えされることはありません。

    Attributes:
        id (str): メッセージの一意なID。
        role (ChatRole): 発言者。"user" または "model"。
        text (str): メッセージ本文（Markdown）。
        timestamp (int): 作成日時（エポックミリ秒）。
    """
    id: str
    role: ChatRole
    text: str
    timestamp: int

    def to_content(self) -> dict:
        """AIサービスのcontents形式（role + parts）に変換する。"""
        return {"role": self.role, "parts": [{"text": self.text}]}
