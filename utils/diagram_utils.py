# utils/diagram_utils.py
import re

from utils.constants import MERMAID_KEYWORDS

_OPEN_FENCE = re.compile(r"^```(?:mermaid)?\s*", re.IGNORECASE)
_CLOSE_FENCE = re.compile(r"\s*```$")


def clean_chart_code(code: str) -> str:
    """AIが返したMermaidのコードを表示用に整える。

    Markdownのコードフェンスを取り除き、既知の図の種類のキーワードで始まっていない場合は
    先頭に "flowchart TD" を補います。
    """
    cleaned = (code or "").strip()
    cleaned = _OPEN_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSE_FENCE.sub("", cleaned, count=1)
    if not cleaned.lower().startswith(MERMAID_KEYWORDS):
        cleaned = "flowchart TD\n" + cleaned
    return cleaned
