import copy

import pytest
import requests

from models.analysis_models import AnalysisResult
from models.image_models import ImageAsset
from services.storage_service import StorageService
from utils.config import AppConfig

SAMPLE_ANALYSIS = {
    "detectedType": "code",
    "suggestedLanguage": "Python",
    "reasoning": "The board shows a loop over a sorted array.",
    "title": "Binary Search",
    "transcription": "lo = 0, hi = n - 1 ...",
    "explanation": "Binary search halves the search range on every step.",
    "code": "def search(xs, x):\n    return xs.index(x)",
    "diagram": "graph TD\n  A-->B",
    "flashcards": [
        {"term": "Binary search", "definition": "Halving search over a sorted list"},
        {"term": "Invariant", "definition": "lo <= target index <= hi"},
    ],
    "secondaryInfo": {
        "complexity": "O(log n)",
        "edgeCases": ["empty list", "missing value"],
        "relatedConcepts": ["divide and conquer"],
    },
}

SAMPLE_QUIZ = [
    {
        "question": f"Question {i}?",
        "options": ["a", "b", "c", "d"],
        "correctAnswerIndex": i % 4,
        "explanation": f"Because {i}.",
    }
    for i in range(5)
]


class FakeResponse:
    """requests.Responseの代わりに使う最小限のレスポンス。"""

    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


def gemini_payload(text):
    """generateContentの成功レスポンスを模したJSONを返す。"""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


@pytest.fixture
def sample_analysis_payload():
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def sample_quiz_payload():
    return copy.deepcopy(SAMPLE_QUIZ)


@pytest.fixture
def make_result():
    """タイトルを指定して解析結果を生成するファクトリ。"""
    def _make(title="Binary Search", **overrides):
        payload = copy.deepcopy(SAMPLE_ANALYSIS)
        payload["title"] = title
        payload.update(overrides)
        return AnalysisResult.model_validate(payload)
    return _make


@pytest.fixture
def storage(tmp_path):
    return StorageService(str(tmp_path / "data"))


@pytest.fixture
def image_asset():
    return ImageAsset(
        id="img1",
        raw_base64="aGVsbG8=",
        mime_type="image/png",
        preview_ref="data:image/png;base64,aGVsbG8=",
        name="board.png",
    )


@pytest.fixture
def config():
    return AppConfig(api_key="test-key", model="test-model", api_base_url="https://example.test/v1beta")


@pytest.fixture
def fake_post(monkeypatch):
    """requests.requestを差し替え、送信内容を記録して指定のレスポンスを返す。

    使用例: calls = fake_post(FakeResponse(gemini_payload("...")))
    """
    def _install(*responses):
        calls = []
        queue = list(responses)

        def _request(method, url, json=None, headers=None, timeout=None):
            calls.append({"method": method, "url": url, "json": json, "headers": headers, "timeout": timeout})
            response = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(requests, "request", _request)
        return calls
    return _install
