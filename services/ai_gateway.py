# services/ai_gateway.py
"""
生成AIサービス（Gemini）との通信を一手に引き受けるゲートウェイ。

外部への呼び出しを行うのはこのモジュールだけで、信頼できないレスポンスを
アプリケーションの型付きモデルへ変換するのもこのモジュールだけです。
自動リトライは行いません。リトライはユーザーが改めて操作することで行われます。
"""
import json
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError

from models.analysis_models import AnalysisResult, OutputMode, ProgrammingLanguage, QuizQuestion
from models.chat_models import ChatMessage
from models.image_models import ImageAsset
from utils.api_utils import APIUtils
from utils.config import AppConfig
from utils.constants import CHAT_EMPTY_REPLY, CHAT_ERROR_REPLY
from utils.prompt_utils import build_analysis_request, build_chat_request, build_quiz_request

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """AIゲートウェイで発生するエラーの基底クラス。"""


class TransportError(GatewayError):
    """ネットワーク障害、2xx以外の応答、APIキー未設定など、サービスに到達できなかった場合のエラー。"""


class EmptyResponse(GatewayError):
    """サービスがテキストを返さなかった場合のエラー。"""


class MalformedResponse(GatewayError):
    """テキストはあるが、JSONとして不正、または期待する形式に合致しない場合のエラー。"""


class AIGateway:
    """解析・クイズ生成・フォローアップチャットの3種類の呼び出しを提供するクラス。

    Attributes:
        config (AppConfig): APIキー、モデルID、タイムアウトなどの実行時設定。
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base_url}/models/{self.config.model}:generateContent"

    def is_configured(self) -> bool:
        """APIキーが設定されているかどうかを返す。"""
        return bool(self.config.api_key)

    def analyze(
        self,
        images: Sequence[ImageAsset],
        language: ProgrammingLanguage,
        mode: OutputMode = OutputMode.AUTO,
        refinement: Optional[str] = None,
    ) -> AnalysisResult:
        """ホワイトボード画像を解析する。

        Args:
            images (Sequence[ImageAsset]): 解析対象の画像（順序は保持される）。
            language (ProgrammingLanguage): コードの出力言語。
            mode (OutputMode): 出力モード。
            refinement (Optional[str]): 前回の結果に重ねる追加指示。

        Returns:
            AnalysisResult: 検証済みの解析結果。

        Raises:
            TransportError: サービスに到達できなかった場合。
            EmptyResponse: テキストが返されなかった場合。
            MalformedResponse: レスポンスが期待する形式でなかった場合。
        """
        body = build_analysis_request(images, language, mode, refinement, self.config.thinking_budget)
        payload = self._parse_json(self._generate(body))
        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError as e:
            logger.error("Analysis response failed validation: %s", e)
            raise MalformedResponse(f"Analysis response does not match the expected schema: {e}") from e

    def generate_quiz(self, context_text: str) -> List[QuizQuestion]:
        """解説テキストから4択クイズを生成する。

        サービスはIDを返さないため、各問題に "q-<エポックミリ秒>-<連番>" 形式のIDを付与します。

        Raises:
            TransportError, EmptyResponse, MalformedResponse: analyzeと同様。
        """
        payload = self._parse_json(self._generate(build_quiz_request(context_text)))
        if not isinstance(payload, list):
            raise MalformedResponse("Quiz response is not a JSON array")

        stamp = int(time.time() * 1000)
        questions: List[QuizQuestion] = []
        for index, item in enumerate(payload):
            if not isinstance(item, dict):
                raise MalformedResponse(f"Quiz item {index} is not a JSON object")
            try:
                questions.append(QuizQuestion.model_validate({**item, "id": f"q-{stamp}-{index}"}))
            except ValidationError as e:
                logger.error("Quiz item %d failed validation: %s", index, e)
                raise MalformedResponse(f"Quiz item {index} does not match the expected schema: {e}") from e
        return questions

    def send_follow_up(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        context: str,
        images: Sequence[ImageAsset] = (),
    ) -> str:
        """フォローアップチャットのメッセージを送信し、応答テキストを返す。

        会話が途切れないよう、このメソッドは例外を送出しません。
        失敗時は定型のお詫びメッセージを、空の応答時は定型の返答を返します。
        """
        try:
            return self._generate(build_chat_request(history, new_message, context, images))
        except EmptyResponse:
            return CHAT_EMPTY_REPLY
        except Exception:
            logger.exception("Chat request failed")
            return CHAT_ERROR_REPLY

    def _generate(self, body: Dict[str, Any]) -> str:
        """generateContentを呼び出し、応答テキストを返す。"""
        if not self.is_configured():
            raise TransportError("API key is not configured. Set GEMINI_API_KEY.")

        headers = {"x-goog-api-key": self.config.api_key}
        try:
            response_json = APIUtils.make_api_request(
                self.endpoint, "POST", data=body, headers=headers, timeout=self.config.request_timeout
            )
            text = APIUtils.extract_response_text(response_json)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to the AI service failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"Unreadable response from the AI service: {e}") from e

        if not text or not text.strip():
            raise EmptyResponse("No response text received from the AI service")
        return text

    @staticmethod
    def _parse_json(text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("AI response is not valid JSON: %s", e)
            raise MalformedResponse(f"AI response is not valid JSON: {e}") from e
