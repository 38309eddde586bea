# models/analysis_models.py
"""
AIサービスから返される解析結果を表現するデータモデル。

AIサービスのレスポンスは信頼できない入力として扱い、pydanticによる検証付きの
デシリアライズを経て型付きのモデルに変換します。JSON上のフィールド名は
キャメルケース（例: detectedType）で、Python側ではスネークケースで参照します。
"""
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ProgrammingLanguage(str, Enum):
    """コード生成時に指定できる言語。AUTOの場合はAIに選択を任せる。"""
    AUTO = "Auto"
    PYTHON = "Python"
    JAVASCRIPT = "JavaScript"
    TYPESCRIPT = "TypeScript"
    JAVA = "Java"
    CPP = "C++"
    GO = "Go"
    LATEX = "LaTeX"
    MARKDOWN = "Markdown"
    SQL = "SQL"


class OutputMode(str, Enum):
    """解析の出力モード。各モードはプロンプト上の固定の指示文に対応する。"""
    AUTO = "auto"
    CODE = "code"
    DIAGRAM = "diagram"
    MATH = "math"
    NOTES = "notes"


DetectedType = Literal["code", "diagram", "math", "notes"]


class CamelModel(BaseModel):
    """JSONのキャメルケース名とPythonのスネークケース名を相互に対応付ける基底モデル。"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> dict:
        """永続化・送信用に、キャメルケースのキーを持つ辞書へ変換する。"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Flashcard(CamelModel):
    """単語帳カード1枚（表: term / 裏: definition）。"""
    term: str
    definition: str


class QuizQuestion(CamelModel):
    """4択クイズの1問を表現するデータモデル。

    Attributes:
        id (str): 問題の一意なID。AIサービスはIDを返さないため、ローカルで採番される。
        question (str): 問題文。
        options (List[str]): 選択肢。必ず4つ。
        correct_answer_index (int): 正解の選択肢のインデックス（0〜3）。
        explanation (str): 正解の解説。
    """
    id: str
    question: str
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer_index: int = Field(ge=0, le=3)
    explanation: str

    @model_validator(mode="after")
    def _check_answer_index(self) -> "QuizQuestion":
        if self.correct_answer_index >= len(self.options):
            raise ValueError("correctAnswerIndex must index into options")
        return self


class SecondaryInfo(CamelModel):
    """計算量、エッジケース、関連概念などの補足情報。すべて任意項目。"""
    complexity: Optional[str] = None
    edge_cases: Optional[List[str]] = None
    related_concepts: Optional[List[str]] = None


class AnalysisResult(CamelModel):
    """ホワイトボード解析1回分の結果。

    一度生成されたら変更されません。再生成時は新しいインスタンスで置き換えられ、
    クイズ生成時はquizフィールドを埋めたコピーが作られます。
    """
    detected_type: DetectedType
    suggested_language: str
    reasoning: str
    title: str
    transcription: str
    explanation: str
    code: Optional[str] = None
    diagram: Optional[str] = None
    flashcards: Optional[List[Flashcard]] = None
    quiz: Optional[List[QuizQuestion]] = None
    secondary_info: SecondaryInfo

    def with_quiz(self, quiz: List[QuizQuestion]) -> "AnalysisResult":
        """クイズを付与した新しい解析結果を返す。"""
        return self.model_copy(update={"quiz": list(quiz)})

    def chat_context(self) -> str:
        """フォローアップチャットに渡すコンテキスト（解説 + コード）を返す。"""
        if self.code:
            return f"{self.explanation}\n\n{self.code}"
        return self.explanation
