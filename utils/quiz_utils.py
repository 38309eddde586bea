# utils/quiz_utils.py
from typing import Mapping, Sequence

from models.analysis_models import QuizQuestion
from utils.constants import QUIZ_DEFAULT_GRADE, QUIZ_GRADES


class QuizUtils:
    """クイズの採点に関する共通処理を提供するユーティリティクラス。"""

    @staticmethod
    def calculate_score(quiz: Sequence[QuizQuestion], answers: Mapping[str, int]) -> int:
        """回答が正解と一致した問題の数を返す。

        Args:
            quiz (Sequence[QuizQuestion]): 採点対象のクイズ。
            answers (Mapping[str, int]): 問題IDから選択肢インデックスへの対応。

        Returns:
            int: 正解数。常に0以上、問題数以下。
        """
        return sum(1 for q in quiz if answers.get(q.id) == q.correct_answer_index)

    @staticmethod
    def get_grade(score: int, total: int) -> str:
        """正答率から評価（S/A/B/C）を返す。問題がない場合はCとする。"""
        if total <= 0:
            return QUIZ_DEFAULT_GRADE
        ratio = score / total
        for threshold, label in QUIZ_GRADES:
            if ratio >= threshold:
                return label
        return QUIZ_DEFAULT_GRADE

    @staticmethod
    def is_complete(quiz: Sequence[QuizQuestion], answers: Mapping[str, int]) -> bool:
        """すべての問題に回答済みかどうかを返す。"""
        return all(q.id in answers for q in quiz)
