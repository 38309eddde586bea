# ui/widgets/quiz_panel.py
from typing import Dict, List, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QButtonGroup, QGroupBox, QLabel, QPushButton, QRadioButton, QScrollArea, QVBoxLayout, QWidget
)

from models.analysis_models import QuizQuestion
from utils.quiz_utils import QuizUtils


class QuizPanel(QWidget):
    """
    「Check Point」タブ。クイズの生成、回答、採点を行う。

    全問に回答するまで提出ボタンは無効です。提出後は正解・不正解と解説、
    得点と評価を表示します。

    Signals:
        quiz_requested (pyqtSignal): クイズ生成が要求されたときに送信されます。
    """
    quiz_requested = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.quiz: Optional[List[QuizQuestion]] = None
        self.answers: Dict[str, int] = {}
        self.submitted: bool = False
        self._groups: List[QButtonGroup] = []

        layout = QVBoxLayout(self)

        self.intro_widget = QWidget()
        intro_layout = QVBoxLayout(self.intro_widget)
        intro_layout.addWidget(QLabel("Test your understanding with a short quiz."))
        self.generate_button = QPushButton("Start Intelligence Check")
        self.generate_button.setObjectName("PrimaryButton")
        intro_layout.addWidget(self.generate_button)
        intro_layout.addStretch()
        layout.addWidget(self.intro_widget)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        layout.addWidget(self.scroll_area, 1)

        self.score_label = QLabel()
        layout.addWidget(self.score_label)

        self.submit_button = QPushButton("Submit Answers")
        self.submit_button.setObjectName("PrimaryButton")
        self.retry_button = QPushButton("Try Again")
        layout.addWidget(self.submit_button)
        layout.addWidget(self.retry_button)

        self.generate_button.clicked.connect(self.quiz_requested)
        self.submit_button.clicked.connect(self.submit)
        self.retry_button.clicked.connect(self.reset_answers)

        self.set_quiz(None)

    def set_quiz(self, quiz: Optional[List[QuizQuestion]]) -> None:
        """表示するクイズを設定する。回答状態はリセットされる。"""
        self.quiz = list(quiz) if quiz else None
        self.answers = {}
        self.submitted = False
        self._rebuild()

    def set_generating(self, generating: bool) -> None:
        self.generate_button.setEnabled(not generating)
        self.generate_button.setText("Designing..." if generating else "Start Intelligence Check")

    def select_answer(self, question_id: str, option_index: int) -> None:
        if self.submitted:
            return
        self.answers[question_id] = option_index
        self._refresh_controls()

    def _on_option_toggled(self, checked: bool, question_id: str, option_index: int) -> None:
        if checked:
            self.select_answer(question_id, option_index)

    def submit(self) -> None:
        if not self.quiz or not QuizUtils.is_complete(self.quiz, self.answers):
            return
        self.submitted = True
        self._rebuild()

    def reset_answers(self) -> None:
        self.answers = {}
        self.submitted = False
        self._rebuild()

    def score(self) -> int:
        return QuizUtils.calculate_score(self.quiz or [], self.answers)

    def _rebuild(self) -> None:
        has_quiz = bool(self.quiz)
        self.intro_widget.setVisible(not has_quiz)
        self.scroll_area.setVisible(has_quiz)

        container = QWidget()
        container_layout = QVBoxLayout(container)
        self._groups = []
        for number, question in enumerate(self.quiz or [], start=1):
            container_layout.addWidget(self._create_question_box(number, question))
        container_layout.addStretch()
        self.scroll_area.setWidget(container)
        self._refresh_controls()

    def _create_question_box(self, number: int, question: QuizQuestion) -> QGroupBox:
        box = QGroupBox(f"{number}. {question.question}")
        box_layout = QVBoxLayout(box)
        group = QButtonGroup(box)
        for index, option in enumerate(question.options):
            text = option
            if self.submitted:
                if index == question.correct_answer_index:
                    text = f"✓ {option}"
                elif self.answers.get(question.id) == index:
                    text = f"✗ {option}"
            radio = QRadioButton(text)
            radio.setChecked(self.answers.get(question.id) == index)
            radio.setEnabled(not self.submitted)
            radio.toggled.connect(
                lambda checked, qid=question.id, idx=index: self._on_option_toggled(checked, qid, idx)
            )
            group.addButton(radio, index)
            box_layout.addWidget(radio)
        if self.submitted and question.explanation:
            explanation = QLabel(question.explanation)
            explanation.setWordWrap(True)
            box_layout.addWidget(explanation)
        self._groups.append(group)
        return box

    def _refresh_controls(self) -> None:
        has_quiz = bool(self.quiz)
        complete = has_quiz and QuizUtils.is_complete(self.quiz, self.answers)
        self.submit_button.setVisible(has_quiz and not self.submitted)
        self.submit_button.setEnabled(bool(complete))
        self.retry_button.setVisible(has_quiz and self.submitted)
        if has_quiz and self.submitted:
            total = len(self.quiz)
            score = self.score()
            self.score_label.setText(f"Score: {score} / {total}    Grade: {QuizUtils.get_grade(score, total)}")
        else:
            self.score_label.setText("")
