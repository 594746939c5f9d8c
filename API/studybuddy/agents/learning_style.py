"""
Learning-style quiz scoring.

Counts how often each style was picked and reports the dominant one. Ties go
to the style listed first (visual, auditory, kinesthetic, reading).
"""
from __future__ import annotations

from typing import Mapping

from studybuddy.core.logging import DOMAIN_QUIZ, get_domain_logger
from studybuddy.data.learning_style_quiz import LEARNING_STYLE_DESCRIPTIONS, QUESTIONS
from studybuddy.schemas.chat import LearningStyle

logger = get_domain_logger(__name__, DOMAIN_QUIZ)


def tally_answers(answers: Mapping[int, str]) -> dict[str, int]:
    counts = {style.value: 0 for style in LearningStyle}
    for style in answers.values():
        key = style.value if isinstance(style, LearningStyle) else str(style)
        if key in counts:
            counts[key] += 1
    return counts


def dominant_style(counts: Mapping[str, int]) -> LearningStyle | None:
    best: str | None = None
    best_count = 0
    for style, count in counts.items():
        if count > best_count:
            best, best_count = style, count
    return LearningStyle(best) if best else None


def score_quiz(answers: Mapping[int, str]) -> dict:
    counts = tally_answers(answers)
    style = dominant_style(counts)
    logger.info("Quiz scored | answered=%d result=%s", len(answers), style.value if style else None)
    return {
        "learning_style": style,
        "description": LEARNING_STYLE_DESCRIPTIONS.get(style.value, "") if style else "",
        "counts": counts,
    }


class LearningStyleQuiz:
    """Walks through the questions one at a time, like the quiz page does."""

    def __init__(self, questions: list[dict] | None = None):
        self.questions = questions or QUESTIONS
        self.current = 0
        self.answers: dict[int, str] = {}
        self.result: dict | None = None

    @property
    def question(self) -> dict:
        return self.questions[self.current]

    @property
    def is_last(self) -> bool:
        return self.current == len(self.questions) - 1

    @property
    def finished(self) -> bool:
        return self.result is not None

    def answer(self, value: str) -> None:
        allowed = {option["value"] for option in self.question["options"]}
        if value not in allowed:
            raise ValueError(f"'{value}' is not an option for question {self.question['id']}")
        self.answers[self.question["id"]] = value

    def next(self) -> bool:
        """Advance; on the last question compute the result instead. Returns True when finished."""
        if not self.is_last:
            self.current += 1
            return False
        self.result = score_quiz(self.answers)
        return True

    def previous(self) -> None:
        if self.current > 0:
            self.current -= 1
