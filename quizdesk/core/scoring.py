"""Pure scoring functions. No I/O, no clock, no id resolution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from quizdesk.constants.quiz_constants import EXCELLENT_THRESHOLD, GOOD_THRESHOLD

if TYPE_CHECKING:
    from quizdesk.core.models import Quiz


@dataclass(frozen=True, slots=True)
class ScoreResult:
    score: int
    total_points: int

    @property
    def percentage(self) -> float:
        return percentage(self.score, self.total_points)


class GradeBand(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    PRACTICE = "practice"


def score_answers(quiz: Quiz, answers: Mapping[str, object]) -> ScoreResult:
    """Score an answer map against a resolved quiz.

    A question earns its points only when the selected index equals the
    correct index. Missing answers, out-of-range or non-integer selections and
    keys that match no question all count as wrong; none of them raise.
    """

    total_points = 0
    score = 0
    for question in quiz.questions:
        total_points += question.points
        selected = answers.get(question.id)
        # bool is an int subclass; True must not match option 1.
        if type(selected) is int and selected == question.correct_answer:
            score += question.points
    return ScoreResult(score=score, total_points=total_points)


def percentage(score: float, total_points: float) -> float:
    if total_points <= 0:
        return 0.0
    return score / total_points * 100


def grade_band(value: float) -> GradeBand:
    """Map a percentage to the result band shown to learners."""
    if value >= EXCELLENT_THRESHOLD:
        return GradeBand.EXCELLENT
    if value >= GOOD_THRESHOLD:
        return GradeBand.GOOD
    return GradeBand.PRACTICE
