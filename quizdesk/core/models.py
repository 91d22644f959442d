"""Domain models for the quiz engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from quizdesk.constants.quiz_constants import DEFAULT_QUESTION_POINTS
from quizdesk.core.scoring import percentage


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with a single correct option."""

    id: str
    prompt: str
    options: tuple[str, ...]
    correct_answer: int
    points: int = DEFAULT_QUESTION_POINTS


@dataclass(frozen=True, slots=True)
class Quiz:
    """Ordered set of questions authored by one instructor."""

    id: str
    title: str
    description: str
    owner_id: str
    questions: tuple[Question, ...]
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
    time_limit_minutes: int | None = None  # None means untimed

    @property
    def total_points(self) -> int:
        # Always derived from the current questions, never stored.
        return sum(question.points for question in self.questions)


@dataclass(frozen=True, slots=True)
class Submission:
    """One learner's finished attempt; the score is locked in at creation.

    ``answers`` holds ``(question_id, selected_index)`` pairs sorted by
    question id, so the record stays hashable and cannot be edited in place.
    """

    id: str
    quiz_id: str
    student_id: str
    student_name: str
    answers: tuple[tuple[str, int], ...]
    score: int
    total_points: int
    submitted_at: datetime
    time_spent_seconds: int

    @property
    def answer_map(self) -> dict[str, int]:
        """Fresh dict copy of the selections; changing it does not touch the record."""
        return dict(self.answers)

    @property
    def percentage(self) -> float:
        return percentage(self.score, self.total_points)


@dataclass(frozen=True, slots=True)
class Session:
    """Passive record of a quiz being administered live."""

    id: str
    quiz_id: str
    owner_id: str
    started_at: datetime
    is_live: bool = True
    stopped_at: datetime | None = None
    participants: tuple[str, ...] = ()
    submissions: tuple[Submission, ...] = field(default_factory=tuple)
