"""Read-side folds over the submission ledger.

Every view here is recomputed from scratch from an immutable sequence of
submissions. Nothing keeps running counters.

Note on percentages: the per-quiz view divides by the quiz's *current* total,
while the per-student view divides by the totals captured on each submission.
Editing point values after the fact therefore moves the per-quiz average but
not a learner's history. Both denominators are intended; keep them distinct.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from quizdesk.core.models import Quiz, Submission


@dataclass(frozen=True, slots=True)
class QuizStats:
    """Snapshot of one quiz's results for the instructor dashboard."""

    participant_count: int
    average_score: float
    average_percentage: float
    average_time_seconds: float

    @classmethod
    def empty(cls) -> "QuizStats":
        return cls(participant_count=0, average_score=0.0, average_percentage=0.0, average_time_seconds=0.0)


@dataclass(frozen=True, slots=True)
class StudentStats:
    """Snapshot of one learner's history for the learner dashboard."""

    total_quizzes_taken: int
    total_points_earned: int
    average_percentage: float

    @classmethod
    def empty(cls) -> "StudentStats":
        return cls(total_quizzes_taken=0, total_points_earned=0, average_percentage=0.0)


@dataclass(frozen=True, slots=True)
class OwnerOverview:
    total_quizzes: int
    active_quizzes: int
    total_questions: int


def quiz_stats(quiz: Quiz | None, submissions: Sequence[Submission]) -> QuizStats:
    """Aggregate a quiz's submissions against the quiz's current point total.

    A missing quiz (for example one deleted after submissions were recorded)
    yields the empty result.
    """

    if quiz is None:
        return QuizStats.empty()
    count = len(submissions)
    if count == 0:
        return QuizStats.empty()

    total_score = sum(s.score for s in submissions)
    total_time = sum(s.time_spent_seconds for s in submissions)
    possible = count * quiz.total_points
    return QuizStats(
        participant_count=count,
        average_score=total_score / count,
        average_percentage=(total_score / possible * 100) if possible > 0 else 0.0,
        average_time_seconds=total_time / count,
    )


def student_stats(submissions: Sequence[Submission]) -> StudentStats:
    """Aggregate a learner's submissions using each submission's captured total."""

    if not submissions:
        return StudentStats.empty()
    earned = sum(s.score for s in submissions)
    possible = sum(s.total_points for s in submissions)
    return StudentStats(
        total_quizzes_taken=len(submissions),
        total_points_earned=earned,
        average_percentage=(earned / possible * 100) if possible > 0 else 0.0,
    )


def owner_overview(quizzes: Iterable[Quiz]) -> OwnerOverview:
    quizzes = list(quizzes)
    return OwnerOverview(
        total_quizzes=len(quizzes),
        active_quizzes=sum(1 for quiz in quizzes if quiz.is_active),
        total_questions=sum(len(quiz.questions) for quiz in quizzes),
    )
