"""Append-only ledger of scored quiz submissions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from threading import Lock
from uuid import uuid4

from quizdesk.core.clock import Clock
from quizdesk.core.errors import NotFoundError, ValidationError
from quizdesk.core.models import Quiz, Submission
from quizdesk.core.scoring import score_answers
from quizdesk.core.storage import RecordCollection

logger = logging.getLogger(__name__)


class SubmissionLedger:
    """Scores, timestamps and stores each submission exactly once.

    The ledger holds an immutable tuple snapshot. ``record`` builds the next
    snapshot, persists it and only then publishes it, so readers either see a
    fully constructed submission or none at all, and a failed save leaves the
    ledger as it was.
    """

    def __init__(self, clock: Clock, collection: RecordCollection[Submission] | None = None) -> None:
        self._clock = clock
        self._collection = collection
        self._lock = Lock()
        self._submissions: tuple[Submission, ...] = ()
        if collection is not None:
            self._submissions = collection.load()

    def record(
        self,
        quiz: Quiz,
        student_id: str,
        student_name: str,
        answers: Mapping[str, object],
        time_spent_seconds: int,
    ) -> Submission:
        student = (student_id or "").strip()
        if not student:
            raise ValidationError("Student id must not be empty.")
        if type(time_spent_seconds) is not int or time_spent_seconds < 0:
            raise ValidationError("Time spent must be a non-negative integer number of seconds.")

        result = score_answers(quiz, answers)
        # Keep only well-formed selections; anything else already scored as wrong.
        stored_answers = tuple(
            sorted(
                (key, value)
                for key, value in answers.items()
                if isinstance(key, str) and type(value) is int
            )
        )

        with self._lock:
            submission = Submission(
                id=uuid4().hex,
                quiz_id=quiz.id,
                student_id=student,
                student_name=(student_name or "").strip() or student,
                answers=stored_answers,
                score=result.score,
                total_points=result.total_points,
                submitted_at=self._clock.now(),
                time_spent_seconds=time_spent_seconds,
            )
            snapshot = self._submissions + (submission,)
            if self._collection is not None:
                self._collection.save(snapshot)
            self._submissions = snapshot

        logger.info(
            "Recorded submission %s for quiz %s by %s: %d/%d",
            submission.id,
            quiz.id,
            student,
            submission.score,
            submission.total_points,
        )
        return submission

    def all(self) -> tuple[Submission, ...]:
        return self._submissions

    def get(self, submission_id: str) -> Submission:
        for submission in self._submissions:
            if submission.id == submission_id:
                return submission
        raise NotFoundError(f"Submission '{submission_id}' not found.")

    def by_quiz(self, quiz_id: str) -> tuple[Submission, ...]:
        return tuple(s for s in self._submissions if s.quiz_id == quiz_id)

    def by_student(self, student_id: str) -> tuple[Submission, ...]:
        return tuple(s for s in self._submissions if s.student_id == student_id)

    def __len__(self) -> int:
        return len(self._submissions)


def newest_first(submissions: Iterable[Submission]) -> list[Submission]:
    """Canonical display order for result tables."""
    return sorted(submissions, key=lambda s: s.submitted_at, reverse=True)
