"""Service for managing quiz definitions."""

from __future__ import annotations

from dataclasses import replace
import logging
from threading import Lock
from uuid import uuid4

from quizdesk.constants.quiz_constants import EDITABLE_QUIZ_FIELDS, MIN_OPTIONS_PER_QUESTION
from quizdesk.core.clock import Clock
from quizdesk.core.errors import NotFoundError, ValidationError
from quizdesk.core.models import Question, Quiz
from quizdesk.core.storage import RecordCollection

logger = logging.getLogger(__name__)


class QuizCatalog:
    """Owns quiz definitions: create, edit, delete, list and visibility."""

    def __init__(self, clock: Clock, collection: RecordCollection[Quiz] | None = None) -> None:
        self._clock = clock
        self._collection = collection
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}
        if collection is not None:
            self._quizzes = {quiz.id: quiz for quiz in collection.load()}

    def create(
        self,
        *,
        title: str,
        description: str,
        owner_id: str,
        questions: list[Question],
        is_active: bool = True,
        time_limit_minutes: int | None = None,
    ) -> Quiz:
        """Validate a definition and store it under a fresh id."""
        owner = (owner_id or "").strip()
        if not owner:
            raise ValidationError("Quiz owner must not be empty.")
        now = self._clock.now()
        quiz = Quiz(
            id=uuid4().hex,
            title=self._clean_text(title, "Quiz title"),
            description=self._clean_text(description, "Quiz description"),
            owner_id=owner,
            questions=self._prepare_questions(questions),
            created_at=now,
            updated_at=now,
            is_active=bool(is_active),
            time_limit_minutes=self._normalize_time_limit(time_limit_minutes),
        )
        with self._lock:
            updated = dict(self._quizzes)
            updated[quiz.id] = quiz
            self._commit(updated)
        logger.info("Created quiz %s (%d questions) for %s", quiz.id, len(quiz.questions), owner)
        return quiz

    def get(self, quiz_id: str) -> Quiz:
        with self._lock:
            quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz '{quiz_id}' not found.")
        return quiz

    def find(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            return self._quizzes.get(quiz_id)

    def list(self, owner_id: str | None = None) -> list[Quiz]:
        """All quizzes of an owner, or every active quiz when no owner is given."""
        with self._lock:
            quizzes = list(self._quizzes.values())
        if owner_id is not None:
            return [quiz for quiz in quizzes if quiz.owner_id == owner_id]
        return [quiz for quiz in quizzes if quiz.is_active]

    def update(self, quiz_id: str, *, owner_id: str | None = None, **fields: object) -> Quiz:
        unknown = set(fields) - EDITABLE_QUIZ_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self._get_owned(quiz_id, owner_id)
            changes: dict[str, object] = {}
            if "title" in fields:
                changes["title"] = self._clean_text(fields["title"], "Quiz title")
            if "description" in fields:
                changes["description"] = self._clean_text(fields["description"], "Quiz description")
            if "questions" in fields:
                changes["questions"] = self._prepare_questions(fields["questions"])
            if "is_active" in fields:
                if type(fields["is_active"]) is not bool:
                    raise ValidationError("is_active must be true or false.")
                changes["is_active"] = fields["is_active"]
            if "time_limit_minutes" in fields:
                changes["time_limit_minutes"] = self._normalize_time_limit(fields["time_limit_minutes"])

            quiz = replace(current, updated_at=self._clock.now(), **changes)
            updated = dict(self._quizzes)
            updated[quiz_id] = quiz
            self._commit(updated)
        logger.info("Updated quiz %s (%s)", quiz_id, ", ".join(sorted(changes)) or "no fields")
        return quiz

    def set_active(self, quiz_id: str, active: bool, *, owner_id: str | None = None) -> Quiz:
        with self._lock:
            current = self._get_owned(quiz_id, owner_id)
            quiz = replace(current, is_active=bool(active), updated_at=self._clock.now())
            updated = dict(self._quizzes)
            updated[quiz_id] = quiz
            self._commit(updated)
        logger.info("Quiz %s is now %s", quiz_id, "active" if quiz.is_active else "inactive")
        return quiz

    def delete(self, quiz_id: str, *, owner_id: str | None = None) -> bool:
        """Remove a quiz. Submissions that reference it are left untouched."""
        with self._lock:
            if quiz_id not in self._quizzes:
                return False
            self._get_owned(quiz_id, owner_id)
            updated = dict(self._quizzes)
            del updated[quiz_id]
            self._commit(updated)
        logger.info("Deleted quiz %s", quiz_id)
        return True

    def _get_owned(self, quiz_id: str, owner_id: str | None) -> Quiz:
        quiz = self._quizzes.get(quiz_id)
        # Another owner's quiz is reported exactly like a missing one.
        if quiz is None or (owner_id is not None and quiz.owner_id != owner_id):
            raise NotFoundError(f"Quiz '{quiz_id}' not found.")
        return quiz

    def _commit(self, quizzes: dict[str, Quiz]) -> None:
        if self._collection is not None:
            self._collection.save(tuple(quizzes.values()))
        self._quizzes = quizzes

    def _prepare_questions(self, questions: object) -> tuple[Question, ...]:
        if not isinstance(questions, (list, tuple)) or not questions:
            raise ValidationError("Quiz must contain at least one question.")
        prepared = tuple(self._prepare_question(q, position) for position, q in enumerate(questions, 1))
        seen: set[str] = set()
        for question in prepared:
            if question.id in seen:
                raise ValidationError(f"Duplicate question id '{question.id}'.")
            seen.add(question.id)
        return prepared

    def _prepare_question(self, question: object, position: int) -> Question:
        """Validate and normalize a question before storage."""
        if not isinstance(question, Question):
            raise ValidationError(f"Question {position} is not a Question.")
        prompt = self._clean_text(question.prompt, f"Question {position} prompt")
        options = self._validate_options(question.options, position)
        correct = question.correct_answer
        if type(correct) is not int or not 0 <= correct < len(options):
            raise ValidationError(
                f"Question {position}: correct answer must be an index between 0 and {len(options) - 1}."
            )
        points = question.points
        if type(points) is not int or points <= 0:
            raise ValidationError(f"Question {position}: points must be a positive integer.")
        question_id = (question.id or "").strip() or uuid4().hex
        return Question(
            id=question_id,
            prompt=prompt,
            options=options,
            correct_answer=correct,
            points=points,
        )

    @staticmethod
    def _validate_options(options: object, position: int) -> tuple[str, ...]:
        if not isinstance(options, (list, tuple)) or len(options) < MIN_OPTIONS_PER_QUESTION:
            raise ValidationError(
                f"Question {position} must have at least {MIN_OPTIONS_PER_QUESTION} options."
            )
        cleaned = tuple(str(option).strip() for option in options)
        if any(not option for option in cleaned):
            raise ValidationError(f"Question {position}: option text cannot be empty.")
        return cleaned

    @staticmethod
    def _clean_text(value: object, label: str) -> str:
        cleaned = value.strip() if isinstance(value, str) else ""
        if not cleaned:
            raise ValidationError(f"{label} must not be empty.")
        return cleaned

    @staticmethod
    def _normalize_time_limit(time_limit_minutes: object) -> int | None:
        if time_limit_minutes is None:
            return None
        if type(time_limit_minutes) is not int:
            raise ValidationError("Time limit must be provided as an integer number of minutes.")
        if time_limit_minutes <= 0:
            raise ValidationError("Time limit must be a positive integer.")
        return time_limit_minutes
