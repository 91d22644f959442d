"""Business logic shared by the API and any other presentation layer."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path
from threading import Lock

from quizdesk.constants.storage_constants import (
    QUIZZES_COLLECTION,
    SESSIONS_COLLECTION,
    SUBMISSIONS_COLLECTION,
)
from quizdesk.core.clock import Clock, SystemClock
from quizdesk.core.errors import NotFoundError, QuizDeskError, ValidationError
from quizdesk.core.models import Question, Quiz, Session, Submission
from quizdesk.core.quiz_exporter import save_quiz_to_file
from quizdesk.core.quiz_importer import load_quiz_from_file
from quizdesk.core.services.quiz_catalog import QuizCatalog
from quizdesk.core.services.session_registry import SessionRegistry
from quizdesk.core.services.statistics import (
    OwnerOverview,
    QuizStats,
    StudentStats,
    owner_overview,
    quiz_stats,
    student_stats,
)
from quizdesk.core.services.submission_ledger import SubmissionLedger, newest_first
from quizdesk.core.storage import InMemoryStore, KeyValueStore, RecordCollection

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: Catalog, Ledger, Sessions and Statistics.

    Build one per process and hand it to whoever needs it. Tests build as
    many isolated instances as they like.
    """

    def __init__(self, store: KeyValueStore | None = None, clock: Clock | None = None) -> None:
        self._lock = Lock()
        self._store = store if store is not None else InMemoryStore()
        self._clock = clock if clock is not None else SystemClock()

        # Services
        self._catalog = QuizCatalog(
            self._clock, RecordCollection(self._store, QUIZZES_COLLECTION, Quiz)
        )
        self._ledger = SubmissionLedger(
            self._clock, RecordCollection(self._store, SUBMISSIONS_COLLECTION, Submission)
        )
        self._sessions = SessionRegistry(
            self._clock, RecordCollection(self._store, SESSIONS_COLLECTION, Session)
        )

    # --- Presentation entry points ---

    def list_quizzes(self, owner_id: str | None = None) -> list[Quiz]:
        return self._catalog.list(owner_id)

    def submit_quiz(
        self,
        quiz_id: str,
        student_id: str,
        student_name: str,
        answers: Mapping[str, object],
        time_spent_seconds: int,
    ) -> Submission:
        """Score and record one finished attempt.

        Either the submission is in the ledger when this returns, or an error
        is raised and the ledger is unchanged.
        """
        with self._lock:
            quiz = self._catalog.get(quiz_id)
            submission = self._ledger.record(
                quiz, student_id, student_name, answers, time_spent_seconds
            )
            try:
                self._sessions.attach_submission(submission)
            except QuizDeskError:
                logger.warning(
                    "Submission %s recorded but could not be attached to the live session of quiz %s",
                    submission.id,
                    quiz_id,
                    exc_info=True,
                )
            return submission

    def get_results(self, quiz_id: str, owner_id: str | None = None) -> list[Submission]:
        """Submissions for a quiz, newest first.

        With ``owner_id`` the call is scoped to the quiz's instructor; results
        of a deleted quiz are still returned when no owner scope is requested.
        """
        if owner_id is not None:
            quiz = self._catalog.get(quiz_id)
            if quiz.owner_id != owner_id:
                raise NotFoundError(f"Quiz '{quiz_id}' not found.")
        return newest_first(self._ledger.by_quiz(quiz_id))

    def get_student_history(self, student_id: str) -> list[Submission]:
        return newest_first(self._ledger.by_student(student_id))

    # --- Quiz Catalog Delegation ---

    def create_quiz(
        self,
        *,
        title: str,
        description: str,
        owner_id: str,
        questions: list[Question],
        is_active: bool = True,
        time_limit_minutes: int | None = None,
    ) -> Quiz:
        return self._catalog.create(
            title=title,
            description=description,
            owner_id=owner_id,
            questions=questions,
            is_active=is_active,
            time_limit_minutes=time_limit_minutes,
        )

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._catalog.get(quiz_id)

    def update_quiz(self, quiz_id: str, *, owner_id: str | None = None, **fields: object) -> Quiz:
        return self._catalog.update(quiz_id, owner_id=owner_id, **fields)

    def set_quiz_active(self, quiz_id: str, active: bool, *, owner_id: str | None = None) -> Quiz:
        return self._catalog.set_active(quiz_id, active, owner_id=owner_id)

    def delete_quiz(self, quiz_id: str, *, owner_id: str | None = None) -> bool:
        return self._catalog.delete(quiz_id, owner_id=owner_id)

    def import_quiz(self, file_path: Path, owner_id: str, *, is_active: bool = False) -> Quiz:
        """Create a quiz from a text file. Imported quizzes start hidden by default."""
        imported = load_quiz_from_file(file_path)
        title = imported.title or Path(file_path).stem
        if not imported.description:
            raise ValidationError("Imported quiz needs a DESCRIPTION header.")
        return self._catalog.create(
            title=title,
            description=imported.description,
            owner_id=owner_id,
            questions=imported.questions,
            is_active=is_active,
            time_limit_minutes=imported.time_limit_minutes,
        )

    def export_quiz(self, quiz_id: str, file_path: Path) -> None:
        save_quiz_to_file(file_path, self._catalog.get(quiz_id))

    # --- Statistics ---

    def get_quiz_stats(self, quiz_id: str) -> QuizStats:
        quiz = self._catalog.find(quiz_id)
        if quiz is None:
            return QuizStats.empty()
        return quiz_stats(quiz, self._ledger.by_quiz(quiz_id))

    def get_student_stats(self, student_id: str) -> StudentStats:
        return student_stats(self._ledger.by_student(student_id))

    def get_owner_overview(self, owner_id: str) -> OwnerOverview:
        return owner_overview(self._catalog.list(owner_id))

    # --- Session Delegation ---

    def start_live_session(self, quiz_id: str, owner_id: str) -> Session:
        quiz = self._catalog.get(quiz_id)
        if quiz.owner_id != owner_id:
            raise NotFoundError(f"Quiz '{quiz_id}' not found.")
        return self._sessions.start(quiz_id, owner_id)

    def stop_live_session(self, session_id: str) -> Session:
        return self._sessions.stop(session_id)

    def get_live_session(self, quiz_id: str) -> Session | None:
        return self._sessions.live_for_quiz(quiz_id)

    def get_session(self, session_id: str) -> Session:
        return self._sessions.get(session_id)

    def join_live_session(self, session_id: str, student_id: str) -> Session:
        return self._sessions.add_participant(session_id, student_id)
