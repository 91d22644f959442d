"""Service for tracking live quiz sessions and the submissions they collect."""

from __future__ import annotations

from dataclasses import replace
import logging
from threading import Lock
from uuid import uuid4

from quizdesk.core.clock import Clock
from quizdesk.core.errors import NotFoundError, ValidationError
from quizdesk.core.models import Session, Submission
from quizdesk.core.storage import RecordCollection

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Passive bookkeeping for live sessions. Nothing here broadcasts."""

    def __init__(self, clock: Clock, collection: RecordCollection[Session] | None = None) -> None:
        self._clock = clock
        self._collection = collection
        self._lock = Lock()
        self._sessions: dict[str, Session] = {}
        if collection is not None:
            self._sessions = {session.id: session for session in collection.load()}

    def start(self, quiz_id: str, owner_id: str) -> Session:
        """Open a live session. Uniqueness per quiz is the caller's concern."""
        if not quiz_id or not owner_id:
            raise ValidationError("Both quiz id and owner id are required to start a session.")
        session = Session(
            id=uuid4().hex,
            quiz_id=quiz_id,
            owner_id=owner_id,
            started_at=self._clock.now(),
        )
        with self._lock:
            if self._live_for_quiz_unlocked(quiz_id) is not None:
                logger.warning("Quiz %s already has a live session; attribution will be ambiguous", quiz_id)
            self._store(session)
        logger.info("Started session %s for quiz %s", session.id, quiz_id)
        return session

    def stop(self, session_id: str) -> Session:
        with self._lock:
            session = self._get_unlocked(session_id)
            if not session.is_live:
                return session
            session = replace(session, is_live=False, stopped_at=self._clock.now())
            self._store(session)
        logger.info("Stopped session %s (%d submissions)", session_id, len(session.submissions))
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            return self._get_unlocked(session_id)

    def for_quiz(self, quiz_id: str) -> list[Session]:
        with self._lock:
            return [s for s in self._sessions.values() if s.quiz_id == quiz_id]

    def live_for_quiz(self, quiz_id: str) -> Session | None:
        with self._lock:
            return self._live_for_quiz_unlocked(quiz_id)

    def add_participant(self, session_id: str, student_id: str) -> Session:
        if not student_id:
            raise ValidationError("Student id must not be empty.")
        with self._lock:
            session = self._get_unlocked(session_id)
            if student_id in session.participants:
                return session
            session = replace(session, participants=session.participants + (student_id,))
            self._store(session)
        return session

    def attach_submission(self, submission: Submission) -> Session | None:
        """Bucket a submission into its quiz's live session, if one is open."""
        with self._lock:
            session = self._live_for_quiz_unlocked(submission.quiz_id)
            if session is None:
                return None
            participants = session.participants
            if submission.student_id not in participants:
                participants = participants + (submission.student_id,)
            session = replace(
                session,
                participants=participants,
                submissions=session.submissions + (submission,),
            )
            self._store(session)
        return session

    def _live_for_quiz_unlocked(self, quiz_id: str) -> Session | None:
        return next(
            (s for s in self._sessions.values() if s.quiz_id == quiz_id and s.is_live),
            None,
        )

    def _get_unlocked(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session '{session_id}' not found.")
        return session

    def _store(self, session: Session) -> None:
        sessions = dict(self._sessions)
        sessions[session.id] = session
        if self._collection is not None:
            self._collection.save(tuple(sessions.values()))
        self._sessions = sessions
