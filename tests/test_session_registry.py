from __future__ import annotations

import pytest

from quizdesk.core.errors import NotFoundError, ValidationError
from quizdesk.core.services.session_registry import SessionRegistry
from quizdesk.core.services.submission_ledger import SubmissionLedger


@pytest.fixture
def registry(clock) -> SessionRegistry:
    return SessionRegistry(clock)


def test_start_and_stop(registry, clock):
    session = registry.start("quiz-1", "teacher-1")
    assert session.is_live
    assert session.started_at == clock.now()
    assert registry.live_for_quiz("quiz-1") == session

    clock.advance(120)
    stopped = registry.stop(session.id)
    assert not stopped.is_live
    assert stopped.stopped_at == clock.now()
    assert registry.live_for_quiz("quiz-1") is None
    assert registry.stop(session.id) == stopped


def test_start_requires_ids(registry):
    with pytest.raises(ValidationError):
        registry.start("", "teacher-1")


def test_unknown_session(registry):
    with pytest.raises(NotFoundError):
        registry.stop("missing")
    with pytest.raises(NotFoundError):
        registry.add_participant("missing", "student-1")


def test_participants_are_a_set(registry):
    session = registry.start("quiz-1", "teacher-1")
    registry.add_participant(session.id, "student-1")
    registry.add_participant(session.id, "student-1")
    assert registry.get(session.id).participants == ("student-1",)


def test_attach_submission_only_to_live_session(registry, quiz, clock):
    submission = SubmissionLedger(clock).record(quiz, "student-2", "Kim", {}, 10)
    assert registry.attach_submission(submission) is None

    session = registry.start(quiz.id, "teacher-1")
    updated = registry.attach_submission(submission)
    assert updated.id == session.id
    assert updated.submissions == (submission,)
    assert updated.participants == ("student-2",)

    registry.stop(session.id)
    assert registry.attach_submission(submission) is None
    assert registry.get(session.id).submissions == (submission,)


def test_for_quiz_lists_all_sessions(registry):
    first = registry.start("quiz-1", "teacher-1")
    registry.stop(first.id)
    registry.start("quiz-1", "teacher-1")
    registry.start("quiz-2", "teacher-1")
    assert len(registry.for_quiz("quiz-1")) == 2
