from __future__ import annotations

import pytest

from conftest import make_questions
from quizdesk.core.clock import ManualClock
from quizdesk.core.errors import NotFoundError, ValidationError
from quizdesk.core.models import Question
from quizdesk.core.services.quiz_catalog import QuizCatalog


@pytest.fixture
def catalog(clock: ManualClock) -> QuizCatalog:
    return QuizCatalog(clock)


def _create(catalog: QuizCatalog, **overrides):
    params = {
        "title": "Quiz",
        "description": "About things",
        "owner_id": "teacher-1",
        "questions": make_questions(5, 5),
    }
    params.update(overrides)
    return catalog.create(**params)


def test_create_assigns_id_and_timestamps(catalog, clock):
    quiz = _create(catalog)
    assert quiz.id
    assert quiz.created_at == quiz.updated_at == clock.now()
    assert quiz.total_points == 10
    assert catalog.get(quiz.id) == quiz


def test_create_assigns_missing_question_ids(catalog):
    quiz = _create(catalog, questions=[Question("", "Why?", ("a", "b"), 0, 2)])
    assert quiz.questions[0].id


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "  "},
        {"description": ""},
        {"questions": []},
        {"questions": [Question("q1", "Only one option", ("a",), 0, 1)]},
        {"questions": [Question("q1", "Bad index", ("a", "b"), 2, 1)]},
        {"questions": [Question("q1", "Negative index", ("a", "b"), -1, 1)]},
        {"questions": [Question("q1", "No points", ("a", "b"), 0, 0)]},
        {"questions": [Question("q1", "A", ("a", "b"), 0, 1), Question("q1", "B", ("a", "b"), 0, 1)]},
        {"time_limit_minutes": 0},
        {"owner_id": ""},
    ],
)
def test_create_rejects_invalid_definitions(catalog, overrides):
    with pytest.raises(ValidationError):
        _create(catalog, **overrides)
    assert catalog.list("teacher-1") == []


def test_duplicate_options_are_allowed(catalog):
    quiz = _create(catalog, questions=[Question("q1", "Pick", ("same", "same"), 1, 1)])
    assert quiz.questions[0].options == ("same", "same")


def test_update_merges_fields_and_refreshes_timestamp(catalog, clock):
    quiz = _create(catalog)
    clock.advance(60)
    updated = catalog.update(quiz.id, title="Renamed")
    assert updated.title == "Renamed"
    assert updated.description == quiz.description
    assert updated.created_at == quiz.created_at
    assert updated.updated_at > quiz.updated_at


def test_update_revalidates_questions(catalog):
    quiz = _create(catalog)
    with pytest.raises(ValidationError):
        catalog.update(quiz.id, questions=[Question("q1", "x", ("a", "b"), 5, 1)])
    assert catalog.get(quiz.id) == quiz


def test_update_rejects_non_editable_fields(catalog):
    quiz = _create(catalog)
    with pytest.raises(ValidationError):
        catalog.update(quiz.id, owner_id_override="someone")


@pytest.mark.parametrize("value", [None, 0, 1, "false"])
def test_update_requires_boolean_is_active(catalog, value):
    quiz = _create(catalog)
    with pytest.raises(ValidationError):
        catalog.update(quiz.id, is_active=value)
    assert catalog.get(quiz.id).is_active
    assert catalog.update(quiz.id, is_active=False).is_active is False


def test_update_unknown_quiz(catalog):
    with pytest.raises(NotFoundError):
        catalog.update("missing", title="x")


def test_owner_scoping_hides_other_owners_quiz(catalog):
    quiz = _create(catalog)
    with pytest.raises(NotFoundError):
        catalog.update(quiz.id, owner_id="teacher-2", title="Hijacked")
    with pytest.raises(NotFoundError):
        catalog.delete(quiz.id, owner_id="teacher-2")
    assert catalog.get(quiz.id).title == "Quiz"


def test_list_by_owner_includes_inactive(catalog):
    active = _create(catalog)
    hidden = _create(catalog, is_active=False)
    _create(catalog, owner_id="teacher-2")
    assert catalog.list("teacher-1") == [active, hidden]


def test_list_without_owner_returns_only_active(catalog):
    active = _create(catalog)
    _create(catalog, is_active=False)
    assert catalog.list() == [active]


def test_set_active_toggles_visibility_only(catalog):
    quiz = _create(catalog)
    hidden = catalog.set_active(quiz.id, False)
    assert not hidden.is_active
    assert hidden.questions == quiz.questions
    assert catalog.list() == []


def test_delete(catalog):
    quiz = _create(catalog)
    assert catalog.delete(quiz.id) is True
    assert catalog.delete(quiz.id) is False
    assert catalog.find(quiz.id) is None
    with pytest.raises(NotFoundError):
        catalog.get(quiz.id)
