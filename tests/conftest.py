from __future__ import annotations

import pytest

from quizdesk.core.clock import ManualClock
from quizdesk.core.models import Question
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.core.storage import InMemoryStore


def make_questions(*points: int) -> list[Question]:
    """Questions q1..qN whose correct answer is always option index 1."""
    return [
        Question(
            id=f"q{index}",
            prompt=f"Question {index}?",
            options=("wrong", "right", "also wrong"),
            correct_answer=1,
            points=value,
        )
        for index, value in enumerate(points, start=1)
    ]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def manager(store: InMemoryStore, clock: ManualClock) -> QuizManager:
    return QuizManager(store=store, clock=clock)


@pytest.fixture
def quiz(manager: QuizManager):
    return manager.create_quiz(
        title="Fractions",
        description="Adding and comparing fractions",
        owner_id="teacher-1",
        questions=make_questions(10, 15),
        time_limit_minutes=10,
    )
