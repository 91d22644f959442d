"""Request and response schemas for the HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from quizdesk.core.models import Question, Quiz, Session, Submission
from quizdesk.core.scoring import grade_band


class QuestionIn(BaseModel):
    id: str | None = None
    prompt: str
    options: list[str]
    correct_answer: int
    points: int = 1

    def to_question(self) -> Question:
        return Question(
            id=self.id or "",
            prompt=self.prompt,
            options=tuple(self.options),
            correct_answer=self.correct_answer,
            points=self.points,
        )


class QuizCreateIn(BaseModel):
    title: str
    description: str
    owner_id: str
    questions: list[QuestionIn]
    is_active: bool = True
    time_limit_minutes: int | None = None


class QuizUpdateIn(BaseModel):
    """Partial update; only the fields that are sent are changed."""

    owner_id: str | None = None
    title: str | None = None
    description: str | None = None
    questions: list[QuestionIn] | None = None
    is_active: bool | None = None
    time_limit_minutes: int | None = None


class ActiveIn(BaseModel):
    active: bool
    owner_id: str | None = None


class SubmissionIn(BaseModel):
    student_id: str
    student_name: str = ""
    # Values pass through unconverted; anything but an int index scores as wrong.
    answers: dict[str, Any] = Field(default_factory=dict)
    time_spent_seconds: int = Field(0, ge=0)


class SessionStartIn(BaseModel):
    owner_id: str


class ParticipantIn(BaseModel):
    student_id: str


class QuestionOut(BaseModel):
    id: str
    prompt: str
    options: list[str]
    correct_answer: int
    points: int


class LearnerQuestionOut(BaseModel):
    """Question as shown while taking a quiz: no correct answer."""

    id: str
    prompt_html: str
    options: list[str]
    points: int


class QuizOut(BaseModel):
    id: str
    title: str
    description: str
    owner_id: str
    is_active: bool
    time_limit_minutes: int | None
    total_points: int
    question_count: int
    created_at: datetime
    updated_at: datetime
    questions: list[QuestionOut]

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizOut":
        return cls(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            owner_id=quiz.owner_id,
            is_active=quiz.is_active,
            time_limit_minutes=quiz.time_limit_minutes,
            total_points=quiz.total_points,
            question_count=len(quiz.questions),
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
            questions=[
                QuestionOut(
                    id=q.id,
                    prompt=q.prompt,
                    options=list(q.options),
                    correct_answer=q.correct_answer,
                    points=q.points,
                )
                for q in quiz.questions
            ],
        )


class LearnerQuizOut(BaseModel):
    id: str
    title: str
    description: str
    time_limit_minutes: int | None
    total_points: int
    questions: list[LearnerQuestionOut]


class SubmissionOut(BaseModel):
    id: str
    quiz_id: str
    student_id: str
    student_name: str
    answers: dict[str, int]
    score: int
    total_points: int
    percentage: float
    grade: str
    submitted_at: datetime
    time_spent_seconds: int

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionOut":
        return cls(
            id=submission.id,
            quiz_id=submission.quiz_id,
            student_id=submission.student_id,
            student_name=submission.student_name,
            answers=submission.answer_map,
            score=submission.score,
            total_points=submission.total_points,
            percentage=round(submission.percentage, 1),
            grade=grade_band(submission.percentage).value,
            submitted_at=submission.submitted_at,
            time_spent_seconds=submission.time_spent_seconds,
        )


class SessionOut(BaseModel):
    id: str
    quiz_id: str
    owner_id: str
    is_live: bool
    started_at: datetime
    stopped_at: datetime | None
    participants: list[str]
    submission_ids: list[str]

    @classmethod
    def from_session(cls, session: Session) -> "SessionOut":
        return cls(
            id=session.id,
            quiz_id=session.quiz_id,
            owner_id=session.owner_id,
            is_live=session.is_live,
            started_at=session.started_at,
            stopped_at=session.stopped_at,
            participants=list(session.participants),
            submission_ids=[s.id for s in session.submissions],
        )
