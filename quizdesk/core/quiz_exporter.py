"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path
import string

from quizdesk.core.models import Question, Quiz

_OPTION_LETTERS = string.ascii_uppercase
_BLANK_LINE_MARKER = "."


def save_quiz_to_file(file_path: Path, quiz: Quiz) -> None:
    """Persist a quiz to disk in the text import format."""

    if not quiz.questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = Path(file_path).resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz), encoding="utf-8")


def serialize_quiz(quiz: Quiz) -> str:
    header = [f"TITLE: {quiz.title}", f"DESCRIPTION: {quiz.description}"]
    if quiz.time_limit_minutes is not None:
        header.append(f"TIMELIMIT: {quiz.time_limit_minutes}")
    blocks = ["\n".join(header)] + [_serialize_question(question) for question in quiz.questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = [f"ID: {question.id}"]

    question_lines = _text_lines(question.prompt)
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    for letter, option_text in zip(_OPTION_LETTERS, question.options):
        option_lines = _text_lines(option_text)
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {_OPTION_LETTERS[question.correct_answer]}")
    lines.append(f"POINTS: {question.points}")
    return "\n".join(lines)


def _text_lines(text: str) -> list[str]:
    # A blank line would end the block on import.
    lines = text.splitlines() or [text]
    return [line if line.strip() else _BLANK_LINE_MARKER for line in lines]
