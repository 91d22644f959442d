"""Utilities for importing quizzes from a human-friendly text file.

File format (blocks separated by blank lines or '---'):

    TITLE: Quiz title                (header block, optional)
    DESCRIPTION: One-line summary    (header block, optional)
    TIMELIMIT: minutes               (header block, optional)

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question. A line holding only
       "." stands for an empty line. A letter followed by a colon opens an
       option only when it is the next letter in sequence.
    A: First option text
    B: Second option text
    ...                              (at least two options, letters in order)
    CORRECT: B
    POINTS: 10                       (optional, defaults to 1)
    ID: q1                           (optional, assigned when the quiz is created)

Example:

    TITLE: Arithmetic
    DESCRIPTION: Warm-up questions

    Q: What is $2 + 2$?
    A: 3
    B: 4
    CORRECT: B
    POINTS: 5
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import string

from quizdesk.constants.quiz_constants import DEFAULT_QUESTION_POINTS, MIN_OPTIONS_PER_QUESTION
from quizdesk.core.errors import ValidationError
from quizdesk.core.models import Question


class QuizImportError(ValidationError):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    title: str | None
    description: str | None
    time_limit_minutes: int | None
    questions: list[Question]
    source_path: Path | None = None


_OPTION_LETTERS = string.ascii_uppercase
_HEADER_KEYS = ("TITLE:", "DESCRIPTION:", "TIMELIMIT:")
# Written in place of an empty line inside a prompt or option.
_BLANK_LINE_MARKER = "."


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = Path(file_path).read_text(encoding="utf-8")
    imported = parse_quiz_text(text)
    imported.source_path = Path(file_path)
    return imported


def parse_quiz_text(text: str) -> ImportedQuiz:
    blocks = _split_blocks(text)
    header: dict[str, str] = {}
    if blocks and blocks[0].lstrip().upper().startswith(_HEADER_KEYS):
        header = _parse_header(blocks.pop(0))

    questions = [_parse_block(block) for block in blocks]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    time_limit = None
    if "TIMELIMIT" in header:
        time_limit = _parse_positive_int(header["TIMELIMIT"], "TIMELIMIT")
    return ImportedQuiz(
        title=header.get("TITLE"),
        description=header.get("DESCRIPTION"),
        time_limit_minutes=time_limit,
        questions=questions,
    )


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key, sep, value = line.partition(":")
        key = key.strip().upper()
        if not sep or f"{key}:" not in _HEADER_KEYS:
            raise QuizImportError(f"Unknown header line: '{line}'.")
        header[key] = value.strip()
    return header


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: list[str] = []
    correct_letter: str | None = None
    points = DEFAULT_QUESTION_POINTS
    question_id = ""
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("POINTS:"):
            points = _parse_positive_int(line.split(":", 1)[1].strip(), "POINTS")
            current_section = None
            continue

        if upper.startswith("ID:"):
            question_id = line.split(":", 1)[1].strip()
            current_section = None
            continue

        # Only the next letter in sequence opens an option; any other
        # "x: ..." line is continuation text.
        if len(options) < len(_OPTION_LETTERS) and upper.startswith(f"{_OPTION_LETTERS[len(options)]}:"):
            options.append(line[2:].strip())
            current_section = "OPTION"
            continue

        if line == _BLANK_LINE_MARKER:
            line = ""
        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "OPTION":
            options[-1] = options[-1] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text missing (Q: ...)")

    if len(options) < MIN_OPTIONS_PER_QUESTION:
        raise QuizImportError(f"Each question must define at least {MIN_OPTIONS_PER_QUESTION} options.")

    option_list = [option.strip() for option in options]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    letters = list(_OPTION_LETTERS[: len(option_list)])
    if correct_letter is None:
        raise QuizImportError("CORRECT is required for every question.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    return Question(
        id=question_id,
        prompt=question_text,
        options=tuple(option_list),
        correct_answer=letters.index(correct_letter),
        points=points,
    )


def _parse_positive_int(raw_value: str, label: str) -> int:
    if not raw_value:
        raise QuizImportError(f"{label} must include an integer value.")
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{label} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuizImportError(f"{label} must be a positive integer.")
    return parsed_value
