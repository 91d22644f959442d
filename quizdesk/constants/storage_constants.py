"""Storage layout constants."""

from pathlib import Path

QUIZZES_COLLECTION: str = "quizzes"
SUBMISSIONS_COLLECTION: str = "submissions"
SESSIONS_COLLECTION: str = "sessions"

DEFAULT_DATA_DIR: Path = Path.home() / ".quizdesk"
