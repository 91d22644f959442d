"""Quiz-related constants shared across the core and server layers."""

MIN_OPTIONS_PER_QUESTION: int = 2
DEFAULT_QUESTION_POINTS: int = 1

# Learner result bands, in percent.
EXCELLENT_THRESHOLD: float = 80.0
GOOD_THRESHOLD: float = 60.0

# Fields an instructor may change through QuizCatalog.update.
EDITABLE_QUIZ_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "questions", "is_active", "time_limit_minutes"}
)
