"""Static metadata describing QuizDesk."""

APP_NAME = "QuizDesk"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizDesk lets instructors author multiple-choice quizzes and learners take them. "
    "It scores every submission once, keeps an append-only ledger and derives dashboard statistics."
)
