"""Exception taxonomy shared by the catalog, ledger and storage layers."""

from __future__ import annotations


class QuizDeskError(Exception):
    """Base class for every error raised by the quiz engine."""


class ValidationError(QuizDeskError, ValueError):
    """Raised when a quiz, question or submission request is malformed."""


class NotFoundError(QuizDeskError, LookupError):
    """Raised when a referenced quiz, submission or session does not exist."""


class StorageError(QuizDeskError):
    """Raised when the storage collaborator fails to load or save a collection."""
