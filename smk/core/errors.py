"""Exceptions raised by Smk operations."""


class SmkError(Exception):
    """Base exception for Smk errors."""

    pass


class NotFoundError(SmkError):
    """Raised when a branch, commit, ref or object does not exist."""

    pass


class InvalidStateError(SmkError):
    """Raised when an operation cannot run in the current repository state.

    The repository is left unchanged.
    """

    pass


class RepositoryError(SmkError):
    """Raised when the repository itself is missing or already initialized."""

    pass
