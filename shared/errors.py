"""Error taxonomy shared by the transaction store and the HTTP layer."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for errors surfaced to API callers.

    ``message`` is safe to return to clients as-is; ``status_code`` is the
    HTTP status the API answers with.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Raised when caller input is missing or outside an accepted value set."""

    status_code = 400


class NotFoundError(LedgerError):
    """Raised when no transaction matches the requested id."""

    status_code = 404


class StorageError(LedgerError):
    """Raised when the database fails; the message is a generic constant."""

    status_code = 500
