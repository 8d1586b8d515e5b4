"""Domain exceptions mapped to HTTP responses by ``ledgerdesk.main``."""


class LedgerDeskError(Exception):
    """Base class for errors that carry an HTTP status and a client-safe message."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerDeskError):
    """Raised when a required parameter is missing or a value is invalid."""

    status_code = 400


class AuthorizationError(LedgerDeskError):
    """Raised when the current user may not perform an operation."""

    status_code = 403


class NotFoundError(LedgerDeskError):
    """Raised when an update or lookup target does not exist."""

    status_code = 404


class PersistenceError(LedgerDeskError):
    """Raised when a database write fails; the detail stays in server logs."""

    status_code = 500
