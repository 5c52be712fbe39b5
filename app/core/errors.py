"""Error kinds raised by the account and journal services.

Each kind carries a human-readable ``message`` and the HTTP status the API
layer renders it with. The access decision engine never raises; callers turn
a Deny verdict into ``ForbiddenError``, ``UnauthenticatedError`` or, for
entry ids under another owner, ``NotFoundError``.
"""


class JournalError(Exception):
    """Base class for all expected, caller-recoverable failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(JournalError):
    """A required field is blank or malformed."""

    status_code = 422


class ConflictError(JournalError):
    """Username uniqueness would be violated."""

    status_code = 409


class NotFoundError(JournalError):
    """The id does not resolve (or resolves under a different owner)."""

    status_code = 404


class ForbiddenError(JournalError):
    """The principal is authenticated but not allowed to do this."""

    status_code = 403


class UnauthenticatedError(JournalError):
    """The operation needs an authenticated principal and none was resolved."""

    status_code = 401


class UnavailableError(JournalError):
    """The backing store failed. Not retried here."""

    status_code = 503
