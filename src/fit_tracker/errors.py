"""Domain errors raised by services and repositories.

Each error carries the HTTP status the web layer answers with, so routers can
let them propagate to the single handler registered in ``web.app``.
"""


class FitTrackerError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class BadRequestError(FitTrackerError):
    """Malformed input such as an unparsable date."""

    status_code = 400


class InvalidStateError(BadRequestError):
    """A state transition that is not allowed from the current state."""


class UnauthorizedError(FitTrackerError):
    """No verifiable caller identity."""

    status_code = 401


class ForbiddenError(FitTrackerError):
    """Caller is known but not allowed to act on the resource."""

    status_code = 403


class NotFoundError(FitTrackerError):
    """Entity absent by primary or natural key."""

    status_code = 404


class ConflictError(FitTrackerError):
    """Uniqueness violation (duplicate username, duplicate pending share)."""

    status_code = 409
