"""Errors raised by the organizer view.

Every one of them is meant to be shown to the organizer verbatim; none is
retried automatically.
"""


class AttendanceViewError(Exception):
    """Base class for organizer-view failures."""


class ValidationError(AttendanceViewError):
    """Missing or empty required input."""


class NotFound(AttendanceViewError):
    """The server has no record to act on (e.g. override before any entry)."""


class Conflict(AttendanceViewError):
    """An email is already on the roster."""


class PreconditionFailed(AttendanceViewError):
    """The action is not allowed for this row in its current state."""


class ServerError(AttendanceViewError):
    """The server answered with a 5xx or an unexpected status."""


class TransientNetworkError(AttendanceViewError):
    """The request never got an answer."""


class Unauthorized(AttendanceViewError):
    """Wrong event password."""


def error_for_status(status_code: int, message: str) -> AttendanceViewError:
    """Map an HTTP error status onto the view error hierarchy."""
    if status_code == 400:
        return ValidationError(message)
    if status_code == 401:
        return Unauthorized(message)
    if status_code == 404:
        return NotFound(message)
    if status_code == 409:
        return Conflict(message)
    return ServerError(message)
