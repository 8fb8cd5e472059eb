"""Exceptions raised by the session backend."""

from __future__ import annotations


class CoachlixError(Exception):
    """Base class for all backend errors."""


class SessionNotFoundError(CoachlixError, LookupError):
    """The requested week, day or workout does not exist in the plan."""


class ApiError(CoachlixError):
    """A request to the plan API failed.

    ``status`` is the HTTP status code, or ``None`` when the request never
    produced a response (connection refused, timeout, ...).
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthenticationError(ApiError):
    """No bearer token is available for the current user."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message, status=401)


class RemoteWriteError(CoachlixError):
    """Saving or completing a workout did not reach the server.

    ``failures`` maps an exercise index (or ``None`` for workout level
    writes) to the :class:`ApiError` that caused it.  ``saved`` lists the
    exercise indices that were written despite the failures.
    """

    def __init__(
        self,
        message: str,
        failures: dict | None = None,
        saved: list[int] | None = None,
    ):
        super().__init__(message)
        self.failures = failures or {}
        self.saved = saved or []
