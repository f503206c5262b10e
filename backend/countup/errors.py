"""Error types shared by the store, the service layer and the HTTP API."""

from __future__ import annotations


class CountupError(RuntimeError):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(CountupError):
    """Raised for bad input: missing name, non-positive target, out-of-range value."""

    status_code = 400


class NotFound(CountupError):
    """Raised when no countdown exists for the requested id."""

    status_code = 404


class TransientFetchError(CountupError):
    """Raised when the database cannot be reached or a query fails."""

    status_code = 503
