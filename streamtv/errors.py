"""
Error taxonomy shared by the core services and the HTTP layer.

Each error carries the HTTP status the Flask error handlers answer with.
"""
from __future__ import annotations


class StreamTVError(Exception):
    status_code = 500
    message = "server-error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message}


class ValidationError(StreamTVError):
    """One or more form fields violated their constraints."""

    status_code = 400
    message = "Invalid form data"

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {**super().to_dict(), "errors": self.errors}


class AuthFailure(StreamTVError):
    """Unknown user, ambiguous lookup, or wrong password."""

    status_code = 401
    message = "Invalid User Name or Password - Try again"


class LoginRequired(StreamTVError):
    status_code = 401
    message = "Authentication required"


class DuplicateUsername(StreamTVError):
    status_code = 409
    message = "Username already exists - Try again"


class NotFound(StreamTVError):
    status_code = 404
    message = "Not found"


class StoreError(StreamTVError):
    """The underlying database failed; never retried."""

    status_code = 500
    message = "Database error"
