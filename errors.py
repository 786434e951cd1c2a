"""Exceptions raised by the portfolio backend.

Every failure the API can report is one of these. The handlers registered in
``main.py`` turn them into JSON responses using ``status_code`` and ``message``.
"""

from typing import Any, Optional


class PortfolioError(Exception):
    """Base exception for the portfolio backend."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(PortfolioError):
    """Malformed or missing fields. Carries a list of ``{field, message}`` entries."""

    status_code = 400


class Unauthorized(PortfolioError):
    """No authenticated session on a protected route."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(PortfolioError):
    """Requested entity does not exist (or is not publicly visible)."""

    status_code = 404


class ConstraintError(PortfolioError):
    """A uniqueness constraint was violated in the store."""

    status_code = 500

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Unique constraint violated on '{field}'")


class AuthError(PortfolioError):
    """Invalid login credentials."""

    status_code = 401


class AdminNotConfiguredError(AuthError):
    """Admin credentials or session secret are missing from configuration."""

    status_code = 500

    def __init__(self, message: str = "Admin credentials not configured"):
        super().__init__(message)


class SessionError(PortfolioError):
    """The session store failed while creating or destroying a session."""

    status_code = 500


class InternalError(PortfolioError):
    """Store failure surfaced with a generic, non-leaking message."""

    status_code = 500
