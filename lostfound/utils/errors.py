from typing import Optional


class LostFoundError(Exception):
    """Base class for errors surfaced to API callers.

    Each subclass carries a stable machine-readable ``kind`` and the HTTP
    status it maps to; ``message`` is the human-readable part.
    """

    kind = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(LostFoundError):
    """Malformed or out-of-range input."""

    kind = "validation_error"
    status_code = 400

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class Conflict(LostFoundError):
    """Entity already exists (duplicate email)."""

    kind = "conflict"
    status_code = 400


class AuthError(LostFoundError):
    """Missing, unreadable, forged or expired credentials."""

    kind = "auth_error"
    status_code = 401


class TokenMalformed(AuthError):
    pass


class TokenInvalid(AuthError):
    pass


class TokenExpired(AuthError):
    pass


class Forbidden(LostFoundError):
    """Authenticated, but the action is not permitted for this caller."""

    kind = "forbidden"
    status_code = 403


class NotFound(LostFoundError):
    kind = "not_found"
    status_code = 404
