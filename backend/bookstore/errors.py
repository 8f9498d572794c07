"""Service-layer exceptions mapped to HTTP error responses.

Every error carries a stable machine-readable ``code`` so clients can tell
"log in again" (``TOKEN_EXPIRED``) apart from "you are not allowed"
(``UNAUTHORIZED`` / ``FORBIDDEN``).
"""
from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base class for errors that become a structured JSON response."""

    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationFailed(ServiceError):
    """Malformed input shape (422)."""

    status_code = 422
    code = "VALIDATION_FAILED"


class Unauthenticated(ServiceError):
    """Missing, invalid or already used credential (401)."""

    status_code = 401
    code = "UNAUTHORIZED"


class TokenExpired(Unauthenticated):
    """Credential was valid but its lifetime has passed (401)."""

    code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "token expired", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class Forbidden(ServiceError):
    """Authenticated but not allowed: inactive account or wrong role (403)."""

    status_code = 403
    code = "FORBIDDEN"


class NotFound(ServiceError):
    """Requested resource does not exist (404)."""

    status_code = 404
    code = "NOT_FOUND"


class Conflict(ServiceError):
    """Uniqueness violation (409)."""

    status_code = 409
    code = "DUPLICATE_RESOURCE"


class Internal(ServiceError):
    """Datastore or unexpected failure (500). Details never reach the client."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"


def inactive_account(status: str) -> Forbidden:
    return Forbidden("inactive account", code="USER_INACTIVE", details={"status": status})


def user_not_found(**details: Any) -> NotFound:
    return NotFound("user not found", code="USER_NOT_FOUND", details=details or None)


__all__ = [
    "ServiceError",
    "ValidationFailed",
    "Unauthenticated",
    "TokenExpired",
    "Forbidden",
    "NotFound",
    "Conflict",
    "Internal",
    "inactive_account",
    "user_not_found",
]
