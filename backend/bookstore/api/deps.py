"""Request dependencies: database session, token service and the auth gate."""
from dataclasses import dataclass

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from bookstore.config import Settings, get_settings
from bookstore.database import get_db
from bookstore.errors import Forbidden, TokenExpired, Unauthenticated, inactive_account, user_not_found
from bookstore.models.user import User, UserRole, UserStatus
from bookstore.services.auth import AuthService
from bookstore.services.ledger import ClientInfo
from bookstore.services.tokens import ACCESS, TokenService, TokenState

__all__ = [
    "Principal",
    "get_db",
    "get_token_service",
    "get_auth_service",
    "get_client_info",
    "get_bearer_token",
    "get_current_principal",
    "require_admin",
]


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as seen by route handlers."""

    id: int
    email: str
    name: str
    role: UserRole
    status: UserStatus

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, email=user.email, name=user.name, role=user.role, status=user.status)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService.from_settings(settings)


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens)


def get_request_ip(request: Request) -> str | None:
    """Extract best-effort client IP for session metadata."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def get_client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        user_agent=request.headers.get("user-agent"),
        ip_address=get_request_ip(request),
    )


def get_bearer_token(authorization: str | None = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise Unauthenticated("missing token")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthenticated("missing token")
    return parts[1]


def get_current_principal(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """Resolve the bearer access token to an active principal.

    The user row is read fresh on every request, so deactivation takes effect
    on the next call without touching any token.
    """
    verification = tokens.verify(token)
    if verification.state is TokenState.EXPIRED:
        raise TokenExpired()
    if not verification.is_valid or verification.token_type != ACCESS:
        raise Unauthenticated("invalid token")

    subject_id = verification.subject_id()
    if subject_id is None:
        raise Unauthenticated("invalid claim")

    user = db.get(User, subject_id)
    if user is None:
        raise user_not_found(id=subject_id)
    if not user.is_active:
        raise inactive_account(user.status.value)

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return Principal.from_user(user)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("insufficient role")
    return principal
