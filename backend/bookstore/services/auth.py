"""Login, refresh-token rotation and logout."""
from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from sqlalchemy.orm import Session

from bookstore.database import utcnow
from bookstore.errors import (
    Conflict,
    TokenExpired,
    Unauthenticated,
    ValidationFailed,
    inactive_account,
    user_not_found,
)
from bookstore.logging import get_logger
from bookstore.models.user import User, UserRole, UserStatus
from bookstore.services.ledger import ClientInfo, RefreshTokenLedger
from bookstore.services.tokens import REFRESH, TokenService, TokenState, TokenVerification

logger = get_logger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    user: User


def _require_refresh_token(verification: TokenVerification) -> None:
    """Raise unless the verification is a live refresh-type token."""
    if verification.state is TokenState.EXPIRED:
        raise TokenExpired()
    if not verification.is_valid:
        raise Unauthenticated("invalid token")
    if verification.token_type != REFRESH:
        raise Unauthenticated("invalid token type")


def _require_refresh_claims(verification: TokenVerification) -> int:
    """Turn a verification result into the refresh token's subject id or raise."""
    _require_refresh_token(verification)
    subject_id = verification.subject_id()
    if subject_id is None:
        raise Unauthenticated("invalid claim")
    return subject_id


class AuthService:
    """Credential checks and the refresh-token lifecycle for one request."""

    def __init__(self, db: Session, tokens: TokenService) -> None:
        self.db = db
        self.tokens = tokens
        self.ledger = RefreshTokenLedger(db, tokens)

    def signup(self, email: str, password: str, name: str) -> User:
        if self.db.query(User).filter(User.email == email).first():
            raise Conflict("email already registered", details={"email": email})

        user = User(
            email=email,
            name=name,
            password_hash=get_password_hash(password),
            role=UserRole.USER,
            status=UserStatus.ACTIVE,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_signed_up", user_id=user.id)
        return user

    def login(self, email: str, password: str, client: ClientInfo) -> TokenPair:
        user = self.db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_credentials")
            raise Unauthenticated("invalid email or password")

        # Status is enforced by the auth gate and on refresh, not here.
        pair = self._issue_pair(user, client)
        self.db.commit()
        logger.info("login_succeeded", user_id=user.id)
        return pair

    def refresh(self, raw_token: str, client: ClientInfo) -> TokenPair:
        """Redeem ``raw_token`` once and hand back a fresh pair."""
        if not isinstance(raw_token, str) or not raw_token.strip():
            raise ValidationFailed("refreshToken must be a non-empty string")

        subject_id = _require_refresh_claims(self.tokens.verify(raw_token))

        row = self.ledger.lookup(raw_token)
        if row is None or row.user_id != subject_id:
            logger.warning("refresh_rejected", reason="unknown_or_reused", user_id=subject_id)
            raise Unauthenticated("token not recognized or already used")

        if row.expires_at <= utcnow():
            self.ledger.consume(row)
            self.db.commit()
            raise TokenExpired()

        user = self.db.get(User, subject_id)
        if user is None:
            self.ledger.consume(row)
            self.db.commit()
            raise user_not_found(id=subject_id)

        # Left in the ledger: the account may be reactivated.
        if not user.is_active:
            raise inactive_account(user.status.value)

        if not self.ledger.consume(row):
            self.db.rollback()
            logger.warning("refresh_rejected", reason="concurrent_redemption", user_id=subject_id)
            raise Unauthenticated("token not recognized or already used")

        pair = self._issue_pair(user, client)
        self.db.commit()
        logger.info("refresh_rotated", user_id=user.id)
        return pair

    def logout(self, raw_token: str) -> None:
        """Forget ``raw_token``. Succeeds whether or not it was still live."""
        if not isinstance(raw_token, str) or not raw_token.strip():
            raise ValidationFailed("refreshToken must be a non-empty string")

        verification = self.tokens.verify(raw_token)
        _require_refresh_token(verification)
        self.ledger.revoke(raw_token)
        self.db.commit()
        logger.info("logout", user_id=verification.subject_id())

    def _issue_pair(self, user: User, client: ClientInfo) -> TokenPair:
        role = user.role.value
        access_token = self.tokens.issue_access_token(user.id, role)
        refresh_token = self.tokens.issue_refresh_token(user.id, role)
        self.ledger.persist(user.id, refresh_token, client)
        return TokenPair(access_token=access_token, refresh_token=refresh_token, user=user)
