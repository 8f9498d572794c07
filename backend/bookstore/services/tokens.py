"""JWT issuing and verification.

The signing secret is handed to :class:`TokenService` at construction time;
nothing here reads process configuration on its own.
"""
from __future__ import annotations

import enum
import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from bookstore.config import Settings

ACCESS = "access"
REFRESH = "refresh"


class TokenState(str, enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token's signature and expiry."""

    state: TokenState
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.state is TokenState.VALID

    @property
    def token_type(self) -> str | None:
        return self.claims.get("type")

    def subject_id(self) -> int | None:
        """Subject id as an integer, or None when absent or non-numeric."""
        raw = self.claims.get("sub")
        if raw is None or isinstance(raw, bool):
            return None
        try:
            subject = int(raw)
        except (TypeError, ValueError):
            return None
        return subject if subject > 0 else None


def digest(token: str) -> str:
    """One-way digest of a raw token, used as the ledger key."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenService:
    """Mints and verifies access/refresh tokens with a shared HMAC secret."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        access_token_ttl: timedelta = timedelta(minutes=15),
        refresh_token_ttl: timedelta = timedelta(days=7),
    ) -> None:
        if not secret_key:
            raise ValueError("A signing secret is required to issue tokens.")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.secret_key,
            algorithm=settings.algorithm,
            access_token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_token_ttl=timedelta(days=settings.refresh_token_expire_days),
        )

    def _encode(self, claims: dict[str, Any], ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({"iat": now, "exp": now + ttl})
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def issue_access_token(self, subject_id: int, role: str) -> str:
        """Create a short-lived access token."""
        return self._encode(
            {"sub": str(subject_id), "role": str(role), "type": ACCESS},
            self.access_token_ttl,
        )

    def issue_refresh_token(self, subject_id: int, role: str) -> str:
        """Create a long-lived refresh token.

        The random ``jti`` keeps two tokens minted in the same second for the
        same user distinct, so their ledger digests never collide.
        """
        return self._encode(
            {"sub": str(subject_id), "role": str(role), "type": REFRESH, "jti": uuid.uuid4().hex},
            self.refresh_token_ttl,
        )

    def verify(self, token: str) -> TokenVerification:
        """Check signature and expiry without raising."""
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return TokenVerification(TokenState.EXPIRED)
        except JWTError:
            return TokenVerification(TokenState.INVALID)
        if not isinstance(claims, dict):
            return TokenVerification(TokenState.INVALID)
        return TokenVerification(TokenState.VALID, claims)

    @staticmethod
    def expires_at(token: str) -> datetime | None:
        """Read the ``exp`` claim without verifying the token (naive UTC)."""
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return None
        exp = claims.get("exp") if isinstance(claims, dict) else None
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)
