"""Refresh-token ledger: which refresh tokens are currently redeemable."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.database import utcnow
from bookstore.errors import Conflict
from bookstore.models.auth import RefreshToken
from bookstore.services.tokens import TokenService, digest


@dataclass(frozen=True)
class ClientInfo:
    """Best-effort description of the client presenting a credential."""

    user_agent: str | None = None
    ip_address: str | None = None


class RefreshTokenLedger:
    """Persists digests of live refresh tokens.

    A row being present does not make a token redeemable on its own: callers
    still check ``expires_at`` and the owner's status.
    """

    def __init__(self, db: Session, tokens: TokenService) -> None:
        self.db = db
        self.tokens = tokens

    def persist(self, owner_id: int, raw_token: str, client: ClientInfo | None = None) -> RefreshToken:
        client = client or ClientInfo()
        expires_at = self.tokens.expires_at(raw_token) or utcnow() + self.tokens.refresh_token_ttl
        row = RefreshToken(
            user_id=owner_id,
            token_hash=digest(raw_token),
            user_agent=client.user_agent[:255] if client.user_agent else None,
            ip_address=client.ip_address[:45] if client.ip_address else None,
            expires_at=expires_at,
        )
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise Conflict("refresh token already recorded") from exc
        return row

    def lookup(self, raw_token: str) -> RefreshToken | None:
        return self.db.query(RefreshToken).filter(RefreshToken.token_hash == digest(raw_token)).first()

    def revoke(self, raw_token: str) -> None:
        """Delete the row for ``raw_token`` if there is one."""
        self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == digest(raw_token),
        ).delete(synchronize_session=False)

    def consume(self, row: RefreshToken) -> bool:
        """Delete ``row`` only if it still exists.

        Returns False when a concurrent redemption already removed it. The
        digest is part of the match so a reused primary key never hits the
        row that replaced it.
        """
        deleted = self.db.query(RefreshToken).filter(
            RefreshToken.id == row.id,
            RefreshToken.token_hash == row.token_hash,
        ).delete(synchronize_session=False)
        return deleted == 1
