from datetime import timedelta

import pytest

from bookstore.database import utcnow
from bookstore.errors import Conflict
from bookstore.models.auth import RefreshToken
from bookstore.services.ledger import ClientInfo, RefreshTokenLedger
from bookstore.services.tokens import digest


@pytest.fixture
def db(session_local):
    session = session_local()
    try:
        yield session
    finally:
        session.close()


def test_persist_stores_digest_not_raw_token(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)
    raw = tokens.issue_refresh_token(seeded_users["user"], "USER")

    row = ledger.persist(seeded_users["user"], raw, ClientInfo(user_agent="pytest", ip_address="203.0.113.7"))
    db.commit()

    stored = db.query(RefreshToken).one()
    assert stored.id == row.id
    assert stored.token_hash == digest(raw)
    assert stored.token_hash != raw
    assert stored.user_agent == "pytest"
    assert stored.ip_address == "203.0.113.7"
    assert stored.expires_at == tokens.expires_at(raw)


def test_persist_falls_back_to_refresh_lifetime_for_unreadable_expiry(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)

    row = ledger.persist(seeded_users["user"], "opaque-token-without-claims")

    remaining = row.expires_at - utcnow()
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_duplicate_digest_is_a_conflict(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)
    raw = tokens.issue_refresh_token(seeded_users["user"], "USER")
    ledger.persist(seeded_users["user"], raw)
    db.commit()

    with pytest.raises(Conflict) as excinfo:
        ledger.persist(seeded_users["user"], raw)
    assert excinfo.value.code == "DUPLICATE_RESOURCE"


def test_lookup_and_revoke(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)
    raw = tokens.issue_refresh_token(seeded_users["user"], "USER")
    ledger.persist(seeded_users["user"], raw)
    db.commit()

    assert ledger.lookup(raw).user_id == seeded_users["user"]
    assert ledger.lookup(tokens.issue_refresh_token(seeded_users["user"], "USER")) is None

    ledger.revoke(raw)
    db.commit()
    assert ledger.lookup(raw) is None

    # Revoking again is a no-op.
    ledger.revoke(raw)
    db.commit()


def test_consume_only_succeeds_once(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)
    raw = tokens.issue_refresh_token(seeded_users["user"], "USER")
    row = ledger.persist(seeded_users["user"], raw)
    db.commit()

    assert ledger.consume(row) is True
    assert ledger.consume(row) is False
    db.commit()
    assert db.query(RefreshToken).count() == 0


def test_consume_ignores_a_row_that_reused_the_id(db, tokens, seeded_users):
    ledger = RefreshTokenLedger(db, tokens)
    retired = tokens.issue_refresh_token(seeded_users["user"], "USER")
    row = ledger.persist(seeded_users["user"], retired)
    db.commit()
    assert ledger.consume(row) is True
    db.commit()

    replacement = ledger.persist(seeded_users["user"], tokens.issue_refresh_token(seeded_users["user"], "USER"))
    db.commit()
    assert replacement.id > row.id

    stale = RefreshToken(id=replacement.id, token_hash=digest(retired))
    assert ledger.consume(stale) is False
    db.commit()
    assert db.query(RefreshToken).one().token_hash == replacement.token_hash
