import os
import sys

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("LOG_JSON", "false")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bookstore import models  # noqa: E402,F401
from bookstore.api import deps  # noqa: E402
from bookstore.database import Base  # noqa: E402
from bookstore.main import app  # noqa: E402
from bookstore.models.user import User, UserRole, UserStatus  # noqa: E402
from bookstore.services.auth import get_password_hash  # noqa: E402
from bookstore.services.tokens import TokenService  # noqa: E402

TEST_SECRET = "test-signing-secret-9f8e7d6c5b4a39281706f5e4d3c2b1a0"
PASSWORD = "P@ssw0rd!"


def create_user(
    session_local,
    email: str,
    name: str = "Reader",
    role: UserRole = UserRole.USER,
    status: UserStatus = UserStatus.ACTIVE,
    password: str = PASSWORD,
) -> int:
    db = session_local()
    try:
        user = User(
            email=email,
            name=name,
            password_hash=get_password_hash(password),
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


@pytest.fixture
def session_local():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield testing_session_local
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def seeded_users(session_local):
    return {
        "user": create_user(session_local, "user1@example.com", name="User One"),
        "admin": create_user(session_local, "admin@example.com", name="Admin", role=UserRole.ADMIN),
    }


@pytest.fixture
def client(session_local, tokens, seeded_users):
    def override_get_db():
        db = session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_token_service] = lambda: tokens
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def login(client: TestClient, email: str = "user1@example.com", password: str = PASSWORD, **kwargs):
    response = client.post("/auth/login", json={"email": email, "password": password}, **kwargs)
    assert response.status_code == 200, response.text
    return response.json()


def bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
