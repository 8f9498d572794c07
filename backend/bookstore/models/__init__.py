"""SQLAlchemy models package."""
from bookstore.models.user import User, UserRole, UserStatus
from bookstore.models.auth import RefreshToken

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "RefreshToken",
]
