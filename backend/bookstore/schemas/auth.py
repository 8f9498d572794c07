"""Authentication schemas."""
from pydantic import EmailStr, Field

from bookstore.schemas.common import CamelModel
from bookstore.schemas.user import PrincipalResponse


class SignupRequest(CamelModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=64)
    name: str = Field(..., min_length=1, max_length=50)


class LoginRequest(CamelModel):
    """User login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    """Body of refresh and logout calls."""

    refresh_token: str = Field(..., min_length=1)


class TokenPairResponse(CamelModel):
    """Tokens issued on login and refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    principal: PrincipalResponse
