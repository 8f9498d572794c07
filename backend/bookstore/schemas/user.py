"""User schemas."""
from datetime import datetime

from pydantic import Field

from bookstore.models.user import UserRole, UserStatus
from bookstore.schemas.common import CamelModel


class PrincipalResponse(CamelModel):
    """Summary of an account, as exposed to clients."""

    id: int
    email: str
    name: str
    role: UserRole
    status: UserStatus


class UserDetailResponse(PrincipalResponse):
    """Account summary plus timestamps."""

    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    """Self-service profile edit."""

    name: str = Field(..., min_length=1, max_length=50)


class RoleUpdate(CamelModel):
    """Admin role change."""

    role: UserRole


class UserPage(CamelModel):
    """One page of the admin user listing."""

    content: list[UserDetailResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
    sort: str | None = None
