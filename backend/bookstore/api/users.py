"""Self-service profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import Principal, get_current_principal, get_db
from bookstore.errors import user_not_found
from bookstore.models.user import User
from bookstore.schemas.user import PrincipalResponse, ProfileUpdate, UserDetailResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=PrincipalResponse)
def get_me(principal: Principal = Depends(get_current_principal)):
    """Get the authenticated user's profile."""
    return PrincipalResponse.model_validate(principal)


@router.patch("/me", response_model=UserDetailResponse)
def update_me(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Change the authenticated user's display name."""
    user = db.get(User, principal.id)
    if user is None:
        raise user_not_found(id=principal.id)

    user.name = body.name
    db.commit()
    db.refresh(user)

    return UserDetailResponse.model_validate(user)
