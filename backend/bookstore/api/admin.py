"""Admin-only user management endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from bookstore.api.deps import Principal, get_db, require_admin
from bookstore.errors import Forbidden, user_not_found
from bookstore.logging import get_logger
from bookstore.models.user import User, UserStatus
from bookstore.schemas.user import RoleUpdate, UserDetailResponse, UserPage
from bookstore.services.pagination import build_paged_response, get_pagination, parse_sort

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_logger(__name__)

SORTABLE_FIELDS = {
    "createdAt": User.created_at,
    "email": User.email,
    "name": User.name,
}


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise user_not_found(id=user_id)
    return user


@router.get("/users", response_model=UserPage)
def list_users(
    page: str | None = Query(None),
    size: str | None = Query(None),
    sort: str | None = Query(None),
    keyword: str | None = Query(None),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    """List every account, newest first unless ``sort`` says otherwise."""
    params = get_pagination(page, size, sort, default_size=10, max_size=50, default_sort="createdAt,DESC")
    field, descending = parse_sort(params.sort, list(SORTABLE_FIELDS), "createdAt")
    column = SORTABLE_FIELDS[field]

    query = db.query(User)
    if keyword and keyword.strip():
        pattern = f"%{keyword.strip()}%"
        query = query.filter(or_(User.email.like(pattern), User.name.like(pattern)))

    total = query.count()
    users = (
        query.order_by(column.desc() if descending else column.asc(), User.id.asc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    content = [UserDetailResponse.model_validate(user) for user in users]
    return build_paged_response(content, total, params)


@router.patch("/users/{user_id}/deactivate", response_model=UserDetailResponse)
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Deactivate an account. Its tokens stop working on their next use."""
    if admin.id == user_id:
        raise Forbidden("cannot deactivate your own account", details={"id": user_id})

    user = _get_user_or_404(db, user_id)
    user.status = UserStatus.INACTIVE
    db.commit()
    db.refresh(user)
    logger.info("user_deactivated", user_id=user.id, admin_id=admin.id)
    return UserDetailResponse.model_validate(user)


@router.patch("/users/{user_id}/activate", response_model=UserDetailResponse)
def activate_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Reactivate an account."""
    user = _get_user_or_404(db, user_id)
    user.status = UserStatus.ACTIVE
    db.commit()
    db.refresh(user)
    logger.info("user_activated", user_id=user.id, admin_id=admin.id)
    return UserDetailResponse.model_validate(user)


@router.patch("/users/{user_id}/role", response_model=UserDetailResponse)
def change_role(
    user_id: int,
    body: RoleUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Switch an account between USER and ADMIN."""
    user = _get_user_or_404(db, user_id)
    user.role = body.role
    db.commit()
    db.refresh(user)
    logger.info("user_role_changed", user_id=user.id, role=user.role.value, admin_id=admin.id)
    return UserDetailResponse.model_validate(user)
