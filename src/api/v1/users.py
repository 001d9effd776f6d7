# src/api/v1/users.py
"""User management API endpoints."""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.api.deps import get_db, require_permission
from src.models import User
from src.schemas.common import PaginatedResponse, PaginationMeta
from src.schemas.user import UserCreate, UserResponse, UserUpdate
from src.services import user_service

router = APIRouter()


def _get_user_or_404(db: Session, user_id: uuid.UUID) -> User:
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get(
    "/users",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
)
def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: str | None = None,
    sort: str = "name",
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.view")),
) -> PaginatedResponse[UserResponse]:
    """List users with pagination, search by name or email, and sorting.

    Requires app.users.view permission.
    """
    users, total, pages = user_service.list_users(
        db, page=page, per_page=per_page, search=search, sort_field=sort, sort_order=order
    )
    return PaginatedResponse[UserResponse](
        data=[UserResponse.model_validate(u) for u in users],
        meta=PaginationMeta(total=total, page=page, per_page=per_page, pages=pages),
    )


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.create")),
) -> User:
    """Create a new user.

    Requires app.users.create permission.
    """
    try:
        return user_service.create_user(db, user_in)
    except user_service.DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except user_service.DuplicateConsoleUserIdError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Get a user by ID",
)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.view")),
) -> User:
    return _get_user_or_404(db, user_id)


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
)
def update_user(
    user_id: uuid.UUID,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.update")),
) -> User:
    """Update a user's information.

    Requires app.users.update permission.
    """
    user = _get_user_or_404(db, user_id)
    try:
        return user_service.update_user(db, user, user_in)
    except user_service.DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except user_service.DuplicateConsoleUserIdError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.delete")),
) -> None:
    """Delete a user and their role assignments.

    Requires app.users.delete permission.
    """
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    user_service.delete_user(db, user)
