# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User service."""

import math
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from src.models import User
from src.schemas.user import UserCreate, UserUpdate

SORTABLE_FIELDS = {"name", "email", "created_at", "updated_at"}


class DuplicateEmailError(ValueError):
    """Raised when another user already uses the email address."""


class DuplicateConsoleUserIdError(ValueError):
    """Raised when another user is already linked to the console account."""


def list_users(
    db: Session,
    page: int = 1,
    per_page: int = 20,
    search: str | None = None,
    sort_field: str = "name",
    sort_order: str = "asc",
) -> tuple[list[User], int, int]:
    """List users with pagination, search and sorting.

    Returns (users, total, pages). ``search`` matches name or email,
    case-insensitively. Unknown sort fields fall back to ``name``.
    """
    query = select(User)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern))
        )

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0

    column = getattr(User, sort_field if sort_field in SORTABLE_FIELDS else "name")
    query = query.order_by(column.desc() if sort_order == "desc" else column.asc())
    query = query.offset((page - 1) * per_page).limit(per_page)

    pages = math.ceil(total / per_page) if total else 0
    return list(db.scalars(query).all()), total, pages


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    """Get a user by ID."""
    return db.get(User, user_id)


def get_user_by_console_id(db: Session, console_user_id: str) -> User | None:
    """Get the local user linked to an SSO console account."""
    return db.scalars(select(User).where(User.console_user_id == console_user_id)).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def create_user(db: Session, data: UserCreate) -> User:
    """Create a new user."""
    if get_user_by_email(db, data.email):
        raise DuplicateEmailError("Email already in use")
    if data.console_user_id and get_user_by_console_id(db, data.console_user_id):
        raise DuplicateConsoleUserIdError("Console user id is linked to another user")
    user = User(name=data.name, email=data.email, console_user_id=data.console_user_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, data: UserUpdate) -> User:
    """Update a user."""
    update_data = data.model_dump(exclude_unset=True)
    email = update_data.get("email")
    if email and email != user.email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != user.id:
            raise DuplicateEmailError("Email already in use")
    console_user_id = update_data.get("console_user_id")
    if console_user_id and console_user_id != user.console_user_id:
        existing = get_user_by_console_id(db, console_user_id)
        if existing and existing.id != user.id:
            raise DuplicateConsoleUserIdError("Console user id is linked to another user")
    for field, value in update_data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete a user and all of their role assignments."""
    db.delete(user)
    db.commit()
