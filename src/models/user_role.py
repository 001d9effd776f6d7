# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Scoped role assignments."""

from __future__ import annotations

import datetime
import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, utcnow

if TYPE_CHECKING:
    from src.models.role import Role
    from src.models.user import User


class UserRole(Base):
    """A role granted to a user at global, org-wide or branch scope.

    ``org_id``/``branch_id`` are console identifiers supplied by the SSO
    provider. Both NULL means global, ``org_id`` alone means org-wide and
    both set means a single branch. Rows are never updated in place.
    """

    __tablename__ = "user_roles"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    user_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )
    org_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    branch_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "branch_id IS NULL OR org_id IS NOT NULL",
            name="ck_user_roles_branch_requires_org",
        ),
    )

    user: Mapped[User] = relationship("User", back_populates="user_roles")
    role: Mapped[Role] = relationship("Role", back_populates="user_roles")


# NULLs are distinct in plain unique constraints, so collapse them first
Index(
    "uq_user_roles_assignment",
    UserRole.user_id,
    UserRole.role_id,
    func.coalesce(UserRole.org_id, ""),
    func.coalesce(UserRole.branch_id, ""),
    unique=True,
)
