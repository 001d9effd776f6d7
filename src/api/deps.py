# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from src.config import settings
from src.database import get_db
from src.models import User
from src.rbac import Scope
from src.services import rbac_service, user_service

__all__ = [
    "RequestContext",
    "get_current_user",
    "get_db",
    "get_request_context",
    "require_permission",
]


@dataclass(frozen=True)
class RequestContext:
    """Org/branch the caller is acting in, as supplied by the SSO gateway."""

    org_id: str | None = None
    branch_id: str | None = None


def get_request_context(request: Request) -> RequestContext:
    """Read the org/branch context headers. A branch without an org is rejected."""
    org_id = request.headers.get(settings.org_header) or None
    branch_id = request.headers.get(settings.branch_header) or None
    scope = Scope.of(org_id, branch_id)
    return RequestContext(org_id=scope.org_id, branch_id=scope.branch_id)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Get the user the SSO gateway authenticated for this request."""
    console_user_id = request.headers.get(settings.user_header)
    if not console_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    user = user_service.get_user_by_console_id(db, console_user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return user


def require_permission(permission_slug: str):
    """Dependency for permission-based authorization in the request's org/branch context."""

    def dependency(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
        context: RequestContext = Depends(get_request_context),
    ) -> User:
        if not rbac_service.user_has_permission(
            db,
            current_user,
            permission_slug,
            org_id=context.org_id,
            branch_id=context.branch_id,
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {permission_slug}",
            )
        return current_user

    return dependency
