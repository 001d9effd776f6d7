"""Pydantic schemas package."""
from src.schemas.common import (
    HealthResponse,
    PaginatedResponse,
    PaginationMeta,
)
from src.schemas.rbac import (
    EffectivePermissionsSchema,
    PermissionCreateSchema,
    PermissionSchema,
    RoleCreateSchema,
    RoleSchema,
    RoleWithPermissionsSchema,
    SyncRolesResponse,
    SyncRolesSchema,
    UserRoleSchema,
)
from src.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "EffectivePermissionsSchema",
    "HealthResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "PermissionCreateSchema",
    "PermissionSchema",
    "RoleCreateSchema",
    "RoleSchema",
    "RoleWithPermissionsSchema",
    "SyncRolesResponse",
    "SyncRolesSchema",
    "UserCreate",
    "UserResponse",
    "UserRoleSchema",
    "UserUpdate",
]
