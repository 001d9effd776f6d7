# src/schemas/rbac.py
import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.rbac.scope import ScopeKind, classify


class PermissionSchema(BaseModel):
    """Schema representing a permission."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    name: str
    group: str | None = None


class PermissionCreateSchema(BaseModel):
    """Schema for creating a permission."""

    slug: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    group: str | None = Field(None, max_length=100)


class PermissionUpdateSchema(BaseModel):
    """Schema for updating a permission. Send ``group: null`` to clear the group."""

    slug: str | None = Field(None, min_length=1, max_length=100)
    name: str | None = Field(None, min_length=1, max_length=200)
    group: str | None = Field(None, max_length=100)


class RoleSchema(BaseModel):
    """Schema representing a role."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: str
    name: str
    level: int
    description: str | None
    is_system: bool


class RoleWithPermissionsSchema(RoleSchema):
    """Schema representing a role along with its permissions."""

    permissions: list[PermissionSchema]


class RoleCreateSchema(BaseModel):
    """Schema for creating a new role."""

    slug: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    level: int = 0
    description: str | None = None
    permissions: list[str] = []  # Permission ids or slugs


class RoleUpdateSchema(BaseModel):
    """Schema for updating a role."""

    name: str | None = Field(None, min_length=1, max_length=100)
    level: int | None = None
    description: str | None = None


class SyncPermissionsSchema(BaseModel):
    """Desired permission set for a role (ids or slugs)."""

    permissions: list[str]


class SyncPermissionsResponse(BaseModel):
    message: str
    attached: int
    detached: int


class PermissionMatrixSchema(BaseModel):
    """Role/permission matrix keyed by role id."""

    roles: list[RoleSchema]
    permissions: list[PermissionSchema]
    matrix: dict[str, list[str]]


class UserRoleSchema(BaseModel):
    """Schema representing a user's role assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    role_id: uuid.UUID
    org_id: str | None
    branch_id: str | None
    created_at: datetime.datetime | None = None
    role: RoleSchema

    @computed_field
    @property
    def scope(self) -> ScopeKind:
        return classify(self.org_id, self.branch_id)


class UserRoleAssignmentSchema(BaseModel):
    """Schema for assigning a role to a user."""

    role_id: uuid.UUID
    org_id: str | None = None
    branch_id: str | None = None


class RemoveRoleResponse(BaseModel):
    message: str
    removed: int


class SyncRolesSchema(BaseModel):
    """Desired role set for one (org, branch) scope. Entries are role ids or slugs."""

    role_ids: list[str]
    org_id: str | None = None
    branch_id: str | None = None


class SyncRolesResponse(BaseModel):
    attached: list[uuid.UUID]
    detached: list[uuid.UUID]
    scope: ScopeKind


class EffectivePermissionsSchema(BaseModel):
    """Permission slugs effective in one org/branch context."""

    user_id: uuid.UUID
    org_id: str | None = None
    branch_id: str | None = None
    permissions: list[str]
