# src/api/v1/rbac.py
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.deps import (
    RequestContext,
    get_current_user,
    get_db,
    get_request_context,
    require_permission,
)
from src.models import Permission, Role, User
from src.schemas.rbac import (
    EffectivePermissionsSchema,
    PermissionCreateSchema,
    PermissionMatrixSchema,
    PermissionSchema,
    PermissionUpdateSchema,
    RemoveRoleResponse,
    RoleCreateSchema,
    RoleSchema,
    RoleUpdateSchema,
    RoleWithPermissionsSchema,
    SyncPermissionsResponse,
    SyncPermissionsSchema,
    SyncRolesResponse,
    SyncRolesSchema,
    UserRoleAssignmentSchema,
    UserRoleSchema,
)
from src.services import rbac_service

router = APIRouter()


def _get_permission_or_404(db: Session, permission_id: uuid.UUID) -> Permission:
    permission = rbac_service.get_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")
    return permission


def _get_role_or_404(db: Session, role_id: uuid.UUID) -> Role:
    role = rbac_service.get_role(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


# Permissions

@router.get("/rbac/permissions", response_model=list[PermissionSchema], summary="List all available permissions")
def list_permissions(
    group: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    """Retrieve all permissions, optionally restricted to one group.
    Requires app.roles.view permission.
    """
    return rbac_service.list_permissions(db, group=group)


@router.post("/rbac/permissions", response_model=PermissionSchema, status_code=status.HTTP_201_CREATED, summary="Create a permission")
def create_permission(
    permission_in: PermissionCreateSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.permissions.manage")),
):
    return rbac_service.create_permission(
        db, slug=permission_in.slug, name=permission_in.name, group=permission_in.group
    )


@router.get("/rbac/permissions/{permission_id}", response_model=PermissionSchema, summary="Get a permission by ID")
def get_permission(
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    return _get_permission_or_404(db, permission_id)


@router.put("/rbac/permissions/{permission_id}", response_model=PermissionSchema, summary="Update a permission")
def update_permission(
    permission_id: uuid.UUID,
    permission_in: PermissionUpdateSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.permissions.manage")),
):
    permission = _get_permission_or_404(db, permission_id)
    return rbac_service.update_permission(
        db,
        permission,
        slug=permission_in.slug,
        name=permission_in.name,
        group=permission_in.group,
        clear_group="group" in permission_in.model_fields_set and permission_in.group is None,
    )


@router.delete("/rbac/permissions/{permission_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a permission")
def delete_permission(
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.permissions.manage")),
):
    permission = _get_permission_or_404(db, permission_id)
    rbac_service.delete_permission(db, permission)
    return


@router.get("/rbac/permission-matrix", response_model=PermissionMatrixSchema, summary="Role/permission matrix")
def get_permission_matrix(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    """Return every role and permission plus the role id -> permission ids matrix.
    Requires app.roles.view permission.
    """
    return rbac_service.get_permission_matrix(db)


# Roles

@router.get("/rbac/roles", response_model=list[RoleSchema], summary="List all roles")
def list_roles(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    """Retrieve all roles, most privileged first.
    Requires app.roles.view permission.
    """
    return rbac_service.list_roles(db)


@router.get("/rbac/roles/{role_id}", response_model=RoleWithPermissionsSchema, summary="Get a role by ID with its permissions")
def get_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    return _get_role_or_404(db, role_id)


@router.post("/rbac/roles", response_model=RoleWithPermissionsSchema, status_code=status.HTTP_201_CREATED, summary="Create a new role")
def create_role(
    role_in: RoleCreateSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.create")),
):
    """Create a new role with an optional initial set of permissions.
    Requires app.roles.create permission.
    """
    return rbac_service.create_role(
        db,
        slug=role_in.slug,
        name=role_in.name,
        level=role_in.level,
        description=role_in.description,
        permissions=role_in.permissions,
    )


@router.put("/rbac/roles/{role_id}", response_model=RoleSchema, summary="Update an existing role")
def update_role(
    role_id: uuid.UUID,
    role_in: RoleUpdateSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.update")),
):
    role = _get_role_or_404(db, role_id)
    return rbac_service.update_role(
        db, role, name=role_in.name, level=role_in.level, description=role_in.description
    )


@router.delete("/rbac/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a role")
def delete_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.delete")),
):
    """Delete a role together with its assignments. System roles cannot be deleted.
    Requires app.roles.delete permission.
    """
    role = _get_role_or_404(db, role_id)
    rbac_service.delete_role(db, role)
    return


@router.get("/rbac/roles/{role_id}/permissions", response_model=list[PermissionSchema], summary="Get a role's permissions")
def get_role_permissions(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.roles.view")),
):
    return _get_role_or_404(db, role_id).permissions


@router.put("/rbac/roles/{role_id}/permissions", response_model=SyncPermissionsResponse, summary="Replace a role's permissions")
def sync_role_permissions(
    role_id: uuid.UUID,
    sync_in: SyncPermissionsSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.permissions.manage")),
):
    """Set the role's permissions to exactly the given ids or slugs.
    Requires app.permissions.manage permission.
    """
    role = _get_role_or_404(db, role_id)
    attached, detached = rbac_service.sync_role_permissions(db, role, sync_in.permissions)
    return SyncPermissionsResponse(
        message="Permissions synced", attached=attached, detached=detached
    )


# User role assignments

@router.get("/rbac/users/{user_id}/roles", response_model=list[UserRoleSchema], summary="Get a user's role assignments")
def get_user_role_assignments(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.view")),
):
    """Retrieve all role assignments for a user, with their scope.
    Requires app.users.view permission.
    """
    return rbac_service.list_user_role_assignments(db, user_id)


@router.post("/rbac/users/{user_id}/roles", response_model=UserRoleSchema, status_code=status.HTTP_201_CREATED, summary="Assign a role to a user")
def assign_role_to_user_api(
    user_id: uuid.UUID,
    assignment: UserRoleAssignmentSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.update")),
):
    """Assign a role to a user globally, org-wide or for one branch.
    Requires app.users.update permission.
    """
    return rbac_service.assign_role_to_user(
        db,
        user_id=user_id,
        role_id=assignment.role_id,
        org_id=assignment.org_id,
        branch_id=assignment.branch_id,
    )


@router.delete("/rbac/users/{user_id}/roles/{role_id}", response_model=RemoveRoleResponse, summary="Remove a role from a user")
def remove_role_from_user_api(
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    org_id: str | None = None,
    branch_id: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.update")),
):
    """Remove the assignment at exactly the given scope. Removing a missing
    assignment is not an error and reports ``removed: 0``.
    Requires app.users.update permission.
    """
    removed = rbac_service.remove_role_from_user(db, user_id, role_id, org_id, branch_id)
    return RemoveRoleResponse(
        message="Role removed" if removed else "Role assignment not found",
        removed=removed,
    )


@router.put("/rbac/users/{user_id}/roles/sync", response_model=SyncRolesResponse, summary="Sync a user's roles for one scope")
def sync_user_roles(
    user_id: uuid.UUID,
    sync_in: SyncRolesSchema,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.update")),
):
    """Make the user's roles at the given scope equal to ``role_ids``.
    Requires app.users.update permission.
    """
    result = rbac_service.sync_user_roles(
        db, user_id, sync_in.role_ids, org_id=sync_in.org_id, branch_id=sync_in.branch_id
    )
    return SyncRolesResponse(
        attached=sorted(result.attached, key=str),
        detached=sorted(result.detached, key=str),
        scope=result.scope,
    )


# Effective permissions

@router.get("/rbac/effective-permissions", response_model=EffectivePermissionsSchema, summary="Get a user's effective permissions")
def get_effective_permissions(
    user_id: uuid.UUID,
    org_id: str | None = None,
    branch_id: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("app.users.view")),
):
    """Union of the permissions of every role assignment that applies to
    the given org/branch. Requires app.users.view permission.
    """
    return EffectivePermissionsSchema(
        user_id=user_id,
        org_id=org_id,
        branch_id=branch_id,
        permissions=rbac_service.get_effective_permissions(db, user_id, org_id, branch_id),
    )


@router.get("/rbac/me/permissions", response_model=EffectivePermissionsSchema, summary="Get current user's effective permissions")
def get_my_permissions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
):
    """Effective permissions of the caller in the org/branch of the request."""
    return EffectivePermissionsSchema(
        user_id=current_user.id,
        org_id=context.org_id,
        branch_id=context.branch_id,
        permissions=rbac_service.get_effective_permissions(
            db, current_user.id, context.org_id, context.branch_id
        ),
    )
