# src/services/rbac_service.py
import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import exists, select
from sqlalchemy.orm import Session, joinedload

from src.config import settings
from src.models import Permission, Role, RolePermission, User, UserRole
from src.rbac import (
    DuplicateSlug,
    EffectivePermissionResolver,
    NotFound,
    PermissionInUse,
    ProtectedRole,
    RoleSyncEngine,
    SqlAssignmentStore,
    SqlRoleCatalog,
    SyncResult,
)
from src.rbac.store import validate_scope

logger = logging.getLogger(__name__)


def get_resolver(db: Session) -> EffectivePermissionResolver:
    return EffectivePermissionResolver(SqlAssignmentStore(db), SqlRoleCatalog(db))


def _parse_uuid(value: str | uuid.UUID) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def list_permissions(db: Session, group: str | None = None) -> list[Permission]:
    """List permissions ordered by group and slug, optionally for one group."""
    statement = select(Permission).order_by(Permission.group, Permission.slug)
    if group is not None:
        statement = statement.where(Permission.group == group)
    return list(db.scalars(statement).all())


def group_permissions(permissions: Iterable[Permission]) -> dict[str, list[Permission]]:
    """Group permissions by their group tag; untagged ones go under "other"."""
    grouped: dict[str, list[Permission]] = {}
    for permission in permissions:
        grouped.setdefault(permission.group or "other", []).append(permission)
    return grouped


def get_permission(db: Session, permission_id: uuid.UUID) -> Permission | None:
    return db.get(Permission, permission_id)


def get_permission_by_slug(db: Session, slug: str) -> Permission | None:
    return db.scalars(select(Permission).where(Permission.slug == slug)).first()


def create_permission(
    db: Session, slug: str, name: str, group: str | None = None
) -> Permission:
    """Create a permission. Raises DuplicateSlug if the slug is taken."""
    if get_permission_by_slug(db, slug):
        raise DuplicateSlug(f"Permission '{slug}' already exists")
    permission = Permission(slug=slug, name=name, group=group)
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


def is_permission_in_use(db: Session, permission: Permission) -> bool:
    """True while at least one role holds the permission."""
    return bool(
        db.scalar(select(exists().where(RolePermission.permission_id == permission.id)))
    )


def update_permission(
    db: Session,
    permission: Permission,
    slug: str | None = None,
    name: str | None = None,
    group: str | None = None,
    clear_group: bool = False,
) -> Permission:
    """Update a permission. The slug is frozen while any role holds it."""
    if slug is not None and slug != permission.slug:
        if is_permission_in_use(db, permission):
            raise PermissionInUse(
                f"Permission '{permission.slug}' is assigned to a role; its slug cannot change"
            )
        existing = get_permission_by_slug(db, slug)
        if existing and existing.id != permission.id:
            raise DuplicateSlug(f"Permission '{slug}' already exists")
        permission.slug = slug
    if name is not None:
        permission.name = name
    if group is not None or clear_group:
        permission.group = group
    db.commit()
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission: Permission) -> None:
    """Delete a permission that no role holds."""
    if is_permission_in_use(db, permission):
        raise PermissionInUse(
            f"Permission '{permission.slug}' is assigned to a role and cannot be deleted"
        )
    db.delete(permission)
    db.commit()


def resolve_permissions(db: Session, identifiers: Iterable[str]) -> list[Permission]:
    """Look up permissions by id or slug. Raises NotFound for unknown entries."""
    permissions = []
    for identifier in identifiers:
        permission = None
        permission_id = _parse_uuid(identifier)
        if permission_id is not None:
            permission = db.get(Permission, permission_id)
        if permission is None:
            permission = get_permission_by_slug(db, str(identifier))
        if permission is None:
            raise NotFound(f"Permission '{identifier}' not found")
        permissions.append(permission)
    return permissions


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


def list_roles(db: Session) -> list[Role]:
    """List roles, most privileged first."""
    return list(db.scalars(select(Role).order_by(Role.level.desc(), Role.name)).all())


def get_role(db: Session, role_id: uuid.UUID) -> Role | None:
    return db.get(Role, role_id)


def get_role_by_slug(db: Session, slug: str) -> Role | None:
    """Get a role by its slug."""
    return db.scalars(select(Role).where(Role.slug == slug)).first()


def is_system_role(role: Role) -> bool:
    return role.slug in settings.system_roles


def resolve_role_ids(db: Session, identifiers: Iterable[str | uuid.UUID]) -> set[uuid.UUID]:
    """Map role ids or slugs to role ids. Raises NotFound for unknown entries."""
    role_ids = set()
    for identifier in identifiers:
        role = None
        role_id = _parse_uuid(identifier)
        if role_id is not None:
            role = db.get(Role, role_id)
        if role is None:
            role = get_role_by_slug(db, str(identifier))
        if role is None:
            raise NotFound(f"Role '{identifier}' not found")
        role_ids.add(role.id)
    return role_ids


def create_role(
    db: Session,
    slug: str,
    name: str,
    level: int = 0,
    description: str | None = None,
    permissions: Iterable[str] = (),
) -> Role:
    """Create a role with an optional initial permission set (ids or slugs)."""
    if get_role_by_slug(db, slug):
        raise DuplicateSlug(f"Role '{slug}' already exists")
    role = Role(slug=slug, name=name, level=level, description=description)
    role.permissions = resolve_permissions(db, permissions)
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def update_role(
    db: Session,
    role: Role,
    name: str | None = None,
    level: int | None = None,
    description: str | None = None,
) -> Role:
    """Update display attributes. The slug is immutable."""
    if name is not None:
        role.name = name
    if level is not None:
        role.level = level
    if description is not None:
        role.description = description
    db.commit()
    db.refresh(role)
    return role


def delete_role(db: Session, role: Role) -> None:
    """Delete a role and its assignments. System roles cannot be deleted."""
    if is_system_role(role):
        raise ProtectedRole(f"System role '{role.slug}' cannot be deleted")
    slug = role.slug
    db.delete(role)
    db.commit()
    logger.info(f"Deleted role {slug}")


def sync_role_permissions(
    db: Session, role: Role, identifiers: Iterable[str]
) -> tuple[int, int]:
    """Replace a role's permissions. Returns (attached, detached) counts."""
    desired = {p.id: p for p in resolve_permissions(db, identifiers)}
    current = {p.id for p in role.permissions}

    attached = [desired[pid] for pid in desired.keys() - current]
    detached = current - desired.keys()

    role.permissions = [p for p in role.permissions if p.id not in detached] + attached
    db.commit()
    db.refresh(role)
    return len(attached), len(detached)


def get_permission_matrix(db: Session) -> dict:
    """Role/permission matrix keyed by role id.

    Returns ``{"roles": [...], "permissions": [...], "matrix": {role_id: [permission_id, ...]}}``.
    """
    roles = list_roles(db)
    permissions = list_permissions(db)
    matrix: dict[str, list[str]] = {str(role.id): [] for role in roles}
    for link in db.scalars(select(RolePermission)).all():
        matrix.setdefault(str(link.role_id), []).append(str(link.permission_id))
    for permission_ids in matrix.values():
        permission_ids.sort()
    return {"roles": roles, "permissions": permissions, "matrix": matrix}


# ---------------------------------------------------------------------------
# Role assignments
# ---------------------------------------------------------------------------


def _require_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


def list_user_role_assignments(db: Session, user_id: uuid.UUID) -> list[UserRole]:
    """All role assignments of a user across every scope."""
    _require_user(db, user_id)
    statement = (
        select(UserRole)
        .options(joinedload(UserRole.role))
        .where(UserRole.user_id == user_id)
        .order_by(UserRole.org_id, UserRole.branch_id, UserRole.created_at)
    )
    return list(db.scalars(statement).all())


def assign_role_to_user(
    db: Session,
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    org_id: str | None = None,
    branch_id: str | None = None,
) -> UserRole:
    """Assign a role to a user at one scope.

    Raises InvalidScope, NotFound, or DuplicateAssignment if the exact
    assignment already exists.
    """
    validate_scope(org_id, branch_id)
    _require_user(db, user_id)
    if db.get(Role, role_id) is None:
        raise NotFound(f"Role {role_id} not found")

    store = SqlAssignmentStore(db)
    with store.transaction(user_id):
        assignment_id = store.insert(user_id, role_id, org_id, branch_id)
    return db.get(UserRole, assignment_id)


def remove_role_from_user(
    db: Session,
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    org_id: str | None = None,
    branch_id: str | None = None,
) -> int:
    """Remove a role assignment. Returns the number removed (0 or 1)."""
    validate_scope(org_id, branch_id)
    store = SqlAssignmentStore(db)
    with store.transaction(user_id):
        return store.remove(user_id, role_id, org_id, branch_id)


def sync_user_roles(
    db: Session,
    user_id: uuid.UUID,
    roles: Iterable[str | uuid.UUID],
    org_id: str | None = None,
    branch_id: str | None = None,
) -> SyncResult:
    """Make the user's roles at exactly this scope equal ``roles`` (ids or slugs)."""
    validate_scope(org_id, branch_id)
    _require_user(db, user_id)
    desired = resolve_role_ids(db, roles)
    return RoleSyncEngine(SqlAssignmentStore(db)).sync(user_id, desired, org_id, branch_id)


# ---------------------------------------------------------------------------
# Effective permissions
# ---------------------------------------------------------------------------


def get_effective_permissions(
    db: Session,
    user_id: uuid.UUID,
    org_id: str | None = None,
    branch_id: str | None = None,
) -> list[str]:
    """Sorted permission slugs the user holds in the given org/branch context."""
    validate_scope(org_id, branch_id)
    return get_resolver(db).resolve_slugs(user_id, org_id, branch_id)


def user_has_permission(
    db: Session,
    user: User,
    permission_slug: str,
    org_id: str | None = None,
    branch_id: str | None = None,
) -> bool:
    """Check if a user has a specific permission in the given context."""
    return get_resolver(db).has_permission(user.id, permission_slug, org_id, branch_id)
