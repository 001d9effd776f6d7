"""Scoped role-assignment core: scope matching, storage, resolution and sync."""

from src.rbac.catalog import PermissionRecord, RoleCatalog, RoleRecord, SqlRoleCatalog
from src.rbac.exceptions import (
    DuplicateAssignment,
    DuplicateSlug,
    InvalidScope,
    NotFound,
    PermissionInUse,
    ProtectedRole,
    RbacError,
    StoreUnavailable,
)
from src.rbac.resolver import EffectivePermissionResolver
from src.rbac.scope import Scope, ScopeKind, classify, scope_matches
from src.rbac.store import AssignmentRecord, AssignmentStore, SqlAssignmentStore
from src.rbac.sync import RoleSyncEngine, SyncResult

__all__ = [
    "AssignmentRecord",
    "AssignmentStore",
    "DuplicateAssignment",
    "DuplicateSlug",
    "EffectivePermissionResolver",
    "InvalidScope",
    "NotFound",
    "PermissionInUse",
    "PermissionRecord",
    "ProtectedRole",
    "RbacError",
    "RoleCatalog",
    "RoleRecord",
    "RoleSyncEngine",
    "Scope",
    "ScopeKind",
    "SqlAssignmentStore",
    "SqlRoleCatalog",
    "StoreUnavailable",
    "SyncResult",
    "classify",
    "scope_matches",
]
