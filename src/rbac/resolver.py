# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Effective-permission resolution."""

import logging
import uuid

from src.rbac.catalog import PermissionRecord, RoleCatalog
from src.rbac.scope import scope_matches
from src.rbac.store import AssignmentRecord, AssignmentStore

logger = logging.getLogger(__name__)


class EffectivePermissionResolver:
    """Computes the permissions a user holds in an (org, branch) context.

    The effective set is the union of the permissions of every role whose
    assignment applies to the context. Roles referenced by an assignment but
    missing from the catalog are skipped, so a stale catalog degrades to
    fewer permissions rather than an error.
    """

    def __init__(self, store: AssignmentStore, catalog: RoleCatalog):
        self.store = store
        self.catalog = catalog

    def matching_assignments(
        self, user_id: uuid.UUID, org_id: str | None, branch_id: str | None
    ) -> list[AssignmentRecord]:
        return [
            assignment
            for assignment in self.store.list_for_user(user_id)
            if scope_matches(assignment.org_id, assignment.branch_id, org_id, branch_id)
        ]

    def resolve(
        self, user_id: uuid.UUID, org_id: str | None = None, branch_id: str | None = None
    ) -> set[PermissionRecord]:
        permissions: set[PermissionRecord] = set()
        for assignment in self.matching_assignments(user_id, org_id, branch_id):
            role = self.catalog.get_role(assignment.role_id)
            if role is None:
                logger.debug(
                    f"Skipping assignment {assignment.id}: role {assignment.role_id} not in catalog"
                )
                continue
            permissions.update(role.permissions)
        return permissions

    def resolve_slugs(
        self, user_id: uuid.UUID, org_id: str | None = None, branch_id: str | None = None
    ) -> list[str]:
        return sorted(p.slug for p in self.resolve(user_id, org_id, branch_id))

    def has_permission(
        self,
        user_id: uuid.UUID,
        slug: str,
        org_id: str | None = None,
        branch_id: str | None = None,
    ) -> bool:
        return PermissionRecord(slug=slug) in self.resolve(user_id, org_id, branch_id)
