# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Reconcile a user's roles for one scope to a desired set."""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.rbac.exceptions import DuplicateAssignment
from src.rbac.scope import Scope, ScopeKind
from src.rbac.store import AssignmentStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Role ids actually attached and detached by one sync call."""

    scope: ScopeKind
    attached: set[uuid.UUID] = field(default_factory=set)
    detached: set[uuid.UUID] = field(default_factory=set)

    @property
    def changed(self) -> bool:
        return bool(self.attached or self.detached)


class RoleSyncEngine:
    """Applies attach/detach diffs against the assignment store.

    Only the exact (org, branch) scope given is touched; assignments at
    other scopes are left alone even when they grant the same role.
    """

    def __init__(self, store: AssignmentStore):
        self.store = store

    def sync(
        self,
        user_id: uuid.UUID,
        desired_role_ids: Iterable[uuid.UUID],
        org_id: str | None = None,
        branch_id: str | None = None,
    ) -> SyncResult:
        scope = Scope.of(org_id, branch_id)
        desired = set(desired_role_ids)
        result = SyncResult(scope=scope.kind)

        with self.store.transaction(user_id):
            current = {
                a.role_id
                for a in self.store.list_for_user_and_scope(user_id, org_id, branch_id)
            }
            for role_id in desired - current:
                try:
                    self.store.insert(user_id, role_id, org_id, branch_id)
                except DuplicateAssignment:
                    # Attached concurrently; the desired state holds either way
                    continue
                result.attached.add(role_id)
            for role_id in current - desired:
                if self.store.remove(user_id, role_id, org_id, branch_id):
                    result.detached.add(role_id)

        if result.changed:
            logger.info(
                f"Synced roles for user {user_id} at {scope.kind.value} scope "
                f"(org={org_id}, branch={branch_id}): "
                f"attached={sorted(map(str, result.attached))} "
                f"detached={sorted(map(str, result.detached))}"
            )
        return result
