# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-memory collaborators for exercising the RBAC core without a database."""

import uuid
from contextlib import contextmanager

import pytest

from src.rbac import (
    AssignmentRecord,
    AssignmentStore,
    DuplicateAssignment,
    PermissionRecord,
    RoleCatalog,
    RoleRecord,
)
from src.rbac.store import validate_scope


class InMemoryAssignmentStore(AssignmentStore):
    def __init__(self):
        self.records: dict[uuid.UUID, AssignmentRecord] = {}
        self.writes = 0

    @staticmethod
    def _key(record: AssignmentRecord) -> tuple:
        return (record.user_id, record.role_id, record.org_id, record.branch_id)

    def insert(self, user_id, role_id, org_id=None, branch_id=None):
        validate_scope(org_id, branch_id)
        key = (user_id, role_id, org_id, branch_id)
        if any(self._key(r) == key for r in self.records.values()):
            raise DuplicateAssignment("duplicate")
        record = AssignmentRecord(uuid.uuid4(), user_id, role_id, org_id, branch_id)
        self.records[record.id] = record
        self.writes += 1
        return record.id

    def remove(self, user_id, role_id, org_id=None, branch_id=None):
        key = (user_id, role_id, org_id, branch_id)
        for record_id, record in list(self.records.items()):
            if self._key(record) == key:
                del self.records[record_id]
                self.writes += 1
                return 1
        return 0

    def list_for_user(self, user_id):
        return [r for r in self.records.values() if r.user_id == user_id]

    def list_for_user_and_scope(self, user_id, org_id, branch_id):
        return [
            r
            for r in self.records.values()
            if r.user_id == user_id and r.org_id == org_id and r.branch_id == branch_id
        ]

    @contextmanager
    def transaction(self, user_id):
        snapshot = dict(self.records)
        try:
            yield
        except Exception:
            self.records = snapshot
            raise


class InMemoryCatalog(RoleCatalog):
    def __init__(self, roles=()):
        self.roles = {role.id: role for role in roles}

    def get_role(self, role_id):
        return self.roles.get(role_id)


def make_role(slug: str, *permission_slugs: str) -> RoleRecord:
    return RoleRecord(
        id=uuid.uuid4(),
        slug=slug,
        name=slug.title(),
        permissions=frozenset(
            PermissionRecord(slug=p, id=uuid.uuid4(), name=p) for p in permission_slugs
        ),
    )


@pytest.fixture
def store():
    return InMemoryAssignmentStore()


@pytest.fixture
def role_a():
    return make_role("role-a", "x", "y")


@pytest.fixture
def role_b():
    return make_role("role-b", "y", "z")


@pytest.fixture
def catalog(role_a, role_b):
    return InMemoryCatalog([role_a, role_b])
