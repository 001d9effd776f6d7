# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for catalog records and the SQL-backed catalog."""

import uuid

import pytest

from src.models import Permission
from src.rbac import PermissionRecord, SqlRoleCatalog
from src.services import rbac_service


class TestPermissionRecord:
    def test_equality_uses_slug_only(self):
        a = PermissionRecord(slug="app.users.view", id=uuid.uuid4(), name="A", group="x")
        b = PermissionRecord(slug="app.users.view", id=uuid.uuid4(), name="B", group=None)
        assert a == b
        assert len({a, b}) == 1

    def test_coerce_accepts_every_shape(self):
        model = Permission(id=uuid.uuid4(), slug="app.roles.view", name="Roles", group="app.roles")
        from_model = PermissionRecord.coerce(model)
        assert from_model.group == "app.roles"
        assert PermissionRecord.coerce("app.roles.view") == from_model
        from_mapping = PermissionRecord.coerce({"slug": "app.roles.view", "group": "g"})
        assert from_mapping == from_model
        assert from_mapping.name == "app.roles.view"
        assert PermissionRecord.coerce(from_model) is from_model

    def test_coerce_rejects_unknown_shape(self):
        with pytest.raises(TypeError):
            PermissionRecord.coerce({"name": "no slug"})
        with pytest.raises(TypeError):
            PermissionRecord.coerce(42)


class TestSqlRoleCatalog:
    def test_get_role_with_permissions(self, seeded):
        viewer = rbac_service.get_role_by_slug(seeded, "viewer")
        catalog = SqlRoleCatalog(seeded)

        record = catalog.get_role(viewer.id)

        assert record.slug == "viewer"
        assert {p.slug for p in record.permissions} == {
            "app.dashboard.view",
            "app.reports.view",
            "dashboard.view",
        }
        assert catalog.list_permissions_for_role(viewer.id) == set(record.permissions)

    def test_unknown_role(self, db_session):
        catalog = SqlRoleCatalog(db_session)
        assert catalog.get_role(uuid.uuid4()) is None
        assert catalog.list_permissions_for_role(uuid.uuid4()) == set()
