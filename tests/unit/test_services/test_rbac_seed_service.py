# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Unit tests for default RBAC seeding."""

from src.models import Permission, Role
from src.rbac.permissions import ALL_PERMISSION_SLUGS
from src.rbac.roles import MANAGER_EXCLUDED
from src.services import rbac_service
from src.services.rbac_seed_service import seed_rbac_data


class TestSeedRbacData:
    """Tests for seed_rbac_data."""

    def test_seeds_permissions_and_roles(self, db_session):
        """Test a fresh database gets the full catalog."""
        seed_rbac_data(db_session)

        assert db_session.query(Permission).count() == len(ALL_PERMISSION_SLUGS)
        assert db_session.query(Role).count() == 5
        admin = rbac_service.get_role_by_slug(db_session, "admin")
        assert len(admin.permissions) == len(ALL_PERMISSION_SLUGS)

    def test_manager_excludes_system_permissions(self, seeded):
        """Test the manager role lacks the excluded permissions."""
        manager = rbac_service.get_role_by_slug(seeded, "manager")
        slugs = {p.slug for p in manager.permissions}
        assert slugs.isdisjoint(MANAGER_EXCLUDED)
        assert len(slugs) == len(ALL_PERMISSION_SLUGS) - len(MANAGER_EXCLUDED)

    def test_is_idempotent(self, seeded):
        """Test seeding twice creates nothing new."""
        seed_rbac_data(seeded)

        assert seeded.query(Permission).count() == len(ALL_PERMISSION_SLUGS)
        assert seeded.query(Role).count() == 5

    def test_keeps_edited_role_permissions(self, seeded):
        """Test reseeding does not reset a customized role."""
        viewer = rbac_service.get_role_by_slug(seeded, "viewer")
        rbac_service.sync_role_permissions(seeded, viewer, ["app.dashboard.view"])

        seed_rbac_data(seeded)

        seeded.refresh(viewer)
        assert [p.slug for p in viewer.permissions] == ["app.dashboard.view"]

    def test_restores_permission_names(self, seeded):
        """Test reseeding refreshes catalog names and groups."""
        permission = rbac_service.get_permission_by_slug(seeded, "app.users.view")
        rbac_service.update_permission(seeded, permission, name="Renamed", clear_group=True)

        seed_rbac_data(seeded)

        seeded.refresh(permission)
        assert permission.name == "App Users View"
        assert permission.group == "app.users"
