# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the SQL-backed assignment store."""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from src.models import UserRole
from src.rbac import DuplicateAssignment, InvalidScope, NotFound, ScopeKind, SqlAssignmentStore
from src.services import rbac_service


@pytest.fixture
def sql_store(seeded):
    return SqlAssignmentStore(seeded)


@pytest.fixture
def user(make_user):
    return make_user("alice")


@pytest.fixture
def member_role(seeded):
    return rbac_service.get_role_by_slug(seeded, "member")


@pytest.fixture
def viewer_role(seeded):
    return rbac_service.get_role_by_slug(seeded, "viewer")


class TestInsert:
    def test_insert_returns_id(self, sql_store, user, member_role):
        assignment_id = sql_store.insert(user.id, member_role.id, "5", "2")

        [record] = sql_store.list_for_user(user.id)
        assert record.id == assignment_id
        assert record.scope is ScopeKind.BRANCH

    def test_same_role_at_different_scopes(self, sql_store, user, member_role):
        sql_store.insert(user.id, member_role.id)
        sql_store.insert(user.id, member_role.id, "5")
        sql_store.insert(user.id, member_role.id, "5", "2")
        sql_store.insert(user.id, member_role.id, "5", "3")

        assert len(sql_store.list_for_user(user.id)) == 4

    @pytest.mark.parametrize(
        "org_id, branch_id", [(None, None), ("5", None), ("5", "2")]
    )
    def test_duplicate_is_rejected(self, sql_store, user, member_role, org_id, branch_id):
        sql_store.insert(user.id, member_role.id, org_id, branch_id)

        with pytest.raises(DuplicateAssignment):
            sql_store.insert(user.id, member_role.id, org_id, branch_id)
        assert len(sql_store.list_for_user(user.id)) == 1

    def test_branch_without_org_is_rejected(self, sql_store, user, member_role):
        with pytest.raises(InvalidScope):
            sql_store.insert(user.id, member_role.id, None, "2")
        assert sql_store.list_for_user(user.id) == []

    def test_unknown_role_is_not_reported_as_duplicate(self, sql_store, user, member_role):
        """Test a foreign key violation surfaces as NotFound."""
        sql_store.insert(user.id, member_role.id)

        with pytest.raises(NotFound):
            sql_store.insert(user.id, uuid.uuid4(), "5")

        assert [r.role_id for r in sql_store.list_for_user(user.id)] == [member_role.id]

    def test_unique_index_treats_missing_scope_as_equal(self, seeded, user, member_role):
        """Two global rows for the same role violate the unique index."""
        seeded.add(UserRole(user_id=user.id, role_id=member_role.id))
        seeded.flush()
        seeded.add(UserRole(user_id=user.id, role_id=member_role.id))
        with pytest.raises(IntegrityError):
            seeded.flush()
        seeded.rollback()

    def test_check_constraint_rejects_branch_without_org(self, seeded, user, member_role):
        seeded.add(UserRole(user_id=user.id, role_id=member_role.id, branch_id="2"))
        with pytest.raises(IntegrityError):
            seeded.flush()
        seeded.rollback()


class TestRemove:
    def test_remove_is_idempotent(self, sql_store, user, member_role):
        sql_store.insert(user.id, member_role.id, "5")

        assert sql_store.remove(user.id, member_role.id, "5") == 1
        assert sql_store.remove(user.id, member_role.id, "5") == 0
        assert sql_store.list_for_user(user.id) == []

    def test_remove_matches_exact_scope(self, sql_store, user, member_role):
        sql_store.insert(user.id, member_role.id, "5")

        assert sql_store.remove(user.id, member_role.id, "5", "2") == 0
        assert sql_store.remove(user.id, member_role.id) == 0
        assert len(sql_store.list_for_user(user.id)) == 1


class TestListing:
    def test_list_for_user_and_scope_is_exact(self, sql_store, user, member_role, viewer_role):
        sql_store.insert(user.id, member_role.id)
        sql_store.insert(user.id, viewer_role.id, "5")
        sql_store.insert(user.id, member_role.id, "5", "2")

        global_rows = sql_store.list_for_user_and_scope(user.id, None, None)
        org_rows = sql_store.list_for_user_and_scope(user.id, "5", None)
        branch_rows = sql_store.list_for_user_and_scope(user.id, "5", "2")

        assert [r.role_id for r in global_rows] == [member_role.id]
        assert [r.role_id for r in org_rows] == [viewer_role.id]
        assert [r.role_id for r in branch_rows] == [member_role.id]
        assert sql_store.list_for_user_and_scope(user.id, "5", "3") == []

    def test_other_users_are_not_listed(self, sql_store, make_user, user, member_role):
        other = make_user("bob")
        sql_store.insert(other.id, member_role.id)

        assert sql_store.list_for_user(user.id) == []


class TestTransaction:
    def test_commits_on_success(self, sql_store, seeded, user, member_role):
        with sql_store.transaction(user.id):
            sql_store.insert(user.id, member_role.id, "5")
        seeded.expire_all()

        assert len(sql_store.list_for_user(user.id)) == 1

    def test_rolls_back_on_error(self, sql_store, user, member_role, viewer_role):
        sql_store.insert(user.id, member_role.id)
        with sql_store.transaction(user.id):
            pass

        with pytest.raises(RuntimeError):
            with sql_store.transaction(user.id):
                sql_store.insert(user.id, viewer_role.id)
                sql_store.remove(user.id, member_role.id)
                raise RuntimeError("boom")

        assert [r.role_id for r in sql_store.list_for_user(user.id)] == [member_role.id]

    def test_duplicate_inside_transaction_keeps_earlier_writes(
        self, sql_store, user, member_role, viewer_role
    ):
        with sql_store.transaction(user.id):
            sql_store.insert(user.id, member_role.id)
            with pytest.raises(DuplicateAssignment):
                sql_store.insert(user.id, member_role.id)
            sql_store.insert(user.id, viewer_role.id)

        assert {r.role_id for r in sql_store.list_for_user(user.id)} == {
            member_role.id,
            viewer_role.id,
        }
