# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Concurrent role syncs against the same scope."""

import threading

import pytest

from src.rbac import SqlAssignmentStore, StoreUnavailable
from src.services import rbac_service


@pytest.fixture
def contenders(seeded, make_user):
    """A user plus two disjoint desired role sets for branch 5/2."""
    user = make_user("alice")
    ids = {role.slug: role.id for role in rbac_service.list_roles(seeded)}
    rbac_service.assign_role_to_user(seeded, user.id, ids["admin"], "5", "2")
    user_id = user.id
    seeded.commit()
    return (
        user_id,
        {ids["member"], ids["viewer"]},
        {ids["supervisor"], ids["manager"]},
    )


def _run_sync(session_factory, barrier, user_id, role_ids, outcome, name):
    db = session_factory()
    try:
        barrier.wait(timeout=10)
        rbac_service.sync_user_roles(db, user_id, role_ids, org_id="5", branch_id="2")
        outcome[name] = "ok"
    except StoreUnavailable:
        outcome[name] = "unavailable"
    finally:
        db.close()


@pytest.mark.parametrize("round_", range(5))
def test_simultaneous_syncs_never_mix(session_factory, contenders, round_):
    """Test the scope ends up with exactly one caller's desired set."""
    user_id, ids_a, ids_b = contenders
    barrier = threading.Barrier(2)
    outcome = {}
    threads = [
        threading.Thread(
            target=_run_sync,
            args=(session_factory, barrier, user_id, ids, outcome, name),
        )
        for name, ids in (("a", ids_a), ("b", ids_b))
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert set(outcome) == {"a", "b"}
    assert "ok" in outcome.values()

    db = session_factory()
    try:
        final = {
            a.role_id
            for a in SqlAssignmentStore(db).list_for_user_and_scope(user_id, "5", "2")
        }
    finally:
        db.close()

    assert final in (ids_a, ids_b)
    if outcome["a"] != "ok":
        assert final == ids_b
    if outcome["b"] != "ok":
        assert final == ids_a
