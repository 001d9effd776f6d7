# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the scope model."""

import pytest

from src.rbac import InvalidScope, Scope, ScopeKind, classify, scope_matches


class TestScopeMatches:
    """Tests for the assignment/context matching rule."""

    @pytest.mark.parametrize(
        "query_org, query_branch",
        [(None, None), ("5", None), ("5", "2"), ("7", "9")],
    )
    def test_global_assignment_matches_everything(self, query_org, query_branch):
        assert scope_matches(None, None, query_org, query_branch) is True

    def test_org_wide_matches_any_branch_of_its_org(self):
        assert scope_matches("5", None, "5", None) is True
        assert scope_matches("5", None, "5", "2") is True
        assert scope_matches("5", None, "5", "anything") is True

    def test_org_wide_does_not_match_other_org(self):
        assert scope_matches("5", None, "7", None) is False
        assert scope_matches("5", None, "7", "2") is False
        assert scope_matches("5", None, None, None) is False

    def test_branch_matches_only_exact_branch(self):
        assert scope_matches("5", "2", "5", "2") is True
        assert scope_matches("5", "2", "5", "3") is False
        assert scope_matches("5", "2", "5", None) is False
        assert scope_matches("5", "2", "7", "2") is False

    def test_never_raises_on_inconsistent_query(self):
        """A query branch without org is simply matched, not rejected."""
        assert scope_matches("5", "2", None, "2") is False
        assert scope_matches(None, None, None, "2") is True


class TestScope:
    """Tests for the Scope value."""

    def test_classify(self):
        assert classify(None, None) is ScopeKind.GLOBAL
        assert classify("5", None) is ScopeKind.ORG_WIDE
        assert classify("5", "2") is ScopeKind.BRANCH

    def test_of_rejects_branch_without_org(self):
        with pytest.raises(InvalidScope):
            Scope.of(None, "2")

    def test_of_builds_each_kind(self):
        assert Scope.of(None, None) == Scope.global_scope()
        assert Scope.of("5", None).kind is ScopeKind.ORG_WIDE
        branch = Scope.of("5", "2")
        assert branch.kind is ScopeKind.BRANCH
        assert branch.applies_to("5", "2")
        assert not branch.applies_to("5", "3")

    def test_kind_values_match_wire_format(self):
        assert [k.value for k in ScopeKind] == ["global", "org-wide", "branch"]

    def test_labels(self):
        assert Scope.of("5", None).label() == "Organization"
        assert Scope.of("5", "2").label("ja") == "支店限定"
        assert Scope.global_scope().label("vi") == "Toàn hệ thống"
        assert Scope.global_scope().label("de") == "Global"
