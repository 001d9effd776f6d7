# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Scope model for role assignments.

A grant applies at one of three nested scopes::

    global  ⊃  org-wide (org)  ⊃  branch (org, branch)

Grants are additive: a global grant still applies where a branch grant
also exists. There is no "most specific wins" override.
"""

from dataclasses import dataclass
from enum import Enum

from src.rbac.exceptions import InvalidScope


class ScopeKind(str, Enum):
    """Breadth of a role grant."""

    GLOBAL = "global"
    ORG_WIDE = "org-wide"
    BRANCH = "branch"


SCOPE_LABELS: dict[ScopeKind, dict[str, str]] = {
    ScopeKind.GLOBAL: {"en": "Global", "ja": "グローバル", "vi": "Toàn hệ thống"},
    ScopeKind.ORG_WIDE: {"en": "Organization", "ja": "組織全体", "vi": "Toàn tổ chức"},
    ScopeKind.BRANCH: {"en": "Branch", "ja": "支店限定", "vi": "Chi nhánh"},
}


def classify(org_id: str | None, branch_id: str | None) -> ScopeKind:
    """Classify a stored (org_id, branch_id) pair without validating it."""
    if org_id is None:
        return ScopeKind.GLOBAL
    if branch_id is None:
        return ScopeKind.ORG_WIDE
    return ScopeKind.BRANCH


def scope_matches(
    assignment_org_id: str | None,
    assignment_branch_id: str | None,
    query_org_id: str | None,
    query_branch_id: str | None,
) -> bool:
    """Return True if an assignment stored at the given scope applies to the query context.

    Rules, first match wins:
      1. global assignments apply everywhere;
      2. assignments for another organization never apply;
      3. org-wide assignments apply to every branch of their organization;
      4. branch assignments apply only to that branch.
    """
    if assignment_org_id is None:
        return True
    if assignment_org_id != query_org_id:
        return False
    if assignment_branch_id is None:
        return True
    return assignment_branch_id == query_branch_id


@dataclass(frozen=True)
class Scope:
    """Validated scope value; use ``Scope.of`` to build one."""

    kind: ScopeKind
    org_id: str | None = None
    branch_id: str | None = None

    @classmethod
    def of(cls, org_id: str | None, branch_id: str | None) -> "Scope":
        if branch_id is not None and org_id is None:
            raise InvalidScope(org_id, branch_id)
        return cls(classify(org_id, branch_id), org_id, branch_id)

    @classmethod
    def global_scope(cls) -> "Scope":
        return cls(ScopeKind.GLOBAL)

    def applies_to(self, org_id: str | None, branch_id: str | None) -> bool:
        return scope_matches(self.org_id, self.branch_id, org_id, branch_id)

    def label(self, locale: str = "en") -> str:
        labels = SCOPE_LABELS[self.kind]
        return labels.get(locale, labels["en"])
