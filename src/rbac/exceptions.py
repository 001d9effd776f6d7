# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Errors raised by the role-assignment core and the RBAC service."""


class RbacError(Exception):
    """Base class for RBAC errors; ``status_code`` is used at the HTTP boundary."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidScope(RbacError):
    """A branch was given without its organization."""

    status_code = 422

    def __init__(self, org_id: str | None = None, branch_id: str | None = None):
        super().__init__(
            f"Branch '{branch_id}' requires an organization (got org_id={org_id!r})"
        )
        self.org_id = org_id
        self.branch_id = branch_id


class DuplicateAssignment(RbacError):
    """The exact (user, role, org, branch) assignment already exists."""

    status_code = 409


class DuplicateSlug(RbacError):
    """A role or permission with the same slug already exists."""

    status_code = 409


class NotFound(RbacError):
    """A referenced user, role or permission does not exist."""

    status_code = 404


class ProtectedRole(RbacError):
    """System roles cannot be deleted."""

    status_code = 403


class StoreUnavailable(RbacError):
    """The assignment store could not be reached. Not retried here."""

    status_code = 503


class PermissionInUse(RbacError):
    """A permission held by a role cannot be renamed or deleted."""

    status_code = 409
