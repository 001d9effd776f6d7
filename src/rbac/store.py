# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role-assignment store."""

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from src.models import User, UserRole
from src.rbac.exceptions import DuplicateAssignment, InvalidScope, NotFound, StoreUnavailable
from src.rbac.scope import ScopeKind, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentRecord:
    """A stored (user, role, org, branch) grant."""

    id: uuid.UUID
    user_id: uuid.UUID
    role_id: uuid.UUID
    org_id: str | None = None
    branch_id: str | None = None

    @property
    def scope(self) -> ScopeKind:
        return classify(self.org_id, self.branch_id)

    @classmethod
    def from_model(cls, user_role: UserRole) -> "AssignmentRecord":
        return cls(
            id=user_role.id,
            user_id=user_role.user_id,
            role_id=user_role.role_id,
            org_id=user_role.org_id,
            branch_id=user_role.branch_id,
        )


def validate_scope(org_id: str | None, branch_id: str | None) -> None:
    if branch_id is not None and org_id is None:
        raise InvalidScope(org_id, branch_id)


class AssignmentStore(ABC):
    """Owns role-assignment records.

    ``list_for_user_and_scope`` matches the stored (org, branch) pair exactly;
    it is not the "applies to" match used when resolving permissions.
    """

    @abstractmethod
    def insert(
        self,
        user_id: uuid.UUID,
        role_id: uuid.UUID,
        org_id: str | None = None,
        branch_id: str | None = None,
    ) -> uuid.UUID:
        """Persist a new assignment and return its id."""
        ...

    @abstractmethod
    def remove(
        self,
        user_id: uuid.UUID,
        role_id: uuid.UUID,
        org_id: str | None = None,
        branch_id: str | None = None,
    ) -> int:
        """Delete the exact tuple. Returns 0 or 1."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: uuid.UUID) -> list[AssignmentRecord]:
        ...

    @abstractmethod
    def list_for_user_and_scope(
        self, user_id: uuid.UUID, org_id: str | None, branch_id: str | None
    ) -> list[AssignmentRecord]:
        ...

    @abstractmethod
    def transaction(self, user_id: uuid.UUID):
        """Context manager making the enclosed writes for one user atomic."""
        ...


class SqlAssignmentStore(AssignmentStore):
    """Assignment store over the ``user_roles`` table.

    Writes are flushed, not committed; ``transaction`` commits.
    """

    def __init__(self, db: Session):
        self.db = db

    def _scope_filter(self, org_id: str | None, branch_id: str | None) -> list:
        # "col == None" renders as IS NULL
        return [UserRole.org_id == org_id, UserRole.branch_id == branch_id]

    def _find(
        self,
        user_id: uuid.UUID,
        role_id: uuid.UUID,
        org_id: str | None,
        branch_id: str | None,
    ) -> UserRole | None:
        statement = select(UserRole).where(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
            *self._scope_filter(org_id, branch_id),
        )
        return self.db.scalars(statement).first()

    def insert(self, user_id, role_id, org_id=None, branch_id=None) -> uuid.UUID:
        validate_scope(org_id, branch_id)
        try:
            if self._find(user_id, role_id, org_id, branch_id) is not None:
                raise DuplicateAssignment(
                    f"Role {role_id} is already assigned to user {user_id} "
                    f"at {classify(org_id, branch_id).value} scope"
                )
            user_role = UserRole(
                user_id=user_id, role_id=role_id, org_id=org_id, branch_id=branch_id
            )
            try:
                with self.db.begin_nested():
                    self.db.add(user_role)
            except IntegrityError as e:
                if self._find(user_id, role_id, org_id, branch_id) is not None:
                    # Lost a race against a concurrent insert of the same tuple
                    raise DuplicateAssignment(
                        f"Role {role_id} is already assigned to user {user_id}"
                    ) from e
                # Foreign key violation: the user or role is gone
                raise NotFound(f"User {user_id} or role {role_id} not found") from e
        except OperationalError as e:
            logger.error(f"Assignment store unavailable during insert: {e}")
            raise StoreUnavailable("Assignment store is unavailable") from e
        return user_role.id

    def remove(self, user_id, role_id, org_id=None, branch_id=None) -> int:
        try:
            user_role = self._find(user_id, role_id, org_id, branch_id)
            if user_role is None:
                return 0
            self.db.delete(user_role)
            self.db.flush()
        except OperationalError as e:
            logger.error(f"Assignment store unavailable during remove: {e}")
            raise StoreUnavailable("Assignment store is unavailable") from e
        return 1

    def list_for_user(self, user_id: uuid.UUID) -> list[AssignmentRecord]:
        try:
            rows = self.db.scalars(select(UserRole).where(UserRole.user_id == user_id)).all()
        except OperationalError as e:
            logger.error(f"Assignment store unavailable during lookup: {e}")
            raise StoreUnavailable("Assignment store is unavailable") from e
        return [AssignmentRecord.from_model(row) for row in rows]

    def list_for_user_and_scope(
        self, user_id: uuid.UUID, org_id: str | None, branch_id: str | None
    ) -> list[AssignmentRecord]:
        statement = select(UserRole).where(
            UserRole.user_id == user_id, *self._scope_filter(org_id, branch_id)
        )
        try:
            rows = self.db.scalars(statement).all()
        except OperationalError as e:
            logger.error(f"Assignment store unavailable during lookup: {e}")
            raise StoreUnavailable("Assignment store is unavailable") from e
        return [AssignmentRecord.from_model(row) for row in rows]

    @contextmanager
    def transaction(self, user_id: uuid.UUID) -> Iterator[None]:
        """Run the block atomically, serialized against other writers for the user.

        The user row is locked with SELECT ... FOR UPDATE (ignored by SQLite,
        whose writers are serialized anyway), so two syncs for the same user
        cannot interleave their read and write phases.
        """
        try:
            self.db.execute(select(User.id).where(User.id == user_id).with_for_update())
            yield
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Assignment store unavailable, transaction rolled back: {e}")
            raise StoreUnavailable("Assignment store is unavailable") from e
        except Exception:
            self.db.rollback()
            raise
