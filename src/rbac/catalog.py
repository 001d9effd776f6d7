# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Read access to the role/permission catalog."""

import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from src.models import Permission, Role


@dataclass(frozen=True)
class PermissionRecord:
    """Normalized permission; two records are equal when their slugs are."""

    slug: str
    id: uuid.UUID | None = field(default=None, compare=False)
    name: str = field(default="", compare=False)
    group: str | None = field(default=None, compare=False)

    @classmethod
    def from_model(cls, permission: Permission) -> "PermissionRecord":
        return cls(
            slug=permission.slug,
            id=permission.id,
            name=permission.name,
            group=permission.group,
        )

    @classmethod
    def coerce(cls, value: Any) -> "PermissionRecord":
        """Normalize anything permission-shaped at an ingestion boundary.

        Accepts records, ORM rows, mappings with a ``slug`` key and bare slugs.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Permission):
            return cls.from_model(value)
        if isinstance(value, str):
            return cls(slug=value, name=value)
        if isinstance(value, Mapping) and value.get("slug"):
            return cls(
                slug=value["slug"],
                id=value.get("id"),
                name=value.get("name") or value["slug"],
                group=value.get("group"),
            )
        raise TypeError(f"Cannot interpret {value!r} as a permission")


@dataclass(frozen=True)
class RoleRecord:
    id: uuid.UUID
    slug: str
    name: str
    level: int = 0
    description: str | None = None
    permissions: frozenset[PermissionRecord] = frozenset()

    @classmethod
    def from_model(cls, role: Role) -> "RoleRecord":
        return cls(
            id=role.id,
            slug=role.slug,
            name=role.name,
            level=role.level,
            description=role.description,
            permissions=frozenset(PermissionRecord.from_model(p) for p in role.permissions),
        )


class RoleCatalog(ABC):
    """Role/permission reference data, owned outside the assignment core."""

    @abstractmethod
    def get_role(self, role_id: uuid.UUID) -> RoleRecord | None:
        """Return the role, or None if it no longer exists."""
        ...

    def list_permissions_for_role(self, role_id: uuid.UUID) -> set[PermissionRecord]:
        role = self.get_role(role_id)
        if role is None:
            return set()
        return set(role.permissions)


class SqlRoleCatalog(RoleCatalog):
    """Catalog backed by the ``roles``/``permissions`` tables."""

    def __init__(self, db: Session):
        self.db = db

    def get_role(self, role_id: uuid.UUID) -> RoleRecord | None:
        role = self.db.get(Role, role_id)
        if role is None:
            return None
        return RoleRecord.from_model(role)
