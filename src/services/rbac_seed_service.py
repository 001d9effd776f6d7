# src/services/rbac_seed_service.py
import logging

from sqlalchemy.orm import Session

from src.models import Permission, Role
from src.rbac.permissions import CORE_PERMISSIONS
from src.rbac.roles import DEFAULT_ROLES

from . import rbac_service

logger = logging.getLogger(__name__)


def seed_rbac_data(db: Session) -> None:
    """Seeds the database with core permissions and default roles.

    This function is idempotent: permissions are upserted by slug, and roles
    that already exist keep their current permission set.
    @param db: SQLAlchemy Session object
    """
    # Seed permissions
    created = 0
    for perm_data in CORE_PERMISSIONS:
        permission = rbac_service.get_permission_by_slug(db, perm_data["slug"])
        if not permission:
            db.add(Permission(**perm_data))
            created += 1
        else:
            permission.name = perm_data["name"]
            permission.group = perm_data["group"]
    db.flush()

    # Seed roles and role-permissions
    for role_data in DEFAULT_ROLES:
        role = rbac_service.get_role_by_slug(db, role_data["slug"])
        if not role:
            role = Role(
                slug=role_data["slug"],
                name=role_data["name"],
                level=role_data["level"],
                description=role_data["description"],
            )
            role.permissions = [
                permission
                for permission in (
                    rbac_service.get_permission_by_slug(db, slug)
                    for slug in role_data["permissions"]
                )
                if permission
            ]
            db.add(role)
    db.commit()
    logger.info(f"Seeded {created} new permissions and {len(DEFAULT_ROLES)} default roles")
