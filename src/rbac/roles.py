# src/rbac/roles.py
from .permissions import ALL_PERMISSION_SLUGS

MANAGER_EXCLUDED = {
    "app.settings.system",
    "app.roles.delete",
    "app.permissions.manage",
    "app.audit.export",
}

# Default roles to seed on first run.
# admin, manager and member are system roles (see settings.system_role_slugs)
# and cannot be deleted; their permission sets can still be edited in the UI.
DEFAULT_ROLES = [
    {
        "slug": "admin",
        "name": "Administrator",
        "level": 100,
        "description": "Full access to every feature.",
        "permissions": ALL_PERMISSION_SLUGS,
    },
    {
        "slug": "manager",
        "name": "Manager",
        "level": 50,
        "description": "Manages users, teams and branches; no system settings.",
        "permissions": [p for p in ALL_PERMISSION_SLUGS if p not in MANAGER_EXCLUDED],
    },
    {
        "slug": "supervisor",
        "name": "Supervisor",
        "level": 30,
        "description": "Views data and manages team membership.",
        "permissions": [
            "app.dashboard.view",
            "app.dashboard.analytics",
            "app.users.view",
            "app.users.update",
            "app.teams.view",
            "app.teams.update",
            "app.teams.manage_members",
            "app.branches.view",
            "app.reports.view",
            "app.reports.create",
            "app.audit.view",
            "dashboard.view",
            "dashboard.analytics",
        ],
    },
    {
        "slug": "member",
        "name": "Member",
        "level": 10,
        "description": "Basic read access.",
        "permissions": [
            "app.dashboard.view",
            "app.users.view",
            "app.teams.view",
            "app.branches.view",
            "app.reports.view",
            "dashboard.view",
        ],
    },
    {
        "slug": "viewer",
        "name": "Viewer",
        "level": 5,
        "description": "Dashboard and reports only.",
        "permissions": [
            "app.dashboard.view",
            "app.reports.view",
            "dashboard.view",
        ],
    },
]
