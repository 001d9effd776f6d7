# src/rbac/permissions.py
"""Default permission catalog seeded on first run."""


def _permission(slug: str, group: str) -> dict:
    # "app.users.manage_members" -> "App Users Manage Members"
    name = " ".join(word.capitalize() for word in slug.replace("_", ".").split("."))
    return {"slug": slug, "name": name, "group": group}


CORE_PERMISSIONS = [
    # Dashboard
    _permission("dashboard.view", "dashboard"),
    _permission("dashboard.analytics", "dashboard"),
    _permission("app.dashboard.view", "app.dashboard"),
    _permission("app.dashboard.analytics", "app.dashboard"),
    # Users management
    _permission("app.users.view", "app.users"),
    _permission("app.users.create", "app.users"),
    _permission("app.users.update", "app.users"),
    _permission("app.users.delete", "app.users"),
    _permission("app.users.export", "app.users"),
    # Roles & permissions
    _permission("app.roles.view", "app.roles"),
    _permission("app.roles.create", "app.roles"),
    _permission("app.roles.update", "app.roles"),
    _permission("app.roles.delete", "app.roles"),
    _permission("app.permissions.manage", "app.roles"),
    # Branches
    _permission("app.branches.view", "app.branches"),
    _permission("app.branches.create", "app.branches"),
    _permission("app.branches.update", "app.branches"),
    _permission("app.branches.delete", "app.branches"),
    # Teams
    _permission("app.teams.view", "app.teams"),
    _permission("app.teams.create", "app.teams"),
    _permission("app.teams.update", "app.teams"),
    _permission("app.teams.delete", "app.teams"),
    _permission("app.teams.manage_members", "app.teams"),
    # Reports
    _permission("app.reports.view", "app.reports"),
    _permission("app.reports.create", "app.reports"),
    _permission("app.reports.export", "app.reports"),
    # Settings
    _permission("app.settings.view", "app.settings"),
    _permission("app.settings.update", "app.settings"),
    _permission("app.settings.system", "app.settings"),
    # Audit logs
    _permission("app.audit.view", "app.audit"),
    _permission("app.audit.export", "app.audit"),
]

ALL_PERMISSION_SLUGS = [p["slug"] for p in CORE_PERMISSIONS]
