# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Runtime configuration.

    Every field can be overridden with an environment variable of the same
    name (case-insensitive) or through a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "SSO Admin Backend"
    database_url: str = "sqlite:///./admin.db"
    log_level: str = "INFO"

    # Comma-separated
    cors_origins: str = "http://localhost:3000"
    system_role_slugs: str = "admin,manager,member"

    # Headers set by the SSO gateway in front of this service
    user_header: str = "X-Console-User-Id"
    org_header: str = "X-Org-Id"
    branch_header: str = "X-Branch-Id"

    @property
    def cors_origin_list(self) -> list[str]:
        return _split(self.cors_origins)

    @property
    def system_roles(self) -> frozenset[str]:
        """Role slugs that are protected from deletion."""
        return frozenset(_split(self.system_role_slugs))


settings = Settings()
