# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from src.config import settings
from src.database import configure_sqlite, get_db
from src.main import app
from src.models import User
from src.models.base import Base
from src.services import rbac_service
from src.services.rbac_seed_service import seed_rbac_data

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = configure_sqlite(
    create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Factory for extra sessions on the test database, e.g. one per thread.

    Commit ``db_session`` before using them: its open read transaction
    holds a SQLite lock that blocks their writes.
    """
    return TestingSessionLocal


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """Seed the default permission catalog and roles."""
    seed_rbac_data(db_session)
    return db_session


@pytest.fixture
def make_user(db_session):
    """Factory creating persisted users."""

    def _make_user(name: str = "member", console_user_id: str | None = None) -> User:
        user = User(
            name=name,
            email=f"{name}@example.com",
            console_user_id=console_user_id,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def test_user(make_user) -> User:
    """A user without any role."""
    return make_user("testuser", console_user_id="console-testuser")


@pytest.fixture
def admin_user(seeded, make_user) -> User:
    """A user holding the admin role globally."""
    user = make_user("admin", console_user_id="console-admin")
    admin_role = rbac_service.get_role_by_slug(seeded, "admin")
    rbac_service.assign_role_to_user(seeded, user_id=user.id, role_id=admin_role.id)
    return user


@pytest.fixture
def authenticated_client(client, test_user):
    """Client authenticated as a user without roles."""
    client.headers[settings.user_header] = test_user.console_user_id
    return client


@pytest.fixture
def admin_client(client, admin_user):
    """Client authenticated as a global admin."""
    client.headers[settings.user_header] = admin_user.console_user_id
    return client
