import os

# settings are read once, before the application module is imported
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["ADMIN_EMAIL"] = "admin@campus.edu"
os.environ["ADMIN_PASSWORD"] = "Adm1nSecret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from lostfound.db.db import create_db_and_tables, get_session
from lostfound.main import app
from lostfound.models.user import User, UserRole
from lostfound.utils.passwords import hash_password
from lostfound.utils.sessions import get_session_issuer


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """API client wired to the test database."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    """Factory inserting a user straight into the credential store."""

    def _make_user(name="Alice", email="alice@campus.edu", role=UserRole.student, password="Passw0rd"):
        user = User(
            name=name,
            email=email.lower(),
            password_hash=hash_password(password),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def other_student(make_user):
    return make_user(name="Bob", email="bob@campus.edu")


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="staff@campus.edu", role=UserRole.admin)


@pytest.fixture
def auth_headers():
    """Bearer header for a user, signed with the application's issuer."""

    def _auth_headers(user):
        token = get_session_issuer().issue(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def item_fields():
    return {
        "title": "Blue backpack",
        "description": "Navy blue backpack with a laptop inside",
        "type": "lost",
        "location": "Library, 2nd floor",
        "date": "2025-03-14T10:30:00Z",
        "contact": "555-0101",
    }
