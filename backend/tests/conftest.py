# backend/tests/conftest.py
"""
Shared fixtures.

The environment must be set before any switchboard import: settings are
read once, and the engine is built from DATABASE_URL at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:3000"

import pytest
from fastapi.testclient import TestClient

from switchboard.core.presence import registry
from switchboard.infra.database import Base, SessionLocal, engine, init_db
from switchboard.main import app
from switchboard.models import User


@pytest.fixture(autouse=True)
def database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_registry():
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_user(db, user_id: str, username: str) -> User:
    user = User(
        id=user_id,
        username=username,
        email=f"{username}@example.com",
        password_hash="$2b$12$notarealhashbutsecretanyway",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def alice(db):
    return _create_user(db, "u1", "alice")


@pytest.fixture
def bob(db):
    return _create_user(db, "u2", "bob")


@pytest.fixture
def carol(db):
    return _create_user(db, "u3", "carol")


@pytest.fixture
def client():
    # Context manager runs the lifespan and shares one event loop
    # between HTTP calls and open websockets
    with TestClient(app) as test_client:
        yield test_client
