import os

# Must be set before todoapp.core.config is imported
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from todoapp.api.dependencies import get_password_hasher
from todoapp.core.config import Settings, get_settings
from todoapp.core.database import build_engine, get_db, init_db
from todoapp.core.security import PasswordHasher, TokenService
from todoapp.main import app

TEST_SECRET = "test-secret-key"

# Minimum bcrypt cost keeps the suite fast; the algorithm is unchanged
fast_hasher = PasswordHasher(bcrypt__rounds=4)


@pytest.fixture
def hasher():
    return fast_hasher


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET, expiry_hours=24)


@pytest.fixture
def engine():
    # One shared in-memory database per test
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: Settings(
        JWT_SECRET=TEST_SECRET, JWT_EXPIRY_HOURS=24
    )
    app.dependency_overrides[get_password_hasher] = lambda: fast_hasher
    # Not used as a context manager: the lifespan would touch the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email="a@x.com", password="secret1", name="A"):
    return client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "name": name},
    )


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
