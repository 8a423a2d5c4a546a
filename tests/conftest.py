"""
Shared fixtures: in-memory SQLite, fast bcrypt, FastAPI TestClient with overrides.
"""

import os

# Antes de importar app: settings se construye al importar
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import get_db
from app.config.settings import Settings
from app.core.auth.credentials import CredentialStore
from app.core.auth.dependencies import get_settings
from app.core.auth.passwords import PasswordHasher
from app.core.auth.session import SessionIssuer
from app.main import app
from app.shared.database.models import Base
from tests.helpers import TEST_SECRET, register


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        environment="test",
        secret_key=TEST_SECRET,
        password_hash_rounds=4,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer():
    return SessionIssuer(secret_key=TEST_SECRET)


@pytest.fixture
def credential_store(db_session, hasher):
    return CredentialStore(db_session, hasher)


@pytest.fixture
def client(session_factory, test_settings):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Usuario registrado vía API: (token, user)"""
    response = register(client)
    assert response.status_code == 200, response.text
    body = response.json()
    return body["token"], body["user"]
