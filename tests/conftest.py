"""Shared fixtures: an in-memory database, the FastAPI app and a few users."""

import os

# Settings are read at import time, so the environment has to be ready first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "disabled"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["BOT_PROVIDER"] = "scripted"
os.environ["BOT_REPLY_DELAY_SECONDS"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import chatapp.chat.models  # noqa: F401  registers the messages table
from chatapp.api.dependencies import get_bot_provider
from chatapp.core.database import get_db
from chatapp.core.security import create_access_token, get_password_hash
from chatapp.models.base import Base
from chatapp.models.user import User
from chatapp.services.bot_service import ScriptedBotProvider
from chatapp.services.websocket_manager import connection_manager


DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_connection_manager():
    connection_manager.user_connections.clear()
    connection_manager.connection_info.clear()
    yield
    connection_manager.user_connections.clear()
    connection_manager.connection_info.clear()


@pytest.fixture
def app(session_factory):
    from main import create_app

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_bot_provider] = lambda: ScriptedBotProvider(delay_seconds=0)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def make_user(db, full_name: str, email: str, password: str = DEFAULT_PASSWORD, **fields) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=get_password_hash(password),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture
def alice(db):
    return make_user(db, "Alice Doe", "alice@example.com")


@pytest.fixture
def bob(db):
    return make_user(db, "Bob Roe", "bob@example.com")


@pytest.fixture
def carol(db):
    return make_user(db, "Carol Poe", "carol@example.com")
