# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("FRONTEND_URL", "http://localhost:3000")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from quillpress.core.security import TokenService, get_token_service
from quillpress.core.settings import Settings
from quillpress.db.session import Base
from quillpress.db.session import get_db as app_get_session
from quillpress.main import app as fastapi_app
from quillpress.models import Account, Post
from quillpress.services.credentials import CredentialStore
from quillpress.services.posts import PostService

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse battery staple"

_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Services commit their own work, so each test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture()
def token_service() -> TokenService:
    return get_token_service()


@pytest.fixture()
def store(db_session: Session) -> CredentialStore:
    return CredentialStore(db_session)


@pytest.fixture()
def post_service(db_session: Session) -> PostService:
    return PostService(db_session)


def _register(store: CredentialStore, username: str) -> Account:
    return store.register(
        username=username,
        email=f"{username}@example.com",
        first_name=username.capitalize(),
        last_name="Tester",
        password=TEST_PASSWORD,
    )


@pytest.fixture()
def test_user(store: CredentialStore) -> Account:
    """Create and return the primary test account."""
    return _register(store, "alice")


@pytest.fixture()
def other_user(store: CredentialStore) -> Account:
    """Create and return a second test account."""
    return _register(store, "bob")


@pytest.fixture()
def auth_token(test_user: Account, token_service: TokenService) -> dict[str, str]:
    """Return token headers for the primary test user."""
    return {_TEST_SETTINGS_INSTANCE.token_header_name: token_service.issue(test_user.id)}


@pytest.fixture()
def other_auth_token(other_user: Account, token_service: TokenService) -> dict[str, str]:
    """Return token headers for the secondary test user."""
    return {_TEST_SETTINGS_INSTANCE.token_header_name: token_service.issue(other_user.id)}


@pytest.fixture()
def post_payload() -> dict[str, Any]:
    return {
        "title": "First steps",
        "content": "<p>Hello <b>world</b></p>",
        "tags": ["intro", "python"],
    }


@pytest.fixture()
def test_post(post_service: PostService, test_user: Account, post_payload: dict[str, Any]) -> Post:
    """Create a draft owned by the primary test user."""
    return post_service.create(test_user.id, post_payload)


@pytest.fixture()
def published_post(
    post_service: PostService,
    test_user: Account,
    post_payload: dict[str, Any],
) -> Post:
    """Create a published post owned by the primary test user."""
    return post_service.create(test_user.id, {**post_payload, "status": "published"})
