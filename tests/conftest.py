# tests/conftest.py
from __future__ import annotations

import difflib
import os
import uuid
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from cookbook.core.security import Actor, create_access_token
from cookbook.db.session import Base, build_engine
from cookbook.db.session import get_db as app_get_session
from cookbook.main import app as fastapi_app
from cookbook.models import User
from cookbook.schemas.recipe import RecipeCreate
from cookbook.services.recipe_service import RecipeService

TEST_DB_URL = "sqlite://"


def _trigram_like_similarity(left: str | None, right: str | None) -> float:
    """Stand-in for pg_trgm's ``similarity`` registered on SQLite test connections."""
    if left is None or right is None:
        return 0.0
    return difflib.SequenceMatcher(None, left.lower(), right.lower()).ratio()


def _clear_tables(engine: Engine) -> None:
    with engine.begin() as cleanup_conn:
        for table in reversed(Base.metadata.sorted_tables):
            cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Services commit and roll back on their own, so isolation comes from
    # emptying every table afterwards instead of an outer transaction.
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        _clear_tables(engine)


@pytest.fixture()
def file_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """File-backed SQLite engine whose connections can be used from many threads."""
    engine = build_engine(f"sqlite:///{tmp_path / 'cookbook-test.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def similarity_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """SQLite engine providing a ``similarity(text, text)`` SQL function."""
    engine = build_engine(f"sqlite:///{tmp_path / 'cookbook-fuzzy.db'}")

    @event.listens_for(engine, "connect")
    def _register_similarity(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.create_function("similarity", 2, _trigram_like_similarity)

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


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


def create_user(session: Session, username: str, *, is_admin: bool = False) -> User:
    """Persist and return a user account."""
    user = User(id=str(uuid.uuid4()), username=username, is_admin=is_admin)
    session.add(user)
    session.commit()
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return the primary test user."""
    return create_user(db_session, "chef")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second, unrelated user."""
    return create_user(db_session, "sous-chef")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """Create and return a user with admin rights."""
    return create_user(db_session, "head-chef", is_admin=True)


@pytest.fixture()
def actor(test_user: User) -> Actor:
    return Actor(id=test_user.id)


@pytest.fixture()
def other_actor(other_user: User) -> Actor:
    return Actor(id=other_user.id)


@pytest.fixture()
def admin_actor(admin_user: User) -> Actor:
    return Actor(id=admin_user.id, is_elevated=True)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the admin user."""
    token = create_access_token(admin_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def service() -> RecipeService:
    return RecipeService()


@pytest.fixture()
def test_recipe(db_session: Session, service: RecipeService, actor: Actor) -> str:
    """Create a baseline recipe owned by the primary test user and return its id."""
    payload = RecipeCreate(
        title="Tomato soup",
        instructions="Simmer the tomatoes and blend.",
        ingredients=[{"name": "Tomato", "quantity": "4"}, {"name": "Salt"}],
        categories=[{"name": "Soup"}],
    )
    return service.create_recipe(db_session, actor, payload)
