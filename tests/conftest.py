"""Shared pytest fixtures for the FreelanceHub API tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from freelancehub.core.security import create_access_token
from freelancehub.db.session import enable_sqlite_foreign_keys, get_db, init_db
from freelancehub.main import app
from freelancehub.models.user import User
from freelancehub.services.guest_store import GuestSessionRegistry, GuestStore


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every session in one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def guest_registry():
    return GuestSessionRegistry()


@pytest.fixture
def guest_store():
    return GuestStore()


@pytest.fixture
def client(engine, guest_registry):
    """TestClient wired to the test database and a fresh guest registry."""

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.guest_registry = guest_registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db_session, email, **fields):
    user = User(email=email, **fields)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return make_user(db_session, "freelancer@example.com", full_name="Fran Lancer")


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, "someone.else@example.com", full_name="Other Person")


@pytest.fixture
def guest_user(db_session):
    return make_user(db_session, "guest-1234@demo.local", full_name="Demo Guest User", is_guest=True)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}
