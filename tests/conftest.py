import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from user_service.config import Settings
from user_service.database import build_session_factory, init_db
from user_service.main import create_app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(engine):
    return create_app(settings=Settings(), engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def register(client):
    def _register(username="alice", email="a@x.com", password="secret123", **extra):
        payload = {"username": username, "email": email, "password": password, **extra}
        return client.post("/api/users/register", json=payload)
    return _register
