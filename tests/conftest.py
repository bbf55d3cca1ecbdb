"""
Shared pytest fixtures.

Every test gets a fresh app bound to its own in-memory SQLite database and a
temporary static directory holding a stub single-page app.
"""
import os

# Must be set before src.main is imported, it builds a module-level app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.db.core import Base, build_engine, build_session_factory
from src.main import create_app

INDEX_HTML = "<!doctype html><html><body><div id=\"root\"></div></body></html>"
DEFAULT_PASSWORD = "Secret123"


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text(INDEX_HTML)
    (public / "app.js").write_text("console.log('dashboard');")
    return public


@pytest.fixture
def settings(static_dir):
    return Settings(
        database_url="sqlite://",
        session_secret="test-session-secret",
        static_dir=str(static_dir),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db_session(app):
    """ORM session on the same in-memory database the app uses"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo_session():
    """Standalone session for repository tests that do not need HTTP"""
    engine = build_engine(Settings(database_url="sqlite://"))
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def register(client, email, password=DEFAULT_PASSWORD, full_name=None):
    return client.post("/api/register", json={"full_name": full_name, "email": email, "password": password})


def login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/api/login", json={"email": email, "password": password})


def signed_in_client(app, email, full_name=None):
    client = TestClient(app)
    assert register(client, email, full_name=full_name).status_code == 201
    assert login(client, email).status_code == 200
    return client


@pytest.fixture
def alice(app):
    return signed_in_client(app, "alice@example.com", full_name="Alice Owner")


@pytest.fixture
def bob(app):
    return signed_in_client(app, "bob@example.com", full_name="Bob Other")
