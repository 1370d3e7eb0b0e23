import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine, SQLModel
from sqlmodel.pool import StaticPool
from core.config import get_settings
from core.db import ensure_schema, reset_engine
from core.deps import get_db
from main import app


def make_memory_engine():
    """In-memory SQLite engine shared by every connection of the pool"""
    return create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep settings and the database file away from the real cache directory"""
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for var in ("SQLALCHEMY_DATABASE_URI", "STORAGE_DIR", "ENV_SECRETS"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    reset_engine()
    yield
    get_settings.cache_clear()
    reset_engine()


@pytest.fixture(name="engine")
def engine_fixture():
    engine = make_memory_engine()
    ensure_schema(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="broken_session")
def broken_session_fixture():
    """A session on a database that has no storage table"""
    engine = make_memory_engine()
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_db_override():
        return session

    app.dependency_overrides[get_db] = get_db_override

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
