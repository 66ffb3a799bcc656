"""Shared test helpers: in-memory SQLite store and a TestClient bound to it."""

from collections.abc import Callable, Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_token_codec
from app.core.database import get_db
from app.core.security import TokenCodec
from app.main import app
from app.models import Base

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


def make_codec(secret: str = TEST_SECRET) -> TokenCodec:
    return TokenCodec(secret=secret, algorithm="HS256", ttl_seconds=1800)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with the full schema and FK enforcement."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_client(
    session_factory: Callable[[], Session],
    codec: TokenCodec | None = None,
    raise_server_exceptions: bool = True,
) -> TestClient:
    """TestClient whose get_db and token codec are replaced. Call reset_overrides() afterwards."""

    def override_get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    test_codec = codec or make_codec()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_codec] = lambda: test_codec
    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


def reset_overrides() -> None:
    app.dependency_overrides.clear()
