# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from confession_wall.core.settings import Settings
from confession_wall.db.session import (
    build_engine,
    build_session_factory,
    create_tables,
    drop_tables,
)
from confession_wall.main import create_app
from confession_wall.models import Confession, ConfessionStatus
from confession_wall.repositories import ConfessionRepository

TEST_DB_URL = "sqlite://"
ADMIN_TOKEN = "test-admin-token"


@pytest.fixture()
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        database_url=TEST_DB_URL,
        admin_token=ADMIN_TOKEN,
        supabase_url=None,
        supabase_anon_key=None,
        log_level="WARNING",
    )


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = build_engine(TEST_DB_URL)
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repository(db_session: Session) -> ConfessionRepository:
    return ConfessionRepository(db_session)


@pytest.fixture()
def app(test_settings: Settings, engine: Engine) -> FastAPI:
    return create_app(test_settings, engine=engine)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    """Return authorization headers for the moderator."""
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture()
def make_confession(
    repository: ConfessionRepository,
    db_session: Session,
) -> Callable[..., Confession]:
    """Create a confession directly in the store, optionally with a status."""

    def _make(
        content: str = "I still sleep with a night light",
        category: str = "secrets",
        nickname: str | None = None,
        status: ConfessionStatus = ConfessionStatus.PENDING,
    ) -> Confession:
        confession_id = repository.create_confession(content, category, nickname)
        if status is not ConfessionStatus.PENDING:
            repository.set_status(confession_id, status)
        confession = db_session.get(Confession, confession_id)
        assert confession is not None
        return confession

    return _make
