# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from jti_store.db.session import Base
from jti_store.services.jti_store import JTIStore

TEST_DB_URL = "sqlite://"


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
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def strict_store(session_factory: sessionmaker[Session]) -> JTIStore:
    return JTIStore(session_factory, prevent_token_reuse=True)


@pytest.fixture()
def relaxed_store(session_factory: sessionmaker[Session]) -> JTIStore:
    return JTIStore(session_factory, prevent_token_reuse=False)


@pytest.fixture()
def failing_session(mocker):
    """Session factory whose session raises the configured error on execute.

    Returns ``(factory, session)``; set ``session.execute.side_effect``.
    """
    session = mocker.MagicMock()
    factory = mocker.MagicMock()
    factory.return_value.__enter__.return_value = session
    factory.return_value.__exit__.return_value = None
    session.begin.return_value.__exit__.return_value = None
    return factory, session
