"""Database session configuration."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from jti_store.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import jti_store.models  # noqa: E402,F401

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=settings.db_pool_pre_ping,
    echo=settings.sql_debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=bind or engine)
