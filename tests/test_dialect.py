"""Database engine detection."""

from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from jti_store.core.errors import DialectConfigurationError
from jti_store.db.dialect import DatabaseEngine, detect_engine, engine_for_dialect_name


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("postgresql", DatabaseEngine.POSTGRESQL),
        ("mysql", DatabaseEngine.MYSQL),
        ("mariadb", DatabaseEngine.MARIADB),
        ("sqlite", DatabaseEngine.SQLITE),
        ("oracle", DatabaseEngine.ORACLE),
        ("mssql", DatabaseEngine.MSSQL),
        ("ibm_db_sa", DatabaseEngine.DB2),
        ("DB2", DatabaseEngine.DB2),
        ("firebird", DatabaseEngine.OTHER),
    ],
)
def test_engine_for_dialect_name(name: str, expected: DatabaseEngine) -> None:
    assert engine_for_dialect_name(name) is expected


@pytest.mark.parametrize("name", [None, ""])
def test_missing_dialect_name_is_configuration_error(name) -> None:
    with pytest.raises(DialectConfigurationError):
        engine_for_dialect_name(name)


def test_detect_engine_from_engine_and_session() -> None:
    engine = create_engine("sqlite://")
    try:
        assert detect_engine(engine) is DatabaseEngine.SQLITE
        with Session(bind=engine) as session:
            assert detect_engine(session) is DatabaseEngine.SQLITE
    finally:
        engine.dispose()


def test_detect_engine_from_bind_without_dialect() -> None:
    with pytest.raises(DialectConfigurationError):
        detect_engine(SimpleNamespace())


def test_detect_engine_uses_dialect_name() -> None:
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mssql"))
    assert detect_engine(bind) is DatabaseEngine.MSSQL
