"""Detection of the database engine behind a session."""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from jti_store.core.errors import DialectConfigurationError

logger = logging.getLogger(__name__)


class DatabaseEngine(str, Enum):
    """Database engines with a dedicated upsert statement.

    ``OTHER`` stands for any SQL engine outside the supported set.
    """

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MARIADB = "mariadb"
    SQLITE = "sqlite"
    ORACLE = "oracle"
    MSSQL = "mssql"
    DB2 = "db2"
    OTHER = "other"


# SQLAlchemy dialect name -> engine
_DIALECT_NAMES: dict[str, DatabaseEngine] = {
    "postgresql": DatabaseEngine.POSTGRESQL,
    "mysql": DatabaseEngine.MYSQL,
    "mariadb": DatabaseEngine.MARIADB,
    "sqlite": DatabaseEngine.SQLITE,
    "oracle": DatabaseEngine.ORACLE,
    "mssql": DatabaseEngine.MSSQL,
    "db2": DatabaseEngine.DB2,
    "ibm_db_sa": DatabaseEngine.DB2,
}


def engine_for_dialect_name(name: str | None) -> DatabaseEngine:
    """Map a SQLAlchemy dialect name onto a ``DatabaseEngine``.

    Raises:
        DialectConfigurationError: If no dialect name is available.
    """
    if not name:
        raise DialectConfigurationError("Unable to detect the database dialect.")
    return _DIALECT_NAMES.get(name.lower(), DatabaseEngine.OTHER)


def detect_engine(bind: Session | Connection | Engine) -> DatabaseEngine:
    """Return the engine a session, connection or engine talks to."""
    if isinstance(bind, Session):
        bind = bind.get_bind()
    dialect = getattr(bind, "dialect", None)
    name = getattr(dialect, "name", None)
    engine = engine_for_dialect_name(name)
    if engine is DatabaseEngine.OTHER:
        logger.debug("Dialect %s is outside the supported engine set", name)
    return engine
