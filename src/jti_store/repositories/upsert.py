"""Insert-or-update statements for each supported database engine.

Every supported engine gets a single atomic statement so concurrent
refreshes of the same JTI cannot race into duplicate-key errors. Engines
outside the supported set fall back to ``update_then_insert``, which leaves a
window between the two statements where a concurrent insert of the same JTI
fails with an integrity error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import String, Table, bindparam, insert, text, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session
from sqlalchemy.sql.base import Executable
from sqlalchemy.sql.elements import TextClause

from jti_store.core.errors import DialectConfigurationError
from jti_store.db.dialect import DatabaseEngine
from jti_store.db.time import UTCDateTime

logger = logging.getLogger(__name__)

StatementBuilder = Callable[[Table, Mapping[str, Any]], Executable]

__all__ = [
    "UPSERT_STATEMENTS",
    "StatementBuilder",
    "statement_for",
    "update_then_insert",
    "write_upsert",
]


def _on_conflict_postgresql(table: Table, values: Mapping[str, Any]) -> Executable:
    stmt = postgresql.insert(table).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=[table.c.jwt_id],
        set_={
            "exp_time": stmt.excluded.exp_time,
            "time_created": stmt.excluded.time_created,
        },
    )


def _on_conflict_sqlite(table: Table, values: Mapping[str, Any]) -> Executable:
    stmt = sqlite.insert(table).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=[table.c.jwt_id],
        set_={
            "exp_time": stmt.excluded.exp_time,
            "time_created": stmt.excluded.time_created,
        },
    )


def _on_duplicate_key_mysql(table: Table, values: Mapping[str, Any]) -> Executable:
    stmt = mysql.insert(table).values(**values)
    return stmt.on_duplicate_key_update(
        exp_time=stmt.inserted.exp_time,
        time_created=stmt.inserted.time_created,
    )


def _bind_values(clause: TextClause, values: Mapping[str, Any]) -> TextClause:
    return clause.bindparams(
        bindparam("jwt_id", values["jwt_id"], type_=String()),
        bindparam("exp_time", values["exp_time"], type_=UTCDateTime()),
        bindparam("time_created", values["time_created"], type_=UTCDateTime()),
    )


def _merge_oracle(table: Table, values: Mapping[str, Any]) -> Executable:
    clause = text(
        f"MERGE INTO {table.name} t "
        "USING (SELECT :jwt_id AS jwt_id, :exp_time AS exp_time, "
        ":time_created AS time_created FROM dual) s "
        "ON (t.jwt_id = s.jwt_id) "
        "WHEN MATCHED THEN UPDATE SET t.exp_time = s.exp_time, "
        "t.time_created = s.time_created "
        "WHEN NOT MATCHED THEN INSERT (jwt_id, exp_time, time_created) "
        "VALUES (s.jwt_id, s.exp_time, s.time_created)"
    )
    return _bind_values(clause, values)


def _merge_mssql(table: Table, values: Mapping[str, Any]) -> Executable:
    # HOLDLOCK keeps the match check and the write under one range lock.
    clause = text(
        f"MERGE INTO {table.name} WITH (HOLDLOCK) AS t "
        "USING (SELECT :jwt_id AS jwt_id, :exp_time AS exp_time, "
        ":time_created AS time_created) AS s "
        "ON t.jwt_id = s.jwt_id "
        "WHEN MATCHED THEN UPDATE SET exp_time = s.exp_time, "
        "time_created = s.time_created "
        "WHEN NOT MATCHED THEN INSERT (jwt_id, exp_time, time_created) "
        "VALUES (s.jwt_id, s.exp_time, s.time_created);"
    )
    return _bind_values(clause, values)


def _merge_db2(table: Table, values: Mapping[str, Any]) -> Executable:
    # DB2 rejects untyped parameter markers inside VALUES.
    length = table.c.jwt_id.type.length
    clause = text(
        f"MERGE INTO {table.name} t "
        f"USING (VALUES (CAST(:jwt_id AS VARCHAR({length})), "
        "CAST(:exp_time AS TIMESTAMP), CAST(:time_created AS TIMESTAMP))) "
        "AS s (jwt_id, exp_time, time_created) "
        "ON t.jwt_id = s.jwt_id "
        "WHEN MATCHED THEN UPDATE SET exp_time = s.exp_time, "
        "time_created = s.time_created "
        "WHEN NOT MATCHED THEN INSERT (jwt_id, exp_time, time_created) "
        "VALUES (s.jwt_id, s.exp_time, s.time_created)"
    )
    return _bind_values(clause, values)


UPSERT_STATEMENTS: dict[DatabaseEngine, StatementBuilder] = {
    DatabaseEngine.POSTGRESQL: _on_conflict_postgresql,
    DatabaseEngine.SQLITE: _on_conflict_sqlite,
    DatabaseEngine.MYSQL: _on_duplicate_key_mysql,
    DatabaseEngine.MARIADB: _on_duplicate_key_mysql,
    DatabaseEngine.ORACLE: _merge_oracle,
    DatabaseEngine.MSSQL: _merge_mssql,
    DatabaseEngine.DB2: _merge_db2,
}


def statement_for(engine: DatabaseEngine) -> StatementBuilder | None:
    """Return the atomic upsert builder for ``engine``, or None if it has none."""
    return UPSERT_STATEMENTS.get(engine)


def update_then_insert(session: Session, table: Table, values: Mapping[str, Any]) -> None:
    """Refresh an existing row, inserting it when nothing matched."""
    result = session.execute(
        update(table)
        .where(table.c.jwt_id == values["jwt_id"])
        .values(exp_time=values["exp_time"], time_created=values["time_created"])
    )
    if result.rowcount == 0:
        session.execute(insert(table).values(**values))


def write_upsert(
    session: Session,
    engine: DatabaseEngine,
    table: Table,
    values: Mapping[str, Any],
    *,
    allow_default: bool = True,
) -> None:
    """Execute the insert-or-update for ``engine`` inside ``session``.

    Raises:
        DialectConfigurationError: If ``engine`` has no dedicated statement and
            the default variant is disabled.
    """
    build = statement_for(engine)
    if build is not None:
        session.execute(build(table, values))
        return

    if not allow_default:
        raise DialectConfigurationError(
            f"No insert-or-update statement for database engine '{engine.value}'.",
            jti=values.get("jwt_id"),
        )
    logger.warning(
        "Using update-then-insert for JTI %s on unsupported engine %s",
        values.get("jwt_id"),
        engine.value,
    )
    update_then_insert(session, table, values)
