"""Data access helpers for working with JTI entries."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.orm import Session

from jti_store.db.dialect import DatabaseEngine
from jti_store.models.jti import JTIEntry
from jti_store.repositories.upsert import write_upsert

__all__ = ["JTIRepository"]


class JTIRepository:
    """Thin wrapper around database access for JTI entries.

    The repository never commits; the caller owns the unit of work.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    @property
    def table(self) -> Table:
        return JTIEntry.__table__  # type: ignore[return-value]

    def count(self, jti: str) -> int:
        """Return how many rows are stored for ``jti``."""
        stmt = select(func.count()).select_from(JTIEntry).where(JTIEntry.jwt_id == jti)
        return int(self.session.execute(stmt).scalar_one())

    def get_times(self, jti: str) -> tuple[datetime, datetime] | None:
        """Return ``(exp_time, time_created)`` for ``jti`` or None."""
        stmt = select(JTIEntry.exp_time, JTIEntry.time_created).where(JTIEntry.jwt_id == jti)
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row.exp_time, row.time_created

    def insert(self, jti: str, exp_time: datetime, time_created: datetime) -> None:
        """Insert a new entry; a duplicate ``jti`` raises ``IntegrityError``."""
        self.session.execute(
            insert(self.table).values(
                jwt_id=jti, exp_time=exp_time, time_created=time_created
            )
        )

    def upsert(
        self,
        engine: DatabaseEngine,
        jti: str,
        exp_time: datetime,
        time_created: datetime,
        *,
        allow_default: bool = True,
    ) -> None:
        """Insert ``jti`` or refresh its timestamps using the engine's statement."""
        write_upsert(
            self.session,
            engine,
            self.table,
            {"jwt_id": jti, "exp_time": exp_time, "time_created": time_created},
            allow_default=allow_default,
        )

    def delete_expired(self, before: datetime) -> int:
        """Delete entries whose expiry is earlier than ``before``.

        Returns:
            Number of rows removed.
        """
        result = self.session.execute(
            delete(JTIEntry)
            .where(JTIEntry.exp_time < before)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
