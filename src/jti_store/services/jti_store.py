"""JWT ID persistence for replay prevention.

``JTIStore`` is the only writer of JTI entries. Each call runs in its own
session obtained from the injected factory; the session is closed on every
exit path and writes are rolled back on any failure. Mutual exclusion is left
to the database: strict mode relies on the primary key, relaxed mode on a
single insert-or-update statement per engine.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jti_store.core.errors import JTIConflictError, JTIValidationError
from jti_store.core.settings import settings
from jti_store.db.dialect import DatabaseEngine, detect_engine
from jti_store.db.time import to_epoch_millis, to_utc
from jti_store.repositories.jti_repo import JTIRepository

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]
EngineDetector = Callable[[Session], DatabaseEngine]


@dataclass(frozen=True)
class JTIRecord:
    """Stored expiry and creation time of a JTI, both aware UTC datetimes."""

    jti: str
    expires_at: datetime
    created_at: datetime

    @property
    def expiry_millis(self) -> int:
        return to_epoch_millis(self.expires_at)

    @property
    def created_millis(self) -> int:
        return to_epoch_millis(self.created_at)


class JTIStore:
    """Record and look up JWT IDs of assertions used for client authentication."""

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        prevent_token_reuse: bool | None = None,
        detect_engine: EngineDetector = detect_engine,
        allow_default_dialect: bool | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session_factory: Callable returning a new session usable as a context
                manager. Defaults to the package ``SessionLocal``.
            prevent_token_reuse: Strict mode flag. Defaults to
                ``settings.prevent_token_reuse``.
            detect_engine: Returns the database engine behind a session.
            allow_default_dialect: Whether unsupported engines may use the
                update-then-insert fallback. Defaults to
                ``settings.allow_default_dialect``.
        """
        if session_factory is None:
            from jti_store.db.session import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory
        self._detect_engine = detect_engine
        self.prevent_token_reuse = (
            settings.prevent_token_reuse if prevent_token_reuse is None else prevent_token_reuse
        )
        self.allow_default_dialect = (
            settings.allow_default_dialect
            if allow_default_dialect is None
            else allow_default_dialect
        )

    def exists(self, jti: str) -> bool:
        """Return True if an entry for ``jti`` is stored.

        Raises:
            JTIValidationError: If the lookup fails.
        """
        _require_jti(jti)
        try:
            with self._session_factory() as session:
                return JTIRepository(session).count(jti) > 0
        except SQLAlchemyError as exc:
            logger.debug("Error when retrieving the JWT ID: %s", jti, exc_info=True)
            raise JTIValidationError(jti) from exc

    def get(self, jti: str) -> JTIRecord | None:
        """Return the stored entry for ``jti`` or None when there is none.

        Raises:
            JTIValidationError: If the lookup fails.
        """
        _require_jti(jti)
        try:
            with self._session_factory() as session:
                times = JTIRepository(session).get_times(jti)
        except SQLAlchemyError as exc:
            logger.debug("Error when retrieving the JWT ID: %s", jti, exc_info=True)
            raise JTIValidationError(jti) from exc
        if times is None:
            return None
        expires_at, created_at = times
        return JTIRecord(jti=jti, expires_at=expires_at, created_at=created_at)

    def persist(self, jti: str, expires_at: datetime, created_at: datetime) -> None:
        """Record ``jti`` and commit.

        In strict mode the entry is inserted and an existing entry is a replay.
        Otherwise an existing entry has its timestamps refreshed.

        Raises:
            JTIConflictError: Strict mode and ``jti`` is already stored.
            DialectConfigurationError: The database engine cannot be used.
            JTIValidationError: Invalid input or any other database failure.
        """
        _require_jti(jti)
        try:
            expires_at = to_utc(expires_at)
            created_at = to_utc(created_at)
        except (TypeError, ValueError) as exc:
            logger.debug("Rejected timestamps for JWT ID %s: %s", jti, exc)
            raise JTIValidationError(jti) from exc

        try:
            with self._session_factory() as session, session.begin():
                repo = JTIRepository(session)
                if self.prevent_token_reuse:
                    repo.insert(jti, expires_at, created_at)
                else:
                    repo.upsert(
                        self._detect_engine(session),
                        jti,
                        expires_at,
                        created_at,
                        allow_default=self.allow_default_dialect,
                    )
        except IntegrityError as exc:
            if self.prevent_token_reuse:
                logger.info("JWT ID %s is already recorded; rejecting replay", jti)
                raise JTIConflictError(jti) from exc
            logger.debug(
                "Error when storing the JWT ID: %s with exp: %s", jti, expires_at, exc_info=True
            )
            raise JTIValidationError(jti) from exc
        except SQLAlchemyError as exc:
            logger.debug(
                "Error when storing the JWT ID: %s with exp: %s", jti, expires_at, exc_info=True
            )
            raise JTIValidationError(jti) from exc


def _require_jti(jti: str) -> None:
    if not isinstance(jti, str) or not jti:
        raise JTIValidationError(jti or None)


def get_jti_store() -> JTIStore:
    """Return a JTI store bound to the configured database and policy."""
    return JTIStore()
