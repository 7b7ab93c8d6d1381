"""Delete JTI entries whose expiry has passed.

Meant to run periodically (cron, Kubernetes CronJob). The store itself never
deletes entries.
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jti_store.core.logging import setup_logging
from jti_store.core.settings import settings
from jti_store.db.time import to_utc, utcnow
from jti_store.repositories.jti_repo import JTIRepository

logger = logging.getLogger(__name__)


def purge_expired(
    session_factory: Callable[[], Session],
    *,
    now: datetime | None = None,
    grace_seconds: int = 0,
) -> int:
    """Delete entries that expired more than ``grace_seconds`` before ``now``.

    Returns:
        Number of entries removed.
    """
    cutoff = to_utc(now or utcnow()) - timedelta(seconds=grace_seconds)
    with session_factory() as session, session.begin():
        removed = JTIRepository(session).delete_expired(cutoff)
    logger.info("Purged %d expired JTI entries older than %s", removed, cutoff.isoformat())
    return removed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired JTI entries")
    parser.add_argument(
        "--grace-seconds",
        type=int,
        default=settings.purge_grace_seconds,
        help="Keep entries this many seconds past their expiry.",
    )
    args = parser.parse_args(argv)
    if args.grace_seconds < 0:
        parser.error("--grace-seconds must not be negative")

    setup_logging(settings.log_level, settings.log_format)

    from jti_store.db.session import SessionLocal

    try:
        removed = purge_expired(SessionLocal, grace_seconds=args.grace_seconds)
    except SQLAlchemyError as exc:
        logger.error("Failed to purge expired JTI entries: %s", exc)
        return 1
    print(removed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
