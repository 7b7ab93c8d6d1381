"""Create the JTI table on the configured database."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from jti_store.core.logging import setup_logging
from jti_store.core.settings import settings
from jti_store.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the JTI store tables")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop the tables before creating them again.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, settings.log_format)
    engine = create_engine(args.url or settings.effective_database_url)
    try:
        if args.drop:
            drop_tables(engine)
            logger.info("Dropped JTI store tables")
        create_tables(engine)
    except SQLAlchemyError as exc:
        logger.error("Failed to initialize database: %s", exc)
        return 1
    finally:
        engine.dispose()

    logger.info("Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
