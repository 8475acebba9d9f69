from __future__ import annotations

import argparse
from datetime import timedelta
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from only_bingo.config import MissingDatabaseUrlError, configure_logging, load_config
from only_bingo.core.retention import RETENTION_WINDOW, purge_expired_boards
from only_bingo.core.store import BoardStore


logger = logging.getLogger("cleanup_old_boards")


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Delete shared bingo boards older than the retention window.")
    parser.add_argument(
        "--max-age-hours",
        type=float,
        default=RETENTION_WINDOW.total_seconds() / 3600,
        help="Delete boards created more than this many hours ago (default: 48)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Report what would be deleted without deleting")
    parser.add_argument("--env-file", default=None, help="Optional .env file to load DATABASE_URL from")
    args = parser.parse_args(argv)

    config = load_config(env_file=args.env_file)
    configure_logging(config.debug)

    try:
        database_url = config.require_database_url()
    except MissingDatabaseUrlError as exc:
        logger.error("%s", exc)
        return 1

    store = BoardStore.from_url(database_url)
    try:
        purge_expired_boards(store, max_age=timedelta(hours=args.max_age_hours), dry_run=args.dry_run)
    except SQLAlchemyError:
        logger.exception("Cleanup failed")
        return 1
    finally:
        store.engine.dispose()

    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        raise SystemExit(130)
