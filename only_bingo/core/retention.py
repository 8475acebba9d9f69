from __future__ import annotations

from datetime import datetime, timedelta
import logging

from .store import BoardStore, utcnow


logger = logging.getLogger(__name__)

RETENTION_WINDOW = timedelta(hours=48)


def purge_expired_boards(
    store: BoardStore,
    *,
    now: datetime | None = None,
    max_age: timedelta = RETENTION_WINDOW,
    dry_run: bool = False,
) -> list[str]:
    cutoff = (now or utcnow()) - max_age
    logger.info("Purging boards created before %s", cutoff.isoformat())

    if dry_run:
        ids = store.list_created_before(cutoff)
        logger.info("[dry-run] Would delete %d board(s)", len(ids))
    else:
        ids = store.delete_created_before(cutoff)
        logger.info("Deleted %d board(s) older than %s", len(ids), max_age)

    if ids:
        logger.info("Board IDs: %s", ", ".join(ids))
    return ids
