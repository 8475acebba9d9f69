"""
Create/fetch operations for shared boards.

Validation always runs before the store is touched. Any store failure is
logged with the operation and board id and re-raised as ``InternalError``
so callers never see driver details.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .errors import InternalError, NotFoundError, ValidationError
from .store import BoardStore, generate_board_id
from .validation import parse_create_request, validate_board_id


logger = logging.getLogger(__name__)


class BoardService:
    def __init__(self, store: BoardStore, *, id_factory: Callable[[], str] = generate_board_id) -> None:
        self._store = store
        self._id_factory = id_factory

    def create(self, payload: Any) -> dict[str, str]:
        try:
            request = parse_create_request(payload)
        except ValidationError as exc:
            logger.warning("Rejected board create: %s", exc.issues)
            raise

        board_id = self._id_factory()
        try:
            self._store.insert(board_id, request.words, request.board)
        except Exception as exc:
            logger.exception("Failed to create board (id=%s): %s", board_id, exc)
            raise InternalError("Failed to create board") from exc

        logger.info("Created board %s with %d words", board_id, len(request.words))
        return {"id": board_id}

    def get(self, board_id: Any) -> dict[str, Any]:
        try:
            valid_id = validate_board_id(board_id)
        except ValidationError as exc:
            logger.warning("Invalid board ID %r: %s", board_id, exc.issues)
            raise

        try:
            stored = self._store.fetch(valid_id)
        except Exception as exc:
            logger.exception("Failed to fetch board (id=%s): %s", valid_id, exc)
            raise InternalError("Failed to fetch board") from exc

        if stored is None:
            logger.warning("Board not found: %s", valid_id)
            raise NotFoundError("Board not found")

        return {"words": stored.words, "board": stored.board}
