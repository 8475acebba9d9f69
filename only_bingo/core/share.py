from __future__ import annotations

import logging
from typing import Any, Callable, Sequence
from urllib.parse import quote, urlencode

import requests

from .errors import NotFoundError, ValidationError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def build_share_url(site_url: str, board_id: str) -> str:
    return f"{site_url.rstrip('/')}/?{urlencode({'id': board_id})}"


class BoardsClient:
    """HTTP client for the ``/api/boards`` endpoints."""

    def __init__(
        self,
        api_base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = api_base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _check(self, response: requests.Response) -> None:
        if response.status_code == 400:
            try:
                body = response.json() if response.content else {}
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise ValidationError(body.get("error") or "Invalid request", issues=body.get("issues"))
        if response.status_code == 404:
            raise NotFoundError("Board not found")
        response.raise_for_status()

    def create_board(self, words: Sequence[str], board: Sequence[Sequence[str | None]]) -> str:
        response = self._session.post(
            f"{self._base_url}/api/boards",
            json={"words": list(words), "board": [list(row) for row in board]},
            timeout=self._timeout,
        )
        self._check(response)
        return response.json()["id"]

    def get_board(self, board_id: str) -> dict[str, Any]:
        response = self._session.get(f"{self._base_url}/api/boards/{quote(board_id, safe='')}", timeout=self._timeout)
        self._check(response)
        return response.json()


class ShareLinkService:
    def __init__(
        self,
        client: BoardsClient,
        site_url: str,
        *,
        clipboard: Callable[[str], None] | None = None,
    ) -> None:
        self._client = client
        self._site_url = site_url
        self._clipboard = clipboard
        self.shareable_link = ""
        self.is_generating = False

    def generate_share_link(self, words: Sequence[str], board: Sequence[Sequence[str | None]]) -> str:
        self.is_generating = True
        self.shareable_link = ""
        try:
            board_id = self._client.create_board(words, board)
            self.shareable_link = build_share_url(self._site_url, board_id)
            return self.shareable_link
        except Exception:
            logger.exception("Failed to generate share link")
            raise
        finally:
            self.is_generating = False

    def copy_to_clipboard(self) -> bool:
        if not self.shareable_link or self._clipboard is None:
            return False
        try:
            self._clipboard(self.shareable_link)
        except Exception:
            logger.exception("Failed to copy share link")
            return False
        return True
