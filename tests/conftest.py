from __future__ import annotations

import pytest

from only_bingo.config import AppConfig
from only_bingo.core.boards import BoardService
from only_bingo.core.store import BoardStore
from only_bingo.web.app import create_app


class FakeTimer:
    def __init__(self, due: float, callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock for the celebration timer."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def schedule(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in list(self.timers):
            if not timer.cancelled and not timer.fired and timer.due <= self.now:
                timer.fired = True
                timer.callback()

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]


@pytest.fixture
def words() -> list[str]:
    return [f"Word {i}" for i in range(24)]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def store() -> BoardStore:
    store = BoardStore.from_url("sqlite://")
    store.init_schema()
    yield store
    store.engine.dispose()


@pytest.fixture
def service(store: BoardStore) -> BoardService:
    return BoardService(store)


@pytest.fixture
def app(store: BoardStore):
    config = AppConfig(site_url="https://bingo.example", database_url="sqlite://", secret_key="test-secret-key")
    flask_app = create_app(config, store=store)
    flask_app.config.update({"TESTING": True})
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clean_env(monkeypatch):
    """Unset config variables; values loaded from .env files are removed on teardown."""
    for name in ("DATABASE_URL", "SITE_URL", "FLASK_SECRET_KEY", "ONLY_BINGO_DEBUG"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
