from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import re
import secrets
import string

from sqlalchemy import JSON, Column, DateTime, String, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)

BOARD_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
BOARD_ID_LENGTH = 10

_PASSWORD_RE = re.compile(r":[^:@/]+@")

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BoardRecord(Base):
    __tablename__ = "boards"

    id = Column(String(BOARD_ID_LENGTH), primary_key=True)
    words = Column(JSON, nullable=False)
    board = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)


@dataclass(frozen=True)
class StoredBoard:
    id: str
    words: list[str]
    board: list[list[str | None]]
    created_at: datetime
    updated_at: datetime


def generate_board_id(size: int = BOARD_ID_LENGTH) -> str:
    return "".join(secrets.choice(BOARD_ID_ALPHABET) for _ in range(size))


def sanitize_url(url: str) -> str:
    return _PASSWORD_RE.sub(":****@", url, count=1)


def make_engine(database_url: str) -> Engine:
    kwargs: dict = {}
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url.rstrip("/") == "sqlite:"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = create_engine(database_url, **kwargs)
    logger.info("Database connection initialized: %s", sanitize_url(database_url))
    return engine


class BoardStore:
    """Single-table relational storage for shared boards."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> "BoardStore":
        return cls(make_engine(database_url))

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    def insert(
        self,
        board_id: str,
        words: list[str],
        board: list[list[str | None]],
        *,
        now: datetime | None = None,
    ) -> None:
        now = now or utcnow()
        with self._sessions.begin() as session:
            session.add(
                BoardRecord(id=board_id, words=list(words), board=[list(r) for r in board], created_at=now, updated_at=now)
            )

    def fetch(self, board_id: str) -> StoredBoard | None:
        with self._sessions() as session:
            record = session.get(BoardRecord, board_id)
            if record is None:
                return None
            return StoredBoard(
                id=record.id,
                words=list(record.words),
                board=[list(row) for row in record.board],
                created_at=record.created_at,
                updated_at=record.updated_at,
            )

    def list_created_before(self, cutoff: datetime) -> list[str]:
        with self._sessions() as session:
            stmt = select(BoardRecord.id).where(BoardRecord.created_at < cutoff).order_by(BoardRecord.created_at)
            return list(session.scalars(stmt))

    def delete_created_before(self, cutoff: datetime) -> list[str]:
        with self._sessions.begin() as session:
            stmt = select(BoardRecord.id).where(BoardRecord.created_at < cutoff).order_by(BoardRecord.created_at)
            ids = list(session.scalars(stmt))
            if ids:
                session.execute(delete(BoardRecord).where(BoardRecord.id.in_(ids)))
            return ids
