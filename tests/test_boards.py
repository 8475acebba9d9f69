from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from only_bingo.core.boards import BoardService
from only_bingo.core.errors import InternalError, NotFoundError, ValidationError
from only_bingo.core.generator import generate_board
from only_bingo.core.store import BOARD_ID_ALPHABET, generate_board_id, sanitize_url
from only_bingo.core.validation import parse_create_request, validate_board_id


def _payload(words):
    return {"words": words, "board": generate_board(words, seed=1)}


def test_create_then_get_round_trips(service, words):
    payload = _payload(words)
    created = service.create(payload)

    assert len(created["id"]) == 10
    assert service.get(created["id"]) == payload


def test_get_does_not_expose_timestamps(service, words):
    created = service.create(_payload(words))
    assert set(service.get(created["id"])) == {"words", "board"}


def test_create_stores_timestamps(service, store, words):
    created = service.create(_payload(words))
    stored = store.fetch(created["id"])
    assert isinstance(stored.created_at, datetime)
    assert stored.created_at == stored.updated_at


def test_get_missing_board_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.get("abcdefghij")


@pytest.mark.parametrize("board_id", ["abcde", "", "x" * 13, None, 12345678])
def test_get_rejects_malformed_ids(service, board_id):
    with pytest.raises(ValidationError) as excinfo:
        service.get(board_id)
    assert excinfo.value.issues[0]["field"] == "id"


@pytest.mark.parametrize(
    "mutate,field",
    [
        (lambda p: p.update(words=p["words"][:23]), "words"),
        (lambda p: p.update(words=p["words"] + [f"extra {i}" for i in range(177)]), "words"),
        (lambda p: p["words"].__setitem__(3, ""), "words.3"),
        (lambda p: p["words"].__setitem__(0, "x" * 101), "words.0"),
        (lambda p: p["board"].pop(), "board"),
        (lambda p: p["board"][1].append("sixth"), "board.1"),
        (lambda p: p["board"][4].__setitem__(0, 7), "board.4.0"),
        (lambda p: p.pop("board"), "board"),
    ],
)
def test_create_rejects_invalid_payloads(service, store, words, mutate, field):
    payload = _payload(words)
    mutate(payload)
    with pytest.raises(ValidationError) as excinfo:
        service.create(payload)
    assert field in [issue["field"] for issue in excinfo.value.issues]


def test_create_accepts_200_words(service):
    words = [f"w{i}" for i in range(200)]
    created = service.create(_payload(words))
    assert service.get(created["id"])["words"] == words


@pytest.mark.parametrize("payload", [None, [], "words"])
def test_create_rejects_non_object_body(service, payload):
    with pytest.raises(ValidationError) as excinfo:
        service.create(payload)
    assert excinfo.value.issues[0]["field"] == "body"


def test_validation_happens_before_storage(words):
    class ExplodingStore:
        def insert(self, *args, **kwargs):
            raise AssertionError("store touched")

        def fetch(self, *args, **kwargs):
            raise AssertionError("store touched")

    service = BoardService(ExplodingStore())
    with pytest.raises(ValidationError):
        service.create({"words": words[:3], "board": []})
    with pytest.raises(ValidationError):
        service.get("short")


def test_storage_failure_is_internal_error(words, caplog):
    class BrokenStore:
        def insert(self, *args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("connection refused"))

        def fetch(self, *args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

    service = BoardService(BrokenStore(), id_factory=lambda: "fixedid123")
    with pytest.raises(InternalError) as excinfo:
        service.create(_payload(words))
    assert str(excinfo.value) == "Failed to create board"
    assert "fixedid123" in caplog.text

    with pytest.raises(InternalError) as excinfo:
        service.get("fixedid123")
    assert str(excinfo.value) == "Failed to fetch board"


def test_duplicate_id_is_rejected_by_storage(store, words):
    service = BoardService(store, id_factory=lambda: "collision1")
    service.create(_payload(words))
    with pytest.raises(InternalError):
        service.create(_payload(words))


def test_generate_board_id_uses_url_safe_alphabet():
    ids = {generate_board_id() for _ in range(200)}
    assert len(ids) == 200
    for board_id in ids:
        assert len(board_id) == 10
        assert set(board_id) <= set(BOARD_ID_ALPHABET)
        assert validate_board_id(board_id) == board_id


def test_parse_create_request_ignores_unknown_keys(words):
    payload = _payload(words)
    payload["extra"] = True
    request = parse_create_request(payload)
    assert request.words == words


def test_sanitize_url_hides_password():
    assert sanitize_url("postgresql://bingo:s3cret@db:5432/bingo") == "postgresql://bingo:****@db:5432/bingo"
    assert sanitize_url("sqlite://") == "sqlite://"


def test_unexpected_store_failure_is_internal_error(words):
    class FlakyStore:
        def insert(self, *args, **kwargs):
            raise RuntimeError("disk full")

        def fetch(self, *args, **kwargs):
            raise KeyError("words")

    service = BoardService(FlakyStore())
    with pytest.raises(InternalError, match="Failed to create board"):
        service.create(_payload(words))
    with pytest.raises(InternalError, match="Failed to fetch board"):
        service.get("abcdefghij")
