from __future__ import annotations

from typing import Annotated, Any

import pydantic
from pydantic import BaseModel, Field, StringConstraints, TypeAdapter

from .errors import ValidationError


MIN_PERSISTED_WORDS = 24
MAX_PERSISTED_WORDS = 200
MAX_WORD_LENGTH = 100
MIN_ID_LENGTH = 8
MAX_ID_LENGTH = 12

Word = Annotated[str, StringConstraints(min_length=1, max_length=MAX_WORD_LENGTH)]
BoardRow = Annotated[list[str | None], Field(min_length=5, max_length=5)]
BoardId = Annotated[str, StringConstraints(min_length=MIN_ID_LENGTH, max_length=MAX_ID_LENGTH)]

_board_id_adapter = TypeAdapter(BoardId)


class CreateBoardRequest(BaseModel):
    words: list[Word] = Field(min_length=MIN_PERSISTED_WORDS, max_length=MAX_PERSISTED_WORDS)
    board: list[BoardRow] = Field(min_length=5, max_length=5)


def _issues(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    issues: list[dict[str, str]] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        issues.append({"field": field, "message": err["msg"]})
    return issues


def parse_create_request(payload: Any) -> CreateBoardRequest:
    try:
        return CreateBoardRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid board data", issues=_issues(exc)) from exc


def validate_board_id(value: Any) -> str:
    try:
        return _board_id_adapter.validate_python(value)
    except pydantic.ValidationError as exc:
        issues = [{**issue, "field": "id"} for issue in _issues(exc)]
        raise ValidationError("Invalid board ID", issues=issues) from exc
