from __future__ import annotations


class BingoError(Exception):
    status_code = 500
    public_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


class ValidationError(BingoError, ValueError):
    """Client-correctable input problem; ``issues`` lists each failed constraint."""

    status_code = 400
    public_message = "Invalid input"

    def __init__(self, message: str | None = None, *, issues: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.issues: list[dict[str, str]] = list(issues or [])


class NotFoundError(BingoError):
    status_code = 404
    public_message = "Not found"


class InternalError(BingoError):
    status_code = 500
    public_message = "Internal error"
