from __future__ import annotations

from typing import Sequence

from .generator import BOARD_SIZE, FREE_COL, FREE_ROW


ClickState = list[list[bool]]


def new_click_state() -> ClickState:
    clicked = [[False] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    clicked[FREE_ROW][FREE_COL] = True
    return clicked


def has_bingo(clicked: Sequence[Sequence[bool]]) -> bool:
    """Return True when any row, column or diagonal is fully marked."""
    n = BOARD_SIZE
    if len(clicked) != n or any(len(row) != n for row in clicked):
        raise ValueError(f"Click state must be {n}x{n}")

    for i in range(n):
        if all(clicked[i][c] for c in range(n)):
            return True

    for i in range(n):
        if all(clicked[r][i] for r in range(n)):
            return True

    if all(clicked[i][i] for i in range(n)):
        return True
    if all(clicked[i][n - 1 - i] for i in range(n)):
        return True

    return False
