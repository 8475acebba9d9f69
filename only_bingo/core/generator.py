from __future__ import annotations

import random
from typing import Sequence

from .errors import ValidationError


BOARD_SIZE = 5
FREE = None
FREE_ROW = 2
FREE_COL = 2
MIN_WORDS = BOARD_SIZE * BOARD_SIZE - 1

Cell = str | None
Board = list[list[Cell]]


def shuffle_words(words: Sequence[str], rng: random.Random) -> list[str]:
    shuffled = list(words)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def generate_board(
    words: Sequence[str],
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> Board:
    if len(words) < MIN_WORDS:
        raise ValidationError(f"Need at least {MIN_WORDS} words, got {len(words)}")

    rng = rng or random.Random(seed)
    selected = shuffle_words(words, rng)[:MIN_WORDS]

    return [
        selected[0:5],
        selected[5:10],
        [*selected[10:12], FREE, *selected[12:14]],
        selected[14:19],
        selected[19:24],
    ]
