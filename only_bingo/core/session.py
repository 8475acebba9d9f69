from __future__ import annotations

import random
import threading
from typing import Callable, Protocol, Sequence

from .checker import ClickState, has_bingo, new_click_state
from .generator import BOARD_SIZE, MIN_WORDS, Board, generate_board
from .errors import ValidationError
from .parser import find_duplicate_words, parse_word_list_text


CELEBRATION_SECONDS = 3.0

Listener = Callable[["BoardSession", str], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class BoardSession:
    """
    State for a single player's board.

    Every mutation goes through a method that keeps the board, the click
    state and the bingo/celebration flags consistent, then notifies
    subscribers with the name of each field that changed.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        celebration_seconds: float = CELEBRATION_SECONDS,
    ) -> None:
        self._rng = rng or random.Random()
        self._scheduler = scheduler or ThreadingScheduler()
        self._celebration_seconds = celebration_seconds

        self._words_input = ""
        self._words: list[str] = []
        self._duplicate_words: list[str] = []
        self._board: Board = []
        self._clicked: ClickState = []
        self._bingo = False
        self._is_exploding = False

        self._listeners: list[Listener] = []
        self._celebration: TimerHandle | None = None
        self._generation = 0

    @property
    def words_input(self) -> str:
        return self._words_input

    @property
    def words(self) -> list[str]:
        return list(self._words)

    @property
    def duplicate_words(self) -> list[str]:
        return list(self._duplicate_words)

    @property
    def board(self) -> Board:
        return [list(row) for row in self._board]

    @property
    def clicked(self) -> ClickState:
        return [list(row) for row in self._clicked]

    @property
    def bingo(self) -> bool:
        return self._bingo

    @property
    def is_exploding(self) -> bool:
        return self._is_exploding

    @property
    def has_board(self) -> bool:
        return bool(self._board)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *fields: str) -> None:
        for field in fields:
            for listener in list(self._listeners):
                listener(self, field)

    def set_words_input(self, text: str) -> None:
        parsed = parse_word_list_text(text)
        self._words_input = text
        self._words = parsed.words
        self._duplicate_words = parsed.duplicate_words
        self._notify("words_input", "words", "duplicate_words")

    def create_board(self) -> None:
        if len(self._words) < MIN_WORDS:
            raise ValidationError(f"Need at least {MIN_WORDS} words")
        self._start_new_board(generate_board(self._words, rng=self._rng))

    def load_board(self, words: Sequence[str], saved_board: Board | None = None) -> None:
        # The saved layout is intentionally ignored; a shared link carries the
        # word pool and every visitor gets their own shuffle.
        board = generate_board(words, rng=self._rng)
        self._words = list(words)
        self._words_input = "\n".join(self._words)
        self._duplicate_words = find_duplicate_words(self._words)
        self._notify("words_input", "words", "duplicate_words")
        self._start_new_board(board)

    def toggle_cell(self, row: int, col: int) -> None:
        if not self._board:
            return
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            return

        self._clicked[row][col] = not self._clicked[row][col]
        self._notify("clicked")
        self._check_for_bingo()

    def _check_for_bingo(self) -> None:
        won = has_bingo(self._clicked)
        if won and not self._bingo:
            self._bingo = True
            self._is_exploding = True
            self._start_celebration()
            self._notify("bingo", "is_exploding")
        elif not won and self._bingo:
            self._bingo = False
            self._notify("bingo")

    def _start_celebration(self) -> None:
        self._cancel_celebration()
        generation = self._generation

        def finish() -> None:
            if generation != self._generation or not self._is_exploding:
                return
            self._is_exploding = False
            self._celebration = None
            self._notify("is_exploding")

        self._celebration = self._scheduler.schedule(self._celebration_seconds, finish)

    def _cancel_celebration(self) -> None:
        if self._celebration is not None:
            self._celebration.cancel()
            self._celebration = None

    def _start_new_board(self, board: Board) -> None:
        self._cancel_celebration()
        self._generation += 1
        self._board = board
        self._clicked = new_click_state()
        self._bingo = False
        self._is_exploding = False
        self._notify("board", "clicked", "bingo", "is_exploding")
