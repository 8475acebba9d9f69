from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class ParseResult:
    words: list[str]
    duplicate_words: list[str]


def _iter_nonempty_lines(text: str) -> Iterable[str]:
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        yield line


def _normalize(word: str) -> str:
    return word.strip().casefold()


def find_duplicate_words(words: Sequence[str]) -> list[str]:
    counts = Counter(_normalize(w) for w in words)
    duplicates: list[str] = []
    seen: set[str] = set()
    for word in words:
        if counts[_normalize(word)] > 1 and word not in seen:
            seen.add(word)
            duplicates.append(word)
    return duplicates


def parse_word_list_text(text: str) -> ParseResult:
    words = list(_iter_nonempty_lines(text))
    return ParseResult(words=words, duplicate_words=find_duplicate_words(words))
