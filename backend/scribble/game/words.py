from __future__ import annotations

import random


DEFAULT_WORDS = [
    "banana",
    "computer",
    "skribbl",
    "react",
    "nodejs",
    "typescript",
    "socket",
    "apple",
    "guitar",
    "house",
    "jungle",
    "pizza",
    "elephant",
    "airplane",
    "coffee",
    "mountain",
    "beach",
]


def pick_words(words: list[str], count: int, rng: random.Random | None = None) -> list[str]:
    """Draw up to ``count`` distinct words, without replacement."""
    pool = list(dict.fromkeys(w for w in words if w))
    if count <= 0 or not pool:
        return []
    return (rng or random).sample(pool, min(count, len(pool)))


def word_blanks(word: str) -> str:
    return "_ " * len(word)
